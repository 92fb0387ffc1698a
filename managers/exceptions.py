"""Exceptions raised by the data set manager and REST client."""


class DatasetError(Exception):
    """Base class for every data set operation failure."""


class NoSessionError(DatasetError):
    """Raised when no active vCenter session is available."""

    def __init__(self, message="VCenter instance is not connected. Please establish a connection first."):
        super().__init__(message)


class ValidationError(DatasetError):
    """Raised when a parameter fails a local check. No remote call is made."""

    def __init__(self, operation, message):
        self.operation = operation
        self.message = message
        super().__init__(f"{operation}: {message}")


class RemoteOperationError(DatasetError):
    """
    Raised when the remote data sets service call fails.

    :param operation: Name of the operation that failed (e.g. 'CreateDataset').
    :param message: The underlying failure message.
    :param status_code: HTTP status code, if the server answered at all.
    """

    def __init__(self, operation, message, status_code=None):
        self.operation = operation
        self.message = message
        self.status_code = status_code
        super().__init__(f"{operation} failed: {message}")


class DatasetNotFoundError(RemoteOperationError):
    """Raised when a data set name does not exist on the target VM."""

    def __init__(self, operation, vm_ref, name):
        self.vm_ref = vm_ref
        self.name = name
        super().__init__(operation, f"Data set '{name}' not found on VM '{vm_ref}'.", status_code=404)
