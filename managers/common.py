import functools

from managers.exceptions import NoSessionError


def requires_connection(func):
    """Decorator to ensure a vCenter session is active before calling the method."""
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs):
        if not self.vcenter.is_connected():
            self.logger.error(f"{func.__name__}: not connected to vCenter.")
            raise NoSessionError()
        return func(self, *args, **kwargs)
    return wrapper
