from managers.vcenter import VCenter
from managers.common import requires_connection
from managers.datasets_api import DataSetsApi
from managers.dataset_models import DatasetSummary, DatasetDetail, DatasetEntry
from managers.exceptions import NoSessionError, ValidationError, DatasetNotFoundError
from constants import (
    ACCESS_LEVELS, OP_CREATE_DATASET, OP_GET_DATASET, OP_DELETE_DATASET,
    OP_SET_DATASET_ENTRY, OP_GET_DATASET_ENTRY, OP_DELETE_DATASET_ENTRY,
)


class DatasetManager(VCenter):
    """
    Create, read and delete vSphere data sets and their entries.

    Every operation checks the vCenter session first, validates its inputs,
    and only then talks to the data sets service. Failures are raised as
    DatasetError subclasses scoped to the single call.
    """

    def __init__(self, vcenter_instance, api=None):
        if not vcenter_instance.is_connected():
            raise NoSessionError()
        self.vcenter = vcenter_instance
        self.connection = vcenter_instance.connection
        self.logger = vcenter_instance.logger
        self.api = api or DataSetsApi(vcenter_instance.rest_session, vcenter_instance.api_url)

    # --- Validation helpers ---

    @staticmethod
    def _require(operation, **fields):
        for field, value in fields.items():
            if not isinstance(value, str) or not value.strip():
                raise ValidationError(operation, f"'{field}' is required and must be a non-empty string.")

    @staticmethod
    def _check_access(operation, field, value):
        if value not in ACCESS_LEVELS:
            raise ValidationError(
                operation, f"invalid {field} '{value}'. Expected one of: {', '.join(ACCESS_LEVELS)}."
            )

    def _resolve_data_set_ids(self, operation, vm_ref, name):
        """Returns the identifiers of every data set on the VM named 'name'."""
        summaries = self.api.list_data_sets(operation, vm_ref)
        return [s.get("data_set") for s in summaries if s.get("name") == name]

    def _resolve_data_set_id(self, operation, vm_ref, name):
        ids = self._resolve_data_set_ids(operation, vm_ref, name)
        if not ids:
            raise DatasetNotFoundError(operation, vm_ref, name)
        return ids[0]

    # --- Data sets ---

    @requires_connection
    def create_dataset(self, name, vm_ref, guest_access, host_access, description="",
                       omit_from_snapshot_clone=False):
        """
        Creates a data set on a virtual machine.

        :param name: Name of the data set, unique within the VM.
        :param vm_ref: Managed object id of the VM (e.g. 'vm-26').
        :param guest_access: NONE, READ_ONLY or READ_WRITE access for the guest OS.
        :param host_access: NONE, READ_ONLY or READ_WRITE access for host-side infrastructure.
        :param description: Free text description.
        :param omit_from_snapshot_clone: Leave the data set out of snapshots and clones.
        """
        self._require(OP_CREATE_DATASET, name=name, vm_ref=vm_ref)
        self._check_access(OP_CREATE_DATASET, "guest_access", guest_access)
        self._check_access(OP_CREATE_DATASET, "host_access", host_access)
        if description is None:
            description = ""

        spec = {
            "name": name,
            "description": description,
            "guest": guest_access,
            "host": host_access,
            "omit_from_snapshot_and_clone": omit_from_snapshot_clone,
        }
        data_set_id = self.api.create_data_set(OP_CREATE_DATASET, vm_ref, spec)
        self.logger.info(f"Data set '{name}' created on VM '{vm_ref}' (id: {data_set_id}).")

    @requires_connection
    def get_dataset(self, vm_ref, name=None):
        """
        Reads data sets of a virtual machine.

        With a name, returns a DatasetDetail for every data set with that name
        (an empty list if there is none). Without a name, returns a
        DatasetSummary for every data set on the VM.
        """
        self._require(OP_GET_DATASET, vm_ref=vm_ref)
        if name is None:
            summaries = self.api.list_data_sets(OP_GET_DATASET, vm_ref)
            return [DatasetSummary.from_api(s) for s in summaries]

        self._require(OP_GET_DATASET, name=name)
        details = []
        for data_set_id in self._resolve_data_set_ids(OP_GET_DATASET, vm_ref, name):
            details.append(DatasetDetail.from_api(self.api.get_data_set(OP_GET_DATASET, vm_ref, data_set_id)))
        self.logger.debug(f"Found {len(details)} data set(s) named '{name}' on VM '{vm_ref}'.")
        return details

    @requires_connection
    def delete_dataset(self, name, vm_ref, force=False):
        """Deletes the named data set. 'force' removes it even if it still holds entries."""
        self._require(OP_DELETE_DATASET, name=name, vm_ref=vm_ref)
        data_set_id = self._resolve_data_set_id(OP_DELETE_DATASET, vm_ref, name)
        self.api.delete_data_set(OP_DELETE_DATASET, vm_ref, data_set_id, force=force)
        self.logger.info(f"Data set '{name}' deleted from VM '{vm_ref}'.")

    # --- Entries ---

    @requires_connection
    def set_dataset_entry(self, vm_ref, dataset, name, value):
        """Creates the entry, or overwrites its value if it already exists."""
        self._require(OP_SET_DATASET_ENTRY, vm_ref=vm_ref, dataset=dataset, name=name)
        if value is None:
            raise ValidationError(OP_SET_DATASET_ENTRY, "'value' is required.")
        data_set_id = self._resolve_data_set_id(OP_SET_DATASET_ENTRY, vm_ref, dataset)
        self.api.set_entry(OP_SET_DATASET_ENTRY, vm_ref, data_set_id, name, value)
        self.logger.info(f"Entry '{name}' set in data set '{dataset}' on VM '{vm_ref}'.")

    @requires_connection
    def get_dataset_entry(self, vm_ref, dataset, name=None):
        """
        Reads entries of a data set. With a name, returns the single matching
        entry; without one, every entry in the data set.
        """
        self._require(OP_GET_DATASET_ENTRY, vm_ref=vm_ref, dataset=dataset)
        if name is not None:
            self._require(OP_GET_DATASET_ENTRY, name=name)
        data_set_id = self._resolve_data_set_id(OP_GET_DATASET_ENTRY, vm_ref, dataset)
        keys = [name] if name is not None else self.api.list_entries(OP_GET_DATASET_ENTRY, vm_ref, data_set_id)
        return [
            DatasetEntry(name=key, value=self.api.get_entry(OP_GET_DATASET_ENTRY, vm_ref, data_set_id, key))
            for key in keys
        ]

    @requires_connection
    def delete_dataset_entry(self, name, vm_ref, dataset):
        self._require(OP_DELETE_DATASET_ENTRY, name=name, vm_ref=vm_ref, dataset=dataset)
        data_set_id = self._resolve_data_set_id(OP_DELETE_DATASET_ENTRY, vm_ref, dataset)
        self.api.delete_entry(OP_DELETE_DATASET_ENTRY, vm_ref, data_set_id, name)
        self.logger.info(f"Entry '{name}' deleted from data set '{dataset}' on VM '{vm_ref}'.")
