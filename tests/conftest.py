"""Shared fixtures: an in-memory data sets service and a fake vCenter session."""

import logging
from unittest.mock import MagicMock

import pytest

from managers.exceptions import RemoteOperationError


class FakeDataSetsApi:
    """In-memory stand-in for DataSetsApi that records every call."""

    def __init__(self):
        self.calls = []
        self.data_sets = {}  # (vm_ref, id) -> info dict
        self.entries = {}  # (vm_ref, id) -> {key: value}
        self._next_id = 1

    def _info(self, operation, vm_ref, data_set):
        try:
            return self.data_sets[(vm_ref, data_set)]
        except KeyError:
            raise RemoteOperationError(operation, f"Data set {data_set} not found.", status_code=404)

    def create_data_set(self, operation, vm_ref, spec):
        self.calls.append(("create_data_set", vm_ref, spec))
        data_set = str(self._next_id)
        self._next_id += 1
        self.data_sets[(vm_ref, data_set)] = dict(spec, used=0)
        self.entries[(vm_ref, data_set)] = {}
        return data_set

    def list_data_sets(self, operation, vm_ref):
        self.calls.append(("list_data_sets", vm_ref))
        return [
            {"data_set": ds_id, "name": info["name"], "description": info["description"]}
            for (vm, ds_id), info in self.data_sets.items() if vm == vm_ref
        ]

    def get_data_set(self, operation, vm_ref, data_set):
        self.calls.append(("get_data_set", vm_ref, data_set))
        return dict(self._info(operation, vm_ref, data_set))

    def delete_data_set(self, operation, vm_ref, data_set, force=False):
        self.calls.append(("delete_data_set", vm_ref, data_set, force))
        self._info(operation, vm_ref, data_set)
        if self.entries[(vm_ref, data_set)] and not force:
            raise RemoteOperationError(operation, "Data set is not empty.", status_code=400)
        del self.data_sets[(vm_ref, data_set)]
        del self.entries[(vm_ref, data_set)]

    def set_entry(self, operation, vm_ref, data_set, key, value):
        self.calls.append(("set_entry", vm_ref, data_set, key, value))
        self._info(operation, vm_ref, data_set)
        self.entries[(vm_ref, data_set)][key] = value
        self.data_sets[(vm_ref, data_set)]["used"] = sum(
            len(k) + len(v) for k, v in self.entries[(vm_ref, data_set)].items())

    def list_entries(self, operation, vm_ref, data_set):
        self.calls.append(("list_entries", vm_ref, data_set))
        self._info(operation, vm_ref, data_set)
        return list(self.entries[(vm_ref, data_set)])

    def get_entry(self, operation, vm_ref, data_set, key):
        self.calls.append(("get_entry", vm_ref, data_set, key))
        self._info(operation, vm_ref, data_set)
        try:
            return self.entries[(vm_ref, data_set)][key]
        except KeyError:
            raise RemoteOperationError(operation, f"Entry {key} not found.", status_code=404)

    def delete_entry(self, operation, vm_ref, data_set, key):
        self.calls.append(("delete_entry", vm_ref, data_set, key))
        self._info(operation, vm_ref, data_set)
        try:
            del self.entries[(vm_ref, data_set)][key]
        except KeyError:
            raise RemoteOperationError(operation, f"Entry {key} not found.", status_code=404)


class FakeVCenter:
    """A connected VCenter look-alike. VM names map to ids through 'vms'."""

    def __init__(self, connected=True, vms=None):
        self.connected = connected
        self.connection = MagicMock() if connected else None
        self.rest_session = MagicMock() if connected else None
        self.api_url = "https://vc.example.com:443"
        self.logger = logging.getLogger('vmdatasets.vcenter')
        self.vms = vms or {}

    def is_connected(self):
        return self.connected

    def get_vm_moref(self, vm):
        if vm.startswith("vm-"):
            return vm
        return self.vms.get(vm)


@pytest.fixture
def fake_api():
    return FakeDataSetsApi()


@pytest.fixture
def vcenter():
    return FakeVCenter(vms={"web-01": "vm-26", "db-01": "vm-27"})


@pytest.fixture
def manager(vcenter, fake_api):
    from managers.dataset_manager import DatasetManager
    return DatasetManager(vcenter, api=fake_api)


@pytest.fixture(autouse=True)
def _reset_vmdatasets_logger():
    """Drop handlers that setup_logger attached during a test."""
    yield
    root = logging.getLogger('vmdatasets')
    for handler in list(root.handlers):
        handler.close()
        root.removeHandler(handler)
    root.propagate = True
