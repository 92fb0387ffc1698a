"""Tests for DatasetManager against the in-memory data sets service."""

import pytest

from constants import ACCESS_LEVELS
from managers.dataset_manager import DatasetManager
from managers.dataset_models import DatasetDetail, DatasetEntry, DatasetSummary
from managers.exceptions import (
    DatasetNotFoundError, NoSessionError, RemoteOperationError, ValidationError,
)
from tests.conftest import FakeVCenter


def _create_admin_ds(manager, **overrides):
    kwargs = dict(name="admin-ds", vm_ref="vm-26", guest_access="NONE", host_access="READ_WRITE")
    kwargs.update(overrides)
    manager.create_dataset(**kwargs)


class TestSession:
    def test_constructor_rejects_disconnected_vcenter(self, fake_api):
        with pytest.raises(NoSessionError):
            DatasetManager(FakeVCenter(connected=False), api=fake_api)

    @pytest.mark.parametrize("call", [
        lambda m: m.create_dataset("admin-ds", "vm-26", "NONE", "READ_WRITE"),
        lambda m: m.get_dataset("vm-26"),
        lambda m: m.get_dataset("vm-26", name="admin-ds"),
        lambda m: m.delete_dataset("admin-ds", "vm-26"),
        lambda m: m.set_dataset_entry("vm-26", "admin-ds", "Location", "Palo Alto"),
        lambda m: m.get_dataset_entry("vm-26", "admin-ds"),
        lambda m: m.delete_dataset_entry("Location", "vm-26", "admin-ds"),
    ])
    def test_lost_session_fails_before_any_remote_call(self, manager, vcenter, fake_api, call):
        vcenter.connected = False
        with pytest.raises(NoSessionError):
            call(manager)
        assert fake_api.calls == []

    def test_session_check_precedes_validation(self, manager, vcenter, fake_api):
        vcenter.connected = False
        with pytest.raises(NoSessionError):
            manager.create_dataset("admin-ds", "vm-26", "bogus", "bogus")


class TestCreateDataset:
    @pytest.mark.parametrize("guest", ACCESS_LEVELS)
    @pytest.mark.parametrize("host", ACCESS_LEVELS)
    def test_accepts_every_access_combination(self, manager, fake_api, guest, host):
        manager.create_dataset("ds", "vm-26", guest, host)
        assert fake_api.calls[-1][0] == "create_data_set"

    @pytest.mark.parametrize("bad", ["", "none", "READ", "WRITE", "READWRITE", "read_only", None])
    def test_rejects_unknown_guest_access_locally(self, manager, fake_api, bad):
        with pytest.raises(ValidationError):
            manager.create_dataset("ds", "vm-26", bad, "NONE")
        assert fake_api.calls == []

    @pytest.mark.parametrize("bad", ["ALL", "Read_Write", " NONE"])
    def test_rejects_unknown_host_access_locally(self, manager, fake_api, bad):
        with pytest.raises(ValidationError):
            manager.create_dataset("ds", "vm-26", "NONE", bad)
        assert fake_api.calls == []

    @pytest.mark.parametrize("field", ["name", "vm_ref"])
    def test_required_fields(self, manager, fake_api, field):
        kwargs = dict(name="ds", vm_ref="vm-26", guest_access="NONE", host_access="NONE")
        kwargs[field] = ""
        with pytest.raises(ValidationError, match=field):
            manager.create_dataset(**kwargs)
        assert fake_api.calls == []

    def test_sends_rest_spec_with_defaults(self, manager, fake_api):
        _create_admin_ds(manager)
        assert fake_api.calls == [("create_data_set", "vm-26", {
            "name": "admin-ds",
            "description": "",
            "guest": "NONE",
            "host": "READ_WRITE",
            "omit_from_snapshot_and_clone": False,
        })]

    def test_create_then_get_round_trip(self, manager):
        _create_admin_ds(manager, description="Admin metadata", omit_from_snapshot_clone=True)

        details = manager.get_dataset("vm-26", name="admin-ds")

        assert details == [DatasetDetail(
            name="admin-ds",
            description="Admin metadata",
            guest_access="NONE",
            host_access="READ_WRITE",
            omit_from_snapshot_clone=True,
            used=0,
        )]

    def test_duplicate_names_are_left_to_the_server(self, manager, fake_api):
        _create_admin_ds(manager)
        _create_admin_ds(manager, description="second")
        assert [c[0] for c in fake_api.calls] == ["create_data_set", "create_data_set"]
        assert len(manager.get_dataset("vm-26", name="admin-ds")) == 2


class TestGetDataset:
    def test_list_returns_summaries_for_that_vm_only(self, manager):
        _create_admin_ds(manager, description="a")
        _create_admin_ds(manager, name="app-ds", description="b")
        _create_admin_ds(manager, name="other", vm_ref="vm-27")

        summaries = manager.get_dataset("vm-26")

        assert summaries == [DatasetSummary("admin-ds", "a"), DatasetSummary("app-ds", "b")]
        assert all(not hasattr(s, "guest_access") for s in summaries)

    def test_unknown_name_is_empty(self, manager):
        _create_admin_ds(manager)
        assert manager.get_dataset("vm-26", name="missing") == []

    def test_empty_vm(self, manager):
        assert manager.get_dataset("vm-99") == []

    def test_vm_ref_required(self, manager, fake_api):
        with pytest.raises(ValidationError):
            manager.get_dataset("")
        assert fake_api.calls == []


class TestDeleteDataset:
    def test_delete_then_get_is_empty(self, manager):
        _create_admin_ds(manager)
        manager.delete_dataset("admin-ds", "vm-26")
        assert manager.get_dataset("vm-26", name="admin-ds") == []
        assert manager.get_dataset("vm-26") == []

    def test_delete_unknown_name(self, manager, fake_api):
        with pytest.raises(DatasetNotFoundError) as exc_info:
            manager.delete_dataset("missing", "vm-26")
        assert isinstance(exc_info.value, RemoteOperationError)
        assert "DeleteDataset" in str(exc_info.value)
        assert [c[0] for c in fake_api.calls] == ["list_data_sets"]

    def test_non_empty_requires_force(self, manager):
        _create_admin_ds(manager)
        manager.set_dataset_entry("vm-26", "admin-ds", "Location", "Palo Alto")

        with pytest.raises(RemoteOperationError):
            manager.delete_dataset("admin-ds", "vm-26")
        manager.delete_dataset("admin-ds", "vm-26", force=True)

        assert manager.get_dataset("vm-26") == []


class TestEntries:
    def test_set_calls_remote_exactly_once(self, manager, fake_api):
        _create_admin_ds(manager)
        fake_api.calls.clear()

        manager.set_dataset_entry("vm-26", "admin-ds", "Location", "Palo Alto")

        assert [c[0] for c in fake_api.calls] == ["list_data_sets", "set_entry"]

    def test_set_is_idempotent_and_updates_in_place(self, manager):
        _create_admin_ds(manager)
        manager.set_dataset_entry("vm-26", "admin-ds", "Location", "Palo Alto")
        manager.set_dataset_entry("vm-26", "admin-ds", "Location", "Palo Alto")
        assert manager.get_dataset_entry("vm-26", "admin-ds", name="Location") == [
            DatasetEntry("Location", "Palo Alto")]

        manager.set_dataset_entry("vm-26", "admin-ds", "Location", "Sydney")
        assert manager.get_dataset_entry("vm-26", "admin-ds") == [DatasetEntry("Location", "Sydney")]

    def test_list_entries(self, manager):
        _create_admin_ds(manager)
        manager.set_dataset_entry("vm-26", "admin-ds", "Location", "Palo Alto")
        manager.set_dataset_entry("vm-26", "admin-ds", "Owner", "ops")

        entries = manager.get_dataset_entry("vm-26", "admin-ds")

        assert sorted(entries, key=lambda e: e.name) == [
            DatasetEntry("Location", "Palo Alto"), DatasetEntry("Owner", "ops")]

    def test_entry_in_unknown_dataset(self, manager, fake_api):
        with pytest.raises(DatasetNotFoundError):
            manager.set_dataset_entry("vm-26", "missing", "Location", "Palo Alto")
        assert [c[0] for c in fake_api.calls] == ["list_data_sets"]

    def test_value_is_required(self, manager, fake_api):
        with pytest.raises(ValidationError, match="value"):
            manager.set_dataset_entry("vm-26", "admin-ds", "Count", None)
        assert fake_api.calls == []

    def test_empty_value_is_allowed(self, manager):
        _create_admin_ds(manager)
        manager.set_dataset_entry("vm-26", "admin-ds", "Flag", "")
        assert manager.get_dataset_entry("vm-26", "admin-ds", name="Flag") == [DatasetEntry("Flag", "")]

    def test_palo_alto_scenario(self, manager):
        manager.create_dataset(name="admin-ds", vm_ref="vm-26", guest_access="NONE", host_access="READ_WRITE")
        manager.set_dataset_entry(vm_ref="vm-26", dataset="admin-ds", name="Location", value="Palo Alto")

        entries = manager.get_dataset_entry(vm_ref="vm-26", dataset="admin-ds", name="Location")
        assert [e.value for e in entries] == ["Palo Alto"]

        manager.delete_dataset_entry(name="Location", vm_ref="vm-26", dataset="admin-ds")

        assert manager.get_dataset_entry(vm_ref="vm-26", dataset="admin-ds") == []
        with pytest.raises(RemoteOperationError) as exc_info:
            manager.get_dataset_entry(vm_ref="vm-26", dataset="admin-ds", name="Location")
        assert exc_info.value.status_code == 404

    def test_delete_missing_entry_surfaces_remote_error(self, manager):
        _create_admin_ds(manager)
        with pytest.raises(RemoteOperationError, match="DeleteDatasetEntry"):
            manager.delete_dataset_entry("nope", "vm-26", "admin-ds")

    def test_failure_does_not_affect_later_operations(self, manager):
        _create_admin_ds(manager)
        with pytest.raises(RemoteOperationError):
            manager.delete_dataset_entry("nope", "vm-26", "admin-ds")
        manager.set_dataset_entry("vm-26", "admin-ds", "Location", "Palo Alto")
        assert manager.get_dataset_entry("vm-26", "admin-ds") == [DatasetEntry("Location", "Palo Alto")]
