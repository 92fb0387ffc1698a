import logging
from typing import Optional, Dict, List, Any, Callable

from pyVmomi import vmodl
from tabulate import tabulate

from managers.dataset_manager import DatasetManager
from managers.exceptions import DatasetError, NoSessionError, RemoteOperationError, ValidationError
from managers.vcenter import VCenter
from constants import (
    OP_CREATE_DATASET, OP_GET_DATASET, OP_DELETE_DATASET,
    OP_SET_DATASET_ENTRY, OP_GET_DATASET_ENTRY, OP_DELETE_DATASET_ENTRY,
)

logger = logging.getLogger('vmdatasets.commands')

RED = '\033[91m'
ENDC = '\033[0m'


def _split_vms(vm_arg: Optional[str]) -> List[str]:
    """Splits the comma-separated --vm value, dropping blanks and duplicates while keeping order."""
    vms = []
    for item in (vm_arg or "").split(","):
        item = item.strip()
        if item and item not in vms:
            vms.append(item)
    return vms


def print_records(title: str, records: List[Any], empty_message: str):
    """Prints data set or entry records as a table."""
    if not records:
        print(f"\n{empty_message}")
        return
    print(f"\n{title}")
    print(tabulate([r.as_row() for r in records], headers=records[0].HEADERS,
                   tablefmt="fancy_grid", disable_numparse=True))


def print_error_report(results: List[Dict[str, Any]]):
    """Prints a consolidated table of the failed operations, if any."""
    failures = [r for r in results if r.get("status") == "failed"]
    if not failures:
        return
    print("\n" + "=" * 80)
    print("                       CONSOLIDATED ERROR REPORT")
    print("=" * 80)
    headers = ["VM", "Operation", "Error"]
    error_table_data = [
        [fail.get("vm", "N/A"), fail.get("operation", "N/A"), f"{RED}{fail.get('error', 'Unknown')}{ENDC}"]
        for fail in failures
    ]
    print(tabulate(error_table_data, headers=headers, tablefmt="fancy_grid"))
    print("=" * 80)


def _error_message(error) -> str:
    """The failure message without the operation prefix."""
    if isinstance(error, (RemoteOperationError, ValidationError)):
        return error.message
    return getattr(error, 'msg', None) or str(error)


def run_for_each_vm(operation: str, args_dict: Dict[str, Any], vcenter: Optional[VCenter],
                    action: Callable[[DatasetManager, str, str], Optional[List[Any]]]) -> List[Dict[str, Any]]:
    """
    Runs 'action' once per VM named in --vm. A failure on one VM is reported
    and does not stop the remaining VMs.

    Returns:
        A list of result dicts, one per VM, each with a 'status' of
        'success' or 'failed'.
    """
    vms = _split_vms(args_dict.get("vm"))
    if not vms:
        err_msg = "No VM given. Use --vm with a VM id or name."
        logger.error(f"{operation} failed: {err_msg}")
        return [{"vm": "N/A", "operation": operation, "status": "failed", "error": err_msg}]

    try:
        if vcenter is None:
            raise NoSessionError()
        manager = DatasetManager(vcenter)
    except NoSessionError as e:
        logger.error(f"{operation} failed: {e}")
        results = [{"vm": vm, "operation": operation, "status": "failed", "error": str(e)} for vm in vms]
        print_error_report(results)
        return results

    results = []
    for vm in vms:
        try:
            vm_ref = vcenter.get_vm_moref(vm)
            if vm_ref is None:
                err_msg = f"VM '{vm}' not found."
                logger.error(f"{operation} failed for VM '{vm}': {err_msg}")
                results.append({"vm": vm, "operation": operation, "status": "failed", "error": err_msg})
                continue
            records = action(manager, vm, vm_ref)
        except (DatasetError, vmodl.MethodFault) as e:
            err_msg = _error_message(e)
            logger.error(f"{operation} failed for VM '{vm}': {err_msg}")
            results.append({"vm": vm, "operation": operation, "status": "failed", "error": err_msg})
            continue
        results.append({"vm": vm, "vm_ref": vm_ref, "operation": operation, "status": "success",
                        "records": records})

    print_error_report(results)
    return results


def create_dataset(args_dict: Dict[str, Any], vcenter: Optional[VCenter]) -> List[Dict[str, Any]]:
    def action(manager, vm, vm_ref):
        manager.create_dataset(
            name=args_dict.get("name"),
            vm_ref=vm_ref,
            guest_access=args_dict.get("guest_access"),
            host_access=args_dict.get("host_access"),
            description=args_dict.get("description") or "",
            omit_from_snapshot_clone=bool(args_dict.get("omit_from_snapshot_clone")),
        )
        print(f"Data set '{args_dict.get('name')}' created on VM '{vm}'.")
        return None
    return run_for_each_vm(OP_CREATE_DATASET, args_dict, vcenter, action)


def get_dataset(args_dict: Dict[str, Any], vcenter: Optional[VCenter]) -> List[Dict[str, Any]]:
    name = args_dict.get("name")

    def action(manager, vm, vm_ref):
        records = manager.get_dataset(vm_ref=vm_ref, name=name)
        if name is None:
            print_records(f"Data sets on VM '{vm}':", records, f"No data sets found on VM '{vm}'.")
        else:
            print_records(f"Data set '{name}' on VM '{vm}':", records,
                          f"No data set named '{name}' found on VM '{vm}'.")
        return records
    return run_for_each_vm(OP_GET_DATASET, args_dict, vcenter, action)


def delete_dataset(args_dict: Dict[str, Any], vcenter: Optional[VCenter]) -> List[Dict[str, Any]]:
    def action(manager, vm, vm_ref):
        manager.delete_dataset(name=args_dict.get("name"), vm_ref=vm_ref,
                               force=bool(args_dict.get("force")))
        print(f"Data set '{args_dict.get('name')}' deleted from VM '{vm}'.")
        return None
    return run_for_each_vm(OP_DELETE_DATASET, args_dict, vcenter, action)


def set_dataset_entry(args_dict: Dict[str, Any], vcenter: Optional[VCenter]) -> List[Dict[str, Any]]:
    def action(manager, vm, vm_ref):
        manager.set_dataset_entry(vm_ref=vm_ref, dataset=args_dict.get("dataset"),
                                  name=args_dict.get("name"), value=args_dict.get("value"))
        print(f"Entry '{args_dict.get('name')}' set in data set '{args_dict.get('dataset')}' on VM '{vm}'.")
        return None
    return run_for_each_vm(OP_SET_DATASET_ENTRY, args_dict, vcenter, action)


def get_dataset_entry(args_dict: Dict[str, Any], vcenter: Optional[VCenter]) -> List[Dict[str, Any]]:
    dataset = args_dict.get("dataset")

    def action(manager, vm, vm_ref):
        records = manager.get_dataset_entry(vm_ref=vm_ref, dataset=dataset, name=args_dict.get("name"))
        print_records(f"Entries in data set '{dataset}' on VM '{vm}':", records,
                      f"No entries found in data set '{dataset}' on VM '{vm}'.")
        return records
    return run_for_each_vm(OP_GET_DATASET_ENTRY, args_dict, vcenter, action)


def delete_dataset_entry(args_dict: Dict[str, Any], vcenter: Optional[VCenter]) -> List[Dict[str, Any]]:
    def action(manager, vm, vm_ref):
        manager.delete_dataset_entry(name=args_dict.get("name"), vm_ref=vm_ref,
                                     dataset=args_dict.get("dataset"))
        print(f"Entry '{args_dict.get('name')}' deleted from data set '{args_dict.get('dataset')}' on VM '{vm}'.")
        return None
    return run_for_each_vm(OP_DELETE_DATASET_ENTRY, args_dict, vcenter, action)
