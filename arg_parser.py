# In arg_parser.py

import argparse
import argcomplete

from constants import ACCESS_LEVELS
from commands import (
    create_dataset, get_dataset, delete_dataset,
    set_dataset_entry, get_dataset_entry, delete_dataset_entry,
)


def create_parser():
    """
    Creates and configures the argparse object for the vmdatasets tool.
    """
    parser = argparse.ArgumentParser(prog='vmdatasets', description="vSphere VM Data Sets Management Tool")

    parser.add_argument('--verbose', action='store_true', help='Enable debug logging.')

    # --- Subparsers for Commands ---
    subparsers = parser.add_subparsers(dest='command', title='commands',
                                       help='Action command (create-dataset, get-dataset, delete-dataset, '
                                            'set-entry, get-entry, delete-entry)')

    # --- Common Arguments for Subparsers ---
    common_parser = argparse.ArgumentParser(add_help=False)
    common_parser.add_argument('--vm', required=True,
                               help='VM managed object id (e.g. vm-26) or VM name. Comma-separated for several VMs.')
    common_parser.add_argument('--vcenter', help='vCenter host. Defaults to the VC_HOST env var.')
    common_parser.add_argument('--port', type=int, help='vCenter port. Defaults to VC_PORT or 443.')
    common_parser.add_argument('--insecure', action='store_true',
                               help='Disable SSL certificate verification (trusted lab environments only).')

    dataset_parser = argparse.ArgumentParser(add_help=False)
    dataset_parser.add_argument('-d', '--dataset', required=True, help='Name of the data set.')

    # --- Create Dataset Subparser ---
    create_ds_parser = subparsers.add_parser('create-dataset', help='Create a data set on a VM.',
                                             parents=[common_parser])
    create_ds_parser.add_argument('-n', '--name', required=True, help='Name of the data set.')
    create_ds_parser.add_argument('--description', default="", help='Description of the data set.')
    create_ds_parser.add_argument('--guest-access', required=True, choices=ACCESS_LEVELS,
                                  help='Access granted to the guest OS.')
    create_ds_parser.add_argument('--host-access', required=True, choices=ACCESS_LEVELS,
                                  help='Access granted to host-side infrastructure.')
    create_ds_parser.add_argument('--omit-from-snapshot-clone', action='store_true',
                                  help='Leave the data set out of snapshots and clones.')
    create_ds_parser.set_defaults(func=create_dataset)

    # --- Get Dataset Subparser ---
    get_ds_parser = subparsers.add_parser('get-dataset', help='Show one data set, or list all data sets of a VM.',
                                          parents=[common_parser])
    get_ds_parser.add_argument('-n', '--name', help='Name of the data set. Omit to list every data set.')
    get_ds_parser.set_defaults(func=get_dataset)

    # --- Delete Dataset Subparser ---
    delete_ds_parser = subparsers.add_parser('delete-dataset', help='Delete a data set from a VM.',
                                             parents=[common_parser])
    delete_ds_parser.add_argument('-n', '--name', required=True, help='Name of the data set.')
    delete_ds_parser.add_argument('--force', action='store_true',
                                  help='Delete the data set even if it still holds entries.')
    delete_ds_parser.set_defaults(func=delete_dataset)

    # --- Set Entry Subparser ---
    set_entry_parser = subparsers.add_parser('set-entry', help='Create or update a data set entry.',
                                             parents=[common_parser, dataset_parser])
    set_entry_parser.add_argument('-n', '--name', required=True, help='Entry key.')
    set_entry_parser.add_argument('--value', required=True, help='Entry value.')
    set_entry_parser.set_defaults(func=set_dataset_entry)

    # --- Get Entry Subparser ---
    get_entry_parser = subparsers.add_parser('get-entry', help='Show one entry, or list all entries of a data set.',
                                             parents=[common_parser, dataset_parser])
    get_entry_parser.add_argument('-n', '--name', help='Entry key. Omit to list every entry.')
    get_entry_parser.set_defaults(func=get_dataset_entry)

    # --- Delete Entry Subparser ---
    delete_entry_parser = subparsers.add_parser('delete-entry', help='Delete a data set entry.',
                                                parents=[common_parser, dataset_parser])
    delete_entry_parser.add_argument('-n', '--name', required=True, help='Entry key.')
    delete_entry_parser.set_defaults(func=delete_dataset_entry)

    argcomplete.autocomplete(parser)
    return parser
