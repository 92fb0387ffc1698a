#!/usr/bin/env python3
"""
vSphere VM Data Sets Tool - Main Entry Point
Parses arguments and dispatches actions to command handlers.
"""

import logging
import sys
import time

from logger.log_config import setup_logger
from config_utils import get_vcenter_config, get_log_file
from vcenter_utils import get_vcenter_instance
from arg_parser import create_parser

logger = logging.getLogger('vmdatasets')


def summarize_results(all_results):
    """Returns (overall_status, total_success, total_failure) for a list of result dicts."""
    total_success = sum(1 for r in all_results if isinstance(r, dict) and r.get("status") == "success")
    total_failure = sum(1 for r in all_results if isinstance(r, dict) and r.get("status") == "failed")
    if total_failure > 0:
        overall_status = "completed_with_errors"
    elif total_success > 0:
        overall_status = "completed"
    else:
        overall_status = "completed_no_tasks"
    return overall_status, total_success, total_failure


def main(argv=None):
    """Main execution function. Returns the process exit code."""
    global logger

    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.error("A command (create-dataset, get-dataset, delete-dataset, set-entry, get-entry, delete-entry) is required.")

    logger = setup_logger(verbose=args.verbose, log_file=get_log_file())
    args_dict = vars(args)

    try:
        vc_config = get_vcenter_config(args_dict)
    except ValueError as e:
        parser.error(str(e))

    start_time = time.perf_counter()
    overall_status, total_success, total_failure = "failed", 0, 0
    exit_code = 1

    logger.info(f"Executing command: {args.command}")
    try:
        vcenter = get_vcenter_instance(vc_config)
        all_results = args.func(args_dict, vcenter)
        overall_status, total_success, total_failure = summarize_results(all_results)
        exit_code = 1 if total_failure else 0
        logger.info(f"Summary: Success={total_success}, Failed={total_failure}")
    except KeyboardInterrupt:
        print("\nTerminated by user.")
        overall_status = "terminated_by_user"
        exit_code = 130
    except Exception as e:
        logger.critical(f"Unhandled error during command execution: {e}", exc_info=True)
        overall_status = "failed_exception"
    finally:
        duration_seconds = time.perf_counter() - start_time
        logger.info(f"Cmd '{args.command}' finished in {duration_seconds:.2f} s. Final Status: {overall_status}")

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
