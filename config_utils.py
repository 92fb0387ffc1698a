# config_utils.py
"""Configuration utility functions."""

import logging
import os
from typing import Dict, Any, Optional

from dotenv import load_dotenv

from constants import DEFAULT_VC_PORT

# Assumes .env is in the working directory or a parent of it
load_dotenv()
logger = logging.getLogger('vmdatasets.config')

TRUE_VALUES = ('true', '1', 't')


def _env_flag(name: str) -> bool:
    return os.getenv(name, "False").lower() in TRUE_VALUES


def get_vcenter_config(args_dict: Dict[str, Any]) -> Dict[str, Any]:
    """
    Build the vCenter connection settings from the environment, letting
    command line options (vcenter, port, insecure) override it.

    Raises:
        ValueError: If the vCenter host or credentials are missing.
    """
    host = args_dict.get('vcenter') or os.getenv("VC_HOST")
    user = os.getenv("VC_USER")
    password = os.getenv("VC_PASS")
    port = args_dict.get('port') or os.getenv("VC_PORT") or DEFAULT_VC_PORT
    disable_ssl_verification = bool(args_dict.get('insecure')) or _env_flag("VC_DISABLE_SSL_VERIFY")

    if not host:
        raise ValueError("vCenter host missing. Use --vcenter or set VC_HOST.")
    if not user or not password:
        raise ValueError("vCenter credentials missing from env vars (VC_USER, VC_PASS).")
    try:
        port = int(port)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid vCenter port '{port}'.")

    if disable_ssl_verification:
        logger.warning(
            "VCENTER SSL CERTIFICATE VERIFICATION IS DISABLED. "
            "THIS IS INSECURE AND SHOULD ONLY BE USED IN TRUSTED DEVELOPMENT/LAB ENVIRONMENTS."
        )

    logger.debug(f"vCenter config prepared for {host}:{port}.")
    return {
        "host": host,
        "user": user,
        "password": password,
        "port": port,
        "disable_ssl_verification": disable_ssl_verification,
    }


def get_log_file() -> Optional[str]:
    """Optional log file path from VMDATASETS_LOG_FILE."""
    return os.getenv("VMDATASETS_LOG_FILE") or None
