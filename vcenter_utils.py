# vcenter_utils.py
"""vCenter utility functions."""

import logging
from typing import Optional, Dict, Any

from managers.vcenter import VCenter

logger = logging.getLogger('vmdatasets.vcenter')


def get_vcenter_instance(config: Dict[str, Any]) -> Optional[VCenter]:
    """Create and connect a VCenter service instance."""
    vc_host = config.get("host")
    try:
        service_instance = VCenter(
            vc_host,
            config["user"],
            config["password"],
            port=config.get("port", 443),
            disable_ssl_verification=config.get("disable_ssl_verification", False)
        )
        service_instance.connect()

        if not service_instance.is_connected():
            # Error already logged by VCenter.connect()
            logger.error(f"get_vcenter_instance: Failed to establish connection for {vc_host}")
            return None
        return service_instance
    except Exception as e:
        logger.error(f"get_vcenter_instance: Unexpected error creating VCenter instance for {vc_host}: {e}", exc_info=True)
        return None
