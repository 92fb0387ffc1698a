# vmdatasets/constants.py
"""
Central location for constants used across the application.
"""

# ==============================================================================
# DATA SET ACCESS LEVELS
# ==============================================================================
ACCESS_NONE = "NONE"
ACCESS_READ_ONLY = "READ_ONLY"
ACCESS_READ_WRITE = "READ_WRITE"
ACCESS_LEVELS = (ACCESS_NONE, ACCESS_READ_ONLY, ACCESS_READ_WRITE)

# ==============================================================================
# VSPHERE AUTOMATION REST API
# ==============================================================================
REST_SESSION_PATH = "/api/session"
REST_SESSION_HEADER = "vmware-api-session-id"
DATA_SETS_PATH = "/api/vcenter/vm/{vm}/data-sets"
REQUEST_TIMEOUT = 60

# ==============================================================================
# OPERATION NAMES (used in error reports)
# ==============================================================================
OP_CREATE_DATASET = "CreateDataset"
OP_GET_DATASET = "GetDataset"
OP_DELETE_DATASET = "DeleteDataset"
OP_SET_DATASET_ENTRY = "CreateOrUpdateDatasetEntry"
OP_GET_DATASET_ENTRY = "GetDatasetEntry"
OP_DELETE_DATASET_ENTRY = "DeleteDatasetEntry"

# ==============================================================================
# DEFAULTS
# ==============================================================================
DEFAULT_VC_PORT = 443
VM_MOREF_PREFIX = "vm-"
