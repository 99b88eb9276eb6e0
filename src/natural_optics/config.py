"""
Library-wide settings, read once at import time.
"""

import os

# ============================================================================
# CONFIGURATION
# ============================================================================

TRUTHY_ENV_VALUES = {"1", "true", "yes", "on"}

# Attach the call stack to soft-anomaly warnings
TRACE_ANOMALIES = (
    os.environ.get("NATURAL_OPTICS_TRACE_ANOMALIES", "").strip().lower()
    in TRUTHY_ENV_VALUES
)

# Iterable types handled as single values by the iterable helpers
SCALAR_ITERABLE_TYPES = (str, bytes, bytearray)

# Identifies the "non-iterable transform result" warning in log records
ANOMALY_MSG_ID = "e3e30f4a71fa"
