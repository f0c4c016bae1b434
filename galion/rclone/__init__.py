# Galion rclone Module
# rclone remote control client and daemon management

from galion.rclone.client import DEFAULT_RC_URL, RcloneClient, decode_job_status
from galion.rclone.daemon import RcloneDaemon

__all__ = [
    "DEFAULT_RC_URL",
    "RcloneClient",
    "RcloneDaemon",
    "decode_job_status",
]
