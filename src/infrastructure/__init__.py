from infrastructure.hosts_io import HostsStore
from infrastructure.backup import BackupInfo, BackupManager
from infrastructure.config import HostsEditorConfig, load_config

__all__ = [
    "HostsStore",
    "BackupInfo",
    "BackupManager",
    "HostsEditorConfig",
    "load_config",
]
