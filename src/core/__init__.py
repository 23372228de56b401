from core.host_record import (
    HostRecord,
    IdMinter,
    SequentialIdMinter,
    record_id,
    normalize_comment,
    same_entry,
    locate,
    append_records,
    next_line_number,
)
from core.errors import (
    HostsError,
    ReadError,
    WriteError,
    NotFoundError,
    NoHistoryError,
    BackupError,
    ListError,
    InitError,
)
from core.result import OperationResult
from core.validation_result import ValidationResult
from core.commands import (
    Command,
    CommandKind,
    RecordStore,
    AddCmd,
    UpdateCmd,
    DeleteCmd,
    DeleteBatchCmd,
    apply_command,
    reverse_command,
    editable_changes,
)
from core.history import CommandHistory

__all__ = [
    "HostRecord",
    "IdMinter",
    "SequentialIdMinter",
    "record_id",
    "normalize_comment",
    "same_entry",
    "locate",
    "append_records",
    "next_line_number",
    "HostsError",
    "ReadError",
    "WriteError",
    "NotFoundError",
    "NoHistoryError",
    "BackupError",
    "ListError",
    "InitError",
    "OperationResult",
    "ValidationResult",
    "Command",
    "CommandKind",
    "RecordStore",
    "AddCmd",
    "UpdateCmd",
    "DeleteCmd",
    "DeleteBatchCmd",
    "apply_command",
    "reverse_command",
    "editable_changes",
    "CommandHistory",
]
