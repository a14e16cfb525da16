"""
Contract Validation Module

Модуль для валидации JSON контрактов наблюдаемого состояния калькулятора.
"""

from .validators import (
    HISTORY_ENTRY_SCHEMA,
    SNAPSHOT_SCHEMA,
    ContractValidator,
    HistoryEntryValidator,
    SchemaLoader,
    SnapshotValidator,
    default_loader,
    validate_history_entry,
    validate_snapshot,
)

__all__ = [
    # Schema names
    "SNAPSHOT_SCHEMA",
    "HISTORY_ENTRY_SCHEMA",
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "SnapshotValidator",
    "HistoryEntryValidator",
    # Functions
    "default_loader",
    "validate_snapshot",
    "validate_history_entry",
]
