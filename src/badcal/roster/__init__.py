"""Reactive roster store and its synchronization reducer."""

from .store import EDITABLE_FIELDS, IdSource, ImportReport, RosterSnapshot, RosterStore
from .sync import SyncResult, apply_default_hours, complete_custom_hours, settle

__all__ = [
    "EDITABLE_FIELDS",
    "IdSource",
    "ImportReport",
    "RosterSnapshot",
    "RosterStore",
    "SyncResult",
    "apply_default_hours",
    "complete_custom_hours",
    "settle",
]
