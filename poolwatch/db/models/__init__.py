# poolwatch/db/models/__init__.py

from .base import Base, UUIDMixin, TimestampMixin
from .kv_entry import KVEntry
from .report_job import ReportJob, ReportStatus, ReportKind

__all__ = [
    "Base", "UUIDMixin", "TimestampMixin",
    "KVEntry", "ReportJob", "ReportStatus", "ReportKind",
]
