"""
nameledger.types — immutable value types shared by the ledger layers.

Records are frozen dataclasses; mutation means storing a `dataclasses.replace`
copy, which is what lets the store journal first-write values and roll back.
"""

from .events import Notification
from .record import NULL_IDENTITY, Record, SubRecord, TldEntry

__all__ = ["NULL_IDENTITY", "Notification", "Record", "SubRecord", "TldEntry"]
