#!/usr/bin/env python3
"""
Reconciler Error Types

Exception hierarchy shared by the loaders, the matching core and the processor.
No-match and low-confidence outcomes are not errors and have no exception type.
"""


class ReconcilerError(Exception):
    """Base class for all reconciler errors."""


class MalformedRecordError(ReconcilerError, ValueError):
    """
    A transaction or order record is missing required data.

    Loaders catch this per record, log a warning and keep going.
    """


class LedgerUpdateError(ReconcilerError):
    """A memo update could not be delivered to the ledger."""

    def __init__(self, transaction_id: str, reason: str):
        super().__init__(f"Failed to update transaction {transaction_id}: {reason}")
        self.transaction_id = transaction_id
        self.reason = reason


class TrackerUnavailableError(ReconcilerError):
    """
    The dedup tracker cannot be read or written.

    Fatal for a run: without the tracker at-most-once processing cannot be guaranteed.
    """
