#!/usr/bin/env python3
"""
YNAB Edit File Updater

Ledger updater that records memo changes in a timestamped edit file under the
YNAB edits directory instead of calling the YNAB API. The edit file is then
reviewed and applied with the YNAB tooling.

Edit file format:
    {
      "metadata": {"generated_at": "...", "total_edits": 2},
      "edits": [{"transaction_id": "...", "memo": "..."}]
    }
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from ..core.errors import LedgerUpdateError
from ..core.json_utils import write_json

logger = logging.getLogger(__name__)


class EditFileUpdater:
    """LedgerUpdater writing memo edits to a JSON edit file, one write per edit."""

    def __init__(self, edits_dir: str | Path, filename: str | None = None):
        self.edits_dir = Path(edits_dir)
        timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        self.output_file = self.edits_dir / (filename or f"{timestamp}_memo_edits.json")
        self._edits: list[dict[str, Any]] = []

    @property
    def edits(self) -> list[dict[str, Any]]:
        return list(self._edits)

    def update_memo(self, transaction_id: str, memo: str) -> bool:
        """
        Record a memo edit.

        Raises:
            LedgerUpdateError: If the edit file cannot be written
        """
        if not transaction_id:
            return False

        edit = {"transaction_id": transaction_id, "memo": memo}
        self._edits.append(edit)
        try:
            self._save()
        except OSError as e:
            self._edits.pop()
            raise LedgerUpdateError(transaction_id, f"cannot write {self.output_file}: {e}") from e

        logger.debug("Recorded memo edit for %s in %s", transaction_id, self.output_file)
        return True

    def _save(self) -> None:
        write_json(
            self.output_file,
            {
                "metadata": {
                    "generated_at": datetime.now().isoformat(timespec="seconds"),
                    "total_edits": len(self._edits),
                },
                "edits": self._edits,
            },
        )
