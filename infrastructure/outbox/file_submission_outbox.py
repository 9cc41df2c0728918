# infrastructure/outbox/file_submission_outbox.py
from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from application.ports.logger import LoggerPort
from domain.ids import SubmissionId
from domain.submission import FinalSubmission


class FileSubmissionOutbox:
    """
    One JSON document per undelivered submission:

      <root>/<submission_id>.json  {"queued_at", "reason", "submission": {...}}

    Files are written to a .tmp sibling and renamed, so a reader never sees
    a half-written entry. The directory is created on first enqueue.
    Entries that cannot be read back are skipped and logged; they stay on
    disk for inspection.
    """

    def __init__(self, root: str = "tmp/outbox", logger: Optional[LoggerPort] = None):
        self._root = Path(root)
        self._logger = logger

    @property
    def root(self) -> Path:
        return self._root

    def enqueue(self, submission: FinalSubmission, reason: str) -> None:
        SubmissionId(submission.submission_id)
        self._root.mkdir(parents=True, exist_ok=True)

        doc = {
            "queued_at": datetime.now(timezone.utc).isoformat(),
            "reason": reason,
            "submission": submission.to_dict(),
        }
        path = self._path(submission.submission_id)
        tmp_path = path.with_suffix(".json.tmp")
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(doc, f, ensure_ascii=False)
        os.replace(tmp_path, path)

    def pending(self) -> List[FinalSubmission]:
        if not self._root.is_dir():
            return []
        out: List[FinalSubmission] = []
        for path in sorted(self._root.glob("*.json")):
            try:
                with path.open("r", encoding="utf-8") as f:
                    doc = json.load(f)
                out.append(FinalSubmission.from_dict(doc["submission"]))
            except (ValueError, KeyError, TypeError) as e:
                if self._logger is not None:
                    self._logger.warning("outbox.unreadable", path=str(path), error=str(e))
        return out

    def acknowledge(self, submission_id: str) -> None:
        path = self._path(SubmissionId(submission_id).value)
        if path.exists():
            path.unlink()

    def _path(self, submission_id: str) -> Path:
        return self._root / f"{submission_id}.json"
