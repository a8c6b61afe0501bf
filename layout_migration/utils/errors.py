"""
Structured logging helpers for migration errors, successes and warnings.

The :mod:`layout_migration.utils.errors` module centralizes the writing of
log entries during a layout migration run.  Each entry is appended to a JSON
Lines file under ``reports/migration`` so that the information can be
reviewed or parsed after a run.

Public helpers:

``report_error``
    Record a row that failed.  An optional exception can be supplied and
    will be serialized to the log.

``report_ok``
    Record a successful step for a row.  Additional key/value information
    can be attached to the entry via the ``extra`` parameter.

``MigrationReporter``
    The per-run audit trail.  Item-level warnings (for example a paragraph
    whose block was never migrated) are recorded here instead of failing
    the row.

``handle_missing_dependency``
    Turn a :class:`~layout_migration.exceptions.MissingDependencyError` into
    a warning on a reporter.

The ``ERRORS`` dictionary maps error or event codes to human readable
messages.  Codes not present in the dictionary fall back to the code itself.
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict, List, Optional

from layout_migration.contracts import Reporter
from layout_migration.exceptions import MESSAGE_WARNING, MissingDependencyError

ERRORS: Dict[str, str] = {
    "ROW_FAILED": "Layout could not be built for row",
    "CONFIGURATION": "Layout migration is misconfigured",
    "MISSING_BLOCK": "Referenced block was not migrated",
    "LAYOUT_BUILT": "Layout built successfully",
    "LAYOUT_SAVED": "Layout written to output",
}

_REPORT_DIR = os.path.join("reports", "migration")
_ERROR_LOG = os.path.join(_REPORT_DIR, "errors.jsonl")
_OK_LOG = os.path.join(_REPORT_DIR, "success.jsonl")
_MESSAGE_LOG = os.path.join(_REPORT_DIR, "messages.jsonl")


def _write_jsonl(path: str, data: Dict[str, Any]) -> None:
    """Append ``data`` as a JSON object followed by a newline to ``path``."""
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "a", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, default=str)
        f.write("\n")


def _row_id(row: Dict[str, Any]) -> Any:
    return row.get("nid", row.get("id"))


def report_error(code: str, row: Dict[str, Any], exc: Optional[Exception] = None) -> None:
    """Log an error event for ``row``.

    Parameters
    ----------
    code:
        A key identifying the type of error.  If ``code`` is present in
        :data:`ERRORS` its value will be used as the message.
    row:
        The source row associated with the error.  Only the ``nid`` (or
        ``id``) and ``title`` keys are referenced if present.
    exc:
        Optional exception instance that triggered the error.
    """
    message = ERRORS.get(code, code)
    entry: Dict[str, Any] = {
        "code": code,
        "message": message,
        "id": _row_id(row),
        "title": row.get("title"),
    }
    if exc is not None:
        entry["error"] = str(exc)
    print(f"[ERROR] {message} - {_row_id(row) or ''}")
    _write_jsonl(_ERROR_LOG, entry)


def report_ok(code: str, row: Dict[str, Any], extra: Optional[Dict[str, Any]] = None) -> None:
    """Log a successful event for ``row``.

    Parameters
    ----------
    code:
        A key identifying the type of event.
    row:
        The source row associated with the event.
    extra:
        Optional dictionary of additional fields to merge into the log entry.
    """
    message = ERRORS.get(code, code)
    entry: Dict[str, Any] = {
        "code": code,
        "message": message,
        "id": _row_id(row),
        "title": row.get("title"),
    }
    if extra:
        entry.update(extra)
    print(f"[OK] {message} - {_row_id(row) or ''}")
    _write_jsonl(_OK_LOG, entry)


class MigrationReporter:
    """
    Audit trail for one migration run.

    Messages are kept in memory and appended to ``messages.jsonl``.  When
    ``display_messages`` is enabled they are also printed, which is the
    human-visible channel used by :func:`handle_missing_dependency`.
    """

    def __init__(
        self,
        migration_id: str = "",
        *,
        display_messages: bool = True,
        log_path: Optional[str] = _MESSAGE_LOG,
    ) -> None:
        self.migration_id = migration_id
        self.display_messages = display_messages
        self.log_path = log_path
        self.source_id: Any = None
        self.messages: List[Dict[str, Any]] = []
        if display_messages:
            self.display = self._print

    def record_warning(self, message: str, severity: int = MESSAGE_WARNING) -> None:
        entry = {
            "migration": self.migration_id,
            "source_id": self.source_id,
            "message": message,
            "severity": severity,
        }
        self.messages.append(entry)
        if self.log_path:
            _write_jsonl(self.log_path, entry)

    def _print(self, message: str) -> None:
        print(f"[WARNING] {message}")


def handle_missing_dependency(error: MissingDependencyError, reporter: Reporter) -> None:
    """
    Record ``error`` on the run's audit trail and show it if possible.

    The caller skips the item and continues with the rest of the batch.
    """
    reporter.record_warning(str(error), error.severity)
    display = getattr(reporter, "display", None)
    if callable(display):
        display(str(error))
