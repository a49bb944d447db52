"""pipeline.record

Run receipt written next to the staged analysis (``<build>/s101-run.json``).

Rule
----
Only this module writes the receipt. The orchestrator hands it plain values;
the receipt is also the only state the up-to-date check reads back.
"""

from __future__ import annotations

import json
import logging
import platform
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from s101.domain.run_context import RunContext
from s101.io.fs import write_json_atomic
from s101.io.layout import RUN_RECEIPT_FILENAME
from tools.core_git import get_git_branch, get_git_commit

logger = logging.getLogger(__name__)

RECEIPT_SCHEMA_VERSION = 1

STATUS_SUCCESS = "success"
STATUS_UP_TO_DATE = "up-to-date"
STATUS_ANALYSIS_FAILED = "analysis_failed"
SUCCESS_STATUSES = (STATUS_SUCCESS, STATUS_UP_TO_DATE)


def now_iso() -> str:
    """Return current UTC time as ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


def receipt_path(build_dir: Path) -> Path:
    return Path(build_dir) / RUN_RECEIPT_FILENAME


def load_receipt(build_dir: Path) -> Optional[Dict[str, Any]]:
    """Return the previous receipt, or None if absent or unreadable."""
    path = receipt_path(build_dir)
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable run receipt %s: %s", path, exc)
        return None
    return data if isinstance(data, dict) else None


def is_up_to_date(build_dir: Path, fingerprint: str) -> bool:
    """True when the last recorded run succeeded with the same input fingerprint."""
    prev = load_receipt(build_dir)
    if not prev:
        return False
    return prev.get("status") in SUCCESS_STATUSES and prev.get("inputs_fingerprint") == fingerprint


def write_receipt(
    ctx: RunContext,
    *,
    status: str,
    started: str,
    inputs: Sequence[Path],
    fingerprint: str,
    command: str = "",
    exit_code: Optional[int] = None,
    elapsed_seconds: Optional[float] = None,
    promoted: bool = False,
    log_path: Optional[Path] = None,
) -> Path:
    data: Dict[str, Any] = {
        "schema_version": RECEIPT_SCHEMA_VERSION,
        "label": ctx.label,
        "status": status,
        "started": started,
        "finished": now_iso(),
        "project_dir": str(ctx.project_dir),
        "build_dir": str(ctx.build_dir),
        "installation_dir": str(ctx.installation_dir),
        "configuration_dir": str(ctx.configuration_dir),
        "inputs": [str(p) for p in inputs],
        "inputs_fingerprint": fingerprint,
        "command": command,
        "exit_code": exit_code,
        "elapsed_seconds": elapsed_seconds,
        "promoted": promoted,
        "log_path": str(log_path) if log_path else None,
        "project_git_branch": get_git_branch(ctx.project_dir),
        "project_git_commit": get_git_commit(ctx.project_dir),
        "python_version": platform.python_version(),
        "platform": platform.platform(),
    }
    path = receipt_path(ctx.build_dir)
    write_json_atomic(path, data)
    return path
