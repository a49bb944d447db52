"""s101.io.manifest

Reading (and writing) classpath entries of the ``project.java.hsp`` manifest.

The manifest is generated by the configurer and then maintained by
Structure101 itself. Besides unrelated structural XML it carries one line per
library the analysis reads::

    <classpathentry kind="lib" path="core/build/classes/java/main" module="core" />

The scanner turns those lines into the set of upstream build tasks the analysis
depends on, so a host build can skip re-analysis when none of them changed.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Mapping, Optional, TypeVar
from xml.sax.saxutils import escape, unescape

from s101.domain.tasks import AnalysisInputs, BuildTask
from s101.errors import ManifestReadError

logger = logging.getLogger(__name__)

_QUOT = {'"': "&quot;"}
_UNQUOT = {"&quot;": '"'}

CLASSPATH_ENTRY_RE = re.compile(
    r'<classpathentry kind="lib" path="([^"]*)" module="([^"]*)"\s*/?>'
)

T = TypeVar("T")


@dataclass(frozen=True)
class ManifestEntry:
    path: str
    module: str


def parse_manifest_line(line: str) -> Optional[ManifestEntry]:
    """Return the entry on *line*, or None when the line is not a lib entry."""
    m = CLASSPATH_ENTRY_RE.search(line)
    if not m:
        return None
    return ManifestEntry(path=unescape(m.group(1), _UNQUOT), module=unescape(m.group(2), _UNQUOT))


def format_manifest_entry(entry: ManifestEntry) -> str:
    """Render *entry* in exactly the form :func:`parse_manifest_line` reads."""
    return (
        f'<classpathentry kind="lib" path="{escape(entry.path, _QUOT)}" '
        f'module="{escape(entry.module, _QUOT)}" />'
    )


def read_manifest_lines(manifest_path: Path) -> List[str]:
    try:
        return Path(manifest_path).read_text(encoding="utf-8", errors="replace").splitlines()
    except OSError as exc:
        raise ManifestReadError(f"Unable to read manifest {manifest_path}: {exc}") from exc


def iter_manifest_entries(manifest_path: Path) -> Iterator[ManifestEntry]:
    for line in read_manifest_lines(manifest_path):
        entry = parse_manifest_line(line)
        if entry is not None:
            yield entry


def resolve_manifest_tasks(manifest_path: Path, task_index: Mapping[str, T]) -> List[T]:
    """Return the tasks whose module the manifest references, in manifest order.

    A missing manifest yields an empty list (first run). Unknown modules are
    ignored. Each module is consumed at most once, so repeated references do
    not produce duplicates. *task_index* itself is not modified.
    """
    manifest_path = Path(manifest_path)
    if not manifest_path.exists():
        logger.debug("No manifest at %s; no incremental inputs", manifest_path)
        return []

    remaining = dict(task_index)
    resolved: List[T] = []
    for entry in iter_manifest_entries(manifest_path):
        task = remaining.pop(entry.module, None)
        if task is not None:
            resolved.append(task)
    return resolved


def attach_manifest_inputs(
    manifest_path: Path,
    task_index: Mapping[str, BuildTask],
    inputs: AnalysisInputs,
) -> List[BuildTask]:
    """Register the outputs of every task the manifest references as inputs."""
    tasks = resolve_manifest_tasks(manifest_path, task_index)
    for task in tasks:
        inputs.add_outputs(task)
    if tasks:
        logger.info(
            "Attached outputs of %d task(s) as analysis inputs: %s",
            len(tasks),
            ", ".join(t.name for t in tasks),
        )
    return tasks
