"""s101.domain.tasks

Upstream build tasks and the analysis task's declared inputs.

A :class:`BuildTask` stands for one module's compile step: the thing whose
outputs (class directories, jars) Structure101 reads. The runner never builds
anything itself; the host build tells it which tasks exist and where their
outputs are.
"""

from __future__ import annotations

import hashlib
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Tuple

from s101.errors import ConfigurationError


@dataclass(frozen=True)
class BuildTask:
    """One upstream compile task."""

    name: str
    module: str
    outputs: Tuple[Path, ...] = ()


TaskOutputIndex = Dict[str, BuildTask]


def build_task_output_index(tasks: Iterable[BuildTask]) -> TaskOutputIndex:
    """Index compile tasks by module name.

    Module names must be unique; two tasks claiming the same module would make
    the manifest ambiguous, so that is a configuration error rather than a
    silent last-one-wins.
    """
    index: TaskOutputIndex = {}
    for task in tasks:
        if task.module in index:
            raise ConfigurationError(
                f"Duplicate module name {task.module!r} "
                f"(tasks {index[task.module].name!r} and {task.name!r})"
            )
        index[task.module] = task
    return index


def _iter_files(path: Path) -> Iterator[Path]:
    if path.is_dir():
        for root, dirs, files in os.walk(path):
            dirs.sort()
            for name in sorted(files):
                yield Path(root) / name
    elif path.is_file():
        yield path


@dataclass
class AnalysisInputs:
    """Declared inputs of one analysis run.

    Insertion-ordered and de-duplicated. :meth:`fingerprint` hashes the
    contents of every registered file (directories are walked), which is what
    an incremental build compares to decide whether re-analysis is needed.
    Paths that do not exist contribute only their name.
    """

    _paths: List[Path] = field(default_factory=list)

    def add(self, path: Path) -> None:
        p = Path(path)
        if p not in self._paths:
            self._paths.append(p)

    def add_outputs(self, task: BuildTask) -> None:
        for output in task.outputs:
            self.add(output)

    @property
    def paths(self) -> List[Path]:
        return list(self._paths)

    def __len__(self) -> int:
        return len(self._paths)

    def fingerprint(self, *extra: Path) -> str:
        h = hashlib.sha256()
        for root in [*self._paths, *extra]:
            root = Path(root)
            h.update(str(root).encode("utf-8"))
            h.update(b"\0")
            for f in _iter_files(root):
                h.update(str(f.relative_to(root) if f != root else f.name).encode("utf-8"))
                h.update(b"\0")
                h.update(f.read_bytes())
                h.update(b"\0")
        return h.hexdigest()
