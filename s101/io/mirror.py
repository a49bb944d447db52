"""s101.io.mirror

Content-aware directory mirroring.

Used twice per run:

* staging:   ``<conf>``                          -> ``<build>``           (lands as ``<build>/s101``)
* promotion: ``<build>/s101/repository[/snapshots]`` -> ``<conf>[/repository]``

Paths are measured from the *parent* of the source, so the destination always
receives the source directory itself as a named subtree. Each regular file goes
through exactly one :data:`CopyTransform`, picked by the first matching
:class:`TransformRule`.

Failure policy: the first I/O error aborts the whole mirror with a
:class:`~s101.errors.MirrorError`. Nothing is rolled back.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import Callable, Iterator, Sequence, Tuple

from s101.errors import MirrorError
from s101.io.layout import MANIFEST_FILENAME

CopyTransform = Callable[[PurePath, bytes], bytes]

RELATIVE_TO_RE = re.compile(rb'<property name="relative-to" value="(.*)" />')
THIS_FILE_ANCHOR = "const(THIS_FILE)"


def identity(_relative: PurePath, data: bytes) -> bytes:
    return data


def normalize_line_endings(_relative: PurePath, data: bytes) -> bytes:
    return data.replace(b"\r\n", b"\n")


def relative_offset(from_dir: Path, to_dir: Path) -> str:
    """POSIX-style relative path from *from_dir* to *to_dir* (``""`` when equal)."""
    rel = os.path.relpath(os.path.abspath(to_dir), os.path.abspath(from_dir))
    return "" if rel == os.curdir else PurePath(rel).as_posix()


def relative_to_rewriter(offset: str) -> CopyTransform:
    """Rewrite the manifest's ``relative-to`` property to ``const(THIS_FILE)/<offset>``."""
    replacement = (
        b'<property name="relative-to" value="'
        + f"{THIS_FILE_ANCHOR}/{offset}".encode("utf-8")
        + b'" />'
    )

    def _rewrite(_relative: PurePath, data: bytes) -> bytes:
        return RELATIVE_TO_RE.sub(lambda _m: replacement, data)

    return _rewrite


@dataclass(frozen=True)
class TransformRule:
    predicate: Callable[[PurePath], bool]
    transform: CopyTransform
    name: str = ""


def is_manifest(path: PurePath) -> bool:
    return path.name == MANIFEST_FILENAME


def is_xml(path: PurePath) -> bool:
    return path.name.endswith(".xml")


def default_rules(*, analysis_dir: Path, project_dir: Path) -> Tuple[TransformRule, ...]:
    """The staging/promotion rule set.

    The manifest rule comes first: ``project.java.hsp`` is not ``.xml`` today,
    but its rewrite must win if that ever changes.
    """
    return (
        TransformRule(is_manifest, relative_to_rewriter(relative_offset(analysis_dir, project_dir)), "relative-to"),
        TransformRule(is_xml, normalize_line_endings, "line-endings"),
    )


def select_transform(relative: PurePath, rules: Sequence[TransformRule]) -> CopyTransform:
    for rule in rules:
        if rule.predicate(relative):
            return rule.transform
    return identity


@dataclass(frozen=True)
class MirrorReport:
    source: Path
    destination: Path
    files: int
    directories: int


def _raise(exc: OSError) -> None:
    raise exc


def _walk(source: Path) -> Iterator[Tuple[Path, bool]]:
    """Yield ``(path, is_dir)`` with every directory before its contents."""
    if not source.is_dir():
        if not source.exists():
            raise FileNotFoundError(f"Mirror source does not exist: {source}")
        yield source, False
        return

    # os.walk swallows errors unless onerror re-raises them.
    for root, dirs, files in os.walk(source, onerror=_raise):
        yield Path(root), True
        for name in files:
            yield Path(root) / name, False


def mirror_directory(
    source: Path,
    destination: Path,
    rules: Sequence[TransformRule] = (),
) -> MirrorReport:
    """Copy *source* (as a named subtree) into *destination*, transforming files.

    Existing destination files are overwritten unconditionally.
    """
    source = Path(source)
    destination = Path(destination)
    anchor = source.parent
    files = 0
    directories = 0

    try:
        for each, is_dir in _walk(source):
            relative = each.relative_to(anchor)
            target = destination / relative
            if is_dir:
                target.mkdir(parents=True, exist_ok=True)
                directories += 1
                continue
            transform = select_transform(relative, rules)
            target.write_bytes(transform(relative, each.read_bytes()))
            files += 1
    except OSError as exc:
        raise MirrorError(f"Failed to mirror {source} into {destination}: {exc}") from exc

    return MirrorReport(source=source, destination=destination, files=files, directories=directories)
