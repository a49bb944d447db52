"""s101.io

Filesystem contracts and IO engines.

Design principle
----------------
The configuration directory and the staged copy in the build directory are a
contract shared with Structure101 itself. This package owns the rules for where
things live (:mod:`.layout`), how the manifest is read (:mod:`.manifest`) and
how trees are copied between the two (:mod:`.mirror`), so none of them are
re-implemented by the orchestrator or the collaborators.
"""

from __future__ import annotations

from .layout import (
    ANALYSIS_DIRNAME,
    BUILD_JAR,
    CONFIG_FILENAME,
    MANIFEST_FILENAME,
    StagedPaths,
    analysis_dir,
    baseline_snapshot_path,
    build_jar_path,
)
from .manifest import (
    ManifestEntry,
    attach_manifest_inputs,
    format_manifest_entry,
    parse_manifest_line,
    resolve_manifest_tasks,
)
from .mirror import MirrorReport, TransformRule, default_rules, mirror_directory

__all__ = [
    "ANALYSIS_DIRNAME",
    "BUILD_JAR",
    "CONFIG_FILENAME",
    "MANIFEST_FILENAME",
    "ManifestEntry",
    "MirrorReport",
    "StagedPaths",
    "TransformRule",
    "analysis_dir",
    "attach_manifest_inputs",
    "baseline_snapshot_path",
    "build_jar_path",
    "default_rules",
    "format_manifest_entry",
    "mirror_directory",
    "parse_manifest_line",
    "resolve_manifest_tasks",
]
