"""s101.io.layout

Canonical filesystem layout for the runner.

This module centralizes:

* the fixed names inside a configuration directory (``config.xml``,
  ``project.java.hsp``, ``repository/snapshots/baseline``)
* where the staged copy lives inside the build directory (``<build>/s101``)
* where the analyzer jar lives inside the installation directory

The goal is that the orchestrator, the collaborators and the tests never
re-derive these paths on their own.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


# Staging copies the configuration directory into the build directory by its
# own name, so the configuration directory and the analysis subdirectory of the
# build output share this name.
ANALYSIS_DIRNAME = "s101"

CONFIG_FILENAME = "config.xml"
MANIFEST_FILENAME = "project.java.hsp"
REPOSITORY_DIRNAME = "repository"
SNAPSHOTS_DIRNAME = "snapshots"
BASELINE_SNAPSHOT = "baseline"
REPOSITORY_XML = "repository.xml"

BUILD_JAR = "structure101-java-build.jar"

RUN_RECEIPT_FILENAME = "s101-run.json"
RUN_LOG_FILENAME = "s101.log"

# Index page listing the published headless build archives.
DOWNLOAD_URL_DEFAULT = "https://structure101.com/binaries/v6"


def baseline_snapshot_path(configuration_dir: Path) -> Path:
    """``<conf>/repository/snapshots/baseline``; its existence marks a prior baseline."""
    return Path(configuration_dir) / REPOSITORY_DIRNAME / SNAPSHOTS_DIRNAME / BASELINE_SNAPSHOT


def analysis_dir(build_dir: Path) -> Path:
    return Path(build_dir) / ANALYSIS_DIRNAME


def build_jar_path(installation_dir: Path) -> Path:
    return Path(installation_dir) / BUILD_JAR


@dataclass(frozen=True)
class StagedPaths:
    """Paths inside ``<build>/s101`` after staging."""

    root: Path
    config: Path
    manifest: Path
    repository: Path
    snapshots: Path

    @classmethod
    def for_build_dir(cls, build_dir: Path) -> "StagedPaths":
        root = analysis_dir(build_dir)
        repository = root / REPOSITORY_DIRNAME
        return cls(
            root=root,
            config=root / CONFIG_FILENAME,
            manifest=root / MANIFEST_FILENAME,
            repository=repository,
            snapshots=repository / SNAPSHOTS_DIRNAME,
        )
