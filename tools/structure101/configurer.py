"""tools/structure101/configurer.py

Writes a default Structure101 configuration directory.

Layout produced::

    <conf>/
      project.java.hsp            one classpath entry per build-task output
      config.xml                  headless "publish" operation, label from ${s101.label}
      repository/
        repository.xml
        snapshots/                empty until the first baseline is promoted

The tool version stamped into the project files is read from the installed
build jar, so ``configure`` requires a prior ``install``.
"""

from __future__ import annotations

import logging
import os
import zipfile
from pathlib import Path, PurePath
from typing import Dict, List, Sequence

from s101.domain.tasks import BuildTask
from s101.errors import InstallError
from s101.io.fs import remove_tree, write_text_atomic
from s101.io.layout import (
    CONFIG_FILENAME,
    MANIFEST_FILENAME,
    REPOSITORY_DIRNAME,
    REPOSITORY_XML,
    SNAPSHOTS_DIRNAME,
    build_jar_path,
)
from s101.io.manifest import ManifestEntry
from s101.io.mirror import THIS_FILE_ANCHOR, relative_offset

from .templates import render_config_xml, render_project_hsp, render_repository_xml

logger = logging.getLogger(__name__)

BUILD_PROPERTIES_NAME = "structure101-build.properties"
VERSION_PROPERTY = "s101-build"


def parse_properties(text: str) -> Dict[str, str]:
    """Parse the simple ``key=value`` / ``key: value`` subset of Java properties."""
    out: Dict[str, str] = {}
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line[0] in "#!":
            continue
        for sep in ("=", ":"):
            if sep in line:
                key, value = line.split(sep, 1)
                out[key.strip()] = value.strip()
                break
    return out


def read_build_version(installation_dir: Path) -> str:
    jar = build_jar_path(installation_dir)
    try:
        with zipfile.ZipFile(jar) as zf:
            for name in zf.namelist():
                if BUILD_PROPERTIES_NAME in name:
                    props = parse_properties(zf.read(name).decode("utf-8", errors="replace"))
                    version = props.get(VERSION_PROPERTY)
                    if version:
                        return version
    except (OSError, zipfile.BadZipFile) as exc:
        raise InstallError(f"Unable to read {jar}: {exc}") from exc
    raise InstallError(f"Unable to determine Structure101 version from {jar}")


def patch_version(version: str) -> str:
    parts = version.split(".")
    if len(parts) < 3:
        raise InstallError(f"Unexpected Structure101 version format: {version!r}")
    return parts[2]


def manifest_entries(project_dir: Path, tasks: Sequence[BuildTask]) -> List[ManifestEntry]:
    """One entry per task output, path relative to the project directory."""
    entries: List[ManifestEntry] = []
    for task in tasks:
        for output in task.outputs:
            rel = os.path.relpath(os.path.abspath(output), os.path.abspath(project_dir))
            entries.append(ManifestEntry(path=PurePath(rel).as_posix(), module=task.module))
    return entries


class Structure101Configurer:
    """Applies a default Structure101 configuration to a project."""

    def __init__(self, *, project_dir: Path, tasks: Sequence[BuildTask] = ()) -> None:
        self.project_dir = Path(project_dir)
        self.tasks = list(tasks)

    def configure(self, installation_dir: Path, configuration_dir: Path) -> None:
        configuration_dir = Path(configuration_dir)
        remove_tree(configuration_dir)
        version = read_build_version(installation_dir)
        self.write_project(configuration_dir, version=version)
        logger.info("Wrote default Structure101 %s configuration to %s", version, configuration_dir)

    def write_project(self, configuration_dir: Path, *, version: str) -> None:
        project_name = self.project_dir.resolve().name
        offset = relative_offset(configuration_dir, self.project_dir)

        write_text_atomic(
            configuration_dir / MANIFEST_FILENAME,
            render_project_hsp(
                version=version,
                patch_version=patch_version(version),
                relative_to=f"{THIS_FILE_ANCHOR}/{offset}",
                entries=manifest_entries(self.project_dir, self.tasks),
            ),
        )
        write_text_atomic(configuration_dir / CONFIG_FILENAME, render_config_xml(project_name=project_name))

        repository = configuration_dir / REPOSITORY_DIRNAME
        (repository / SNAPSHOTS_DIRNAME).mkdir(parents=True, exist_ok=True)
        write_text_atomic(
            repository / REPOSITORY_XML,
            render_repository_xml(version=version, project_name=project_name),
        )
