from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import pytest

from s101.domain.run_context import RunContext
from s101.domain.tasks import BuildTask
from s101.io.manifest import ManifestEntry, format_manifest_entry

from pipeline.orchestrator import RunRequest, S101Orchestrator


class FakeInstaller:
    def __init__(self, events: Optional[List[str]] = None) -> None:
        self.events = events if events is not None else []

    @property
    def installs(self) -> int:
        return sum(1 for e in self.events if e == "install")

    def license(self, license_id: str) -> None:
        self.events.append(f"license:{license_id}")

    def install(self, installation_dir: Path, configuration_dir: Path) -> None:
        self.events.append("install")
        installation_dir.mkdir(parents=True, exist_ok=True)
        (installation_dir / "structure101-java-build.jar").write_bytes(b"PK")


class FakeConfigurer:
    """Writes a minimal configuration directory, with Windows line endings in config.xml."""

    def __init__(self, modules: Sequence[str] = (), events: Optional[List[str]] = None) -> None:
        self.modules = list(modules)
        self.events = events if events is not None else []

    @property
    def configures(self) -> int:
        return sum(1 for e in self.events if e == "configure")

    def configure(self, installation_dir: Path, configuration_dir: Path) -> None:
        self.events.append("configure")
        configuration_dir.mkdir(parents=True, exist_ok=True)
        (configuration_dir / "config.xml").write_bytes(b"<headless>\r\n  <operations/>\r\n</headless>\r\n")
        lines = [
            '<?xml version="1.0" encoding="UTF-8"?>',
            "<local-project>",
            '  <property name="relative-to" value="const(THIS_FILE)/.." />',
        ]
        lines += [
            "  " + format_manifest_entry(ManifestEntry(path=f"{m}/build/classes", module=m))
            for m in self.modules
        ]
        lines.append("</local-project>")
        (configuration_dir / "project.java.hsp").write_text("\n".join(lines) + "\n", encoding="utf-8")
        (configuration_dir / "repository" / "snapshots").mkdir(parents=True, exist_ok=True)


@dataclass
class FakeResult:
    exit_code: int
    elapsed_seconds: float = 0.01
    command_str: str = "java -jar structure101-java-build.jar config.xml"
    log_path: Optional[Path] = None


@dataclass
class FakeAnalyzer:
    """Pretends to be Structure101: writes a snapshot named after the label."""

    exit_code: int = 0
    contexts: List[RunContext] = field(default_factory=list)

    @property
    def calls(self) -> int:
        return len(self.contexts)

    def run(self, ctx: RunContext) -> FakeResult:
        assert ctx.staged.config.is_file(), "config.xml must be staged before the analyzer runs"
        self.contexts.append(ctx)
        snap = ctx.staged.snapshots / ctx.label
        snap.mkdir(parents=True, exist_ok=True)
        (snap / "snapshot.xml").write_text(f"<snapshot label=\"{ctx.label}\"/>\n", encoding="utf-8")
        (ctx.staged.repository / "other.db").write_bytes(b"db-" + ctx.label.encode("ascii"))
        return FakeResult(exit_code=self.exit_code)


@dataclass
class Project:
    root: Path
    tmp: Path

    @property
    def build_dir(self) -> Path:
        return self.root / "build"

    @property
    def configuration_dir(self) -> Path:
        return self.root / "s101"

    @property
    def installation_dir(self) -> Path:
        return self.tmp / "s101-install"

    def module_output(self, module: str) -> Path:
        out = self.root / module / "build" / "classes"
        out.mkdir(parents=True, exist_ok=True)
        return out

    def tasks(self, *modules: str) -> Tuple[BuildTask, ...]:
        return tuple(
            BuildTask(name=f"{m}:compileJava", module=m, outputs=(self.module_output(m),))
            for m in modules
        )

    def request(self, **kw) -> RunRequest:
        base = dict(
            project_dir=self.root,
            build_dir=self.build_dir,
            installation_dir=self.installation_dir,
            configuration_dir=self.configuration_dir,
        )
        base.update(kw)
        return RunRequest(**base)


@pytest.fixture
def project(tmp_path: Path) -> Project:
    root = tmp_path / "project"
    root.mkdir()
    return Project(root=root, tmp=tmp_path)


@pytest.fixture
def events() -> List[str]:
    return []


@pytest.fixture
def installer(events: List[str]) -> FakeInstaller:
    return FakeInstaller(events)


@pytest.fixture
def configurer(events: List[str]) -> FakeConfigurer:
    return FakeConfigurer(modules=("core", "web"), events=events)


@pytest.fixture
def analyzer() -> FakeAnalyzer:
    return FakeAnalyzer()


@pytest.fixture
def orchestrator(installer: FakeInstaller, configurer: FakeConfigurer, analyzer: FakeAnalyzer) -> S101Orchestrator:
    return S101Orchestrator(installer=installer, configurer=configurer, analyzer=analyzer)
