"""pipeline.collaborators

Capability contracts the orchestrator depends on.

The orchestrator never imports the Structure101 adapters; it is handed objects
that satisfy these protocols by :mod:`pipeline.wiring` (or by a test). Any
backend that can install, configure and run is substitutable.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Protocol

from s101.domain.run_context import RunContext


class Installer(Protocol):
    def license(self, license_id: str) -> None: ...

    def install(self, installation_dir: Path, configuration_dir: Path) -> None: ...


class Configurer(Protocol):
    def configure(self, installation_dir: Path, configuration_dir: Path) -> None: ...


class AnalyzerResult(Protocol):
    exit_code: int
    elapsed_seconds: float
    command_str: str
    log_path: Optional[Path]


class Analyzer(Protocol):
    def run(self, ctx: RunContext) -> AnalyzerResult: ...
