"""pipeline.pipeline

A *single, high-level* object for this repo's three capabilities, matching the
three tasks the runner exposes:

- ``run(...)``: the full lifecycle (install/configure if needed, analyze,
  promote a baseline)
- ``install(...)``: (re)install Structure101, applying the license first
- ``configure(...)``: (re)write the default configuration directory

Callers (CLI, scripts, CI) should go through this facade, built by
:func:`pipeline.wiring.build_pipeline`, rather than wiring collaborators
themselves.
"""

from __future__ import annotations

import logging

from s101.domain.run_context import RunContext

from pipeline.config import S101Settings
from pipeline.orchestrator import RunRequest, RunResult, S101Orchestrator

logger = logging.getLogger(__name__)


def run_request(settings: S101Settings) -> RunRequest:
    """Translate resolved settings into the orchestrator's request."""
    return RunRequest(
        project_dir=settings.project_dir,
        build_dir=settings.build_dir,
        installation_dir=settings.installation_dir,
        configuration_dir=settings.configuration_dir,
        license_id=settings.license_id,
        tasks=tuple(settings.tasks),
        skip_if_unchanged=settings.skip_if_unchanged,
    )


class S101Pipeline:
    def __init__(self, orchestrator: S101Orchestrator) -> None:
        self.orchestrator = orchestrator

    def run(self, settings: S101Settings) -> RunResult:
        return self.orchestrator.run(run_request(settings))

    def install(self, settings: S101Settings) -> None:
        """Unconditional install; unlike ``run`` it replaces an existing installation."""
        installer = self.orchestrator.installer
        if settings.license_id:
            installer.license(settings.license_id)
        installer.install(settings.installation_dir, settings.configuration_dir)

    def configure(self, settings: S101Settings) -> None:
        """Unconditional configure; unlike ``run`` it replaces an existing configuration."""
        if not settings.installation_dir.exists():
            logger.info("Structure101 is not installed yet; installing first")
            self.install(settings)
        self.orchestrator.configurer.configure(settings.installation_dir, settings.configuration_dir)

    def context(self, settings: S101Settings) -> RunContext:
        """The context a run would use right now (label included), without side effects."""
        return self.orchestrator.resolve_context(run_request(settings))
