"""pipeline.orchestrator

The Structure101 run lifecycle.

One call to :meth:`S101Orchestrator.run` is one analysis run::

    resolve label -> ensure installed -> ensure configured -> stage
        -> attach incremental inputs -> run analyzer -> promote (baseline only)

Design principles
-----------------
- The label is resolved once, before install/configure can touch the
  configuration directory, and is carried in :class:`RunContext`.
- Collaborators come in through the constructor (see
  :mod:`pipeline.collaborators`); this module never imports the Structure101
  adapters.
- Fail fast. Mirror and manifest errors propagate, a failed analysis is
  raised, and nothing is promoted unless the analyzer exited 0.
- Only baseline runs write to the configuration directory.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from s101.domain.run_context import RunContext
from s101.domain.tasks import AnalysisInputs, BuildTask, build_task_output_index
from s101.errors import AnalyzerFailedError
from s101.io.layout import REPOSITORY_DIRNAME
from s101.io.manifest import attach_manifest_inputs
from s101.io.mirror import MirrorReport, TransformRule, default_rules, mirror_directory

from pipeline.collaborators import Analyzer, Configurer, Installer
from pipeline.record import (
    STATUS_ANALYSIS_FAILED,
    STATUS_SUCCESS,
    STATUS_UP_TO_DATE,
    is_up_to_date,
    now_iso,
    write_receipt,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunRequest:
    """Parameters for one analysis run."""

    project_dir: Path
    build_dir: Path
    installation_dir: Path
    configuration_dir: Path
    license_id: Optional[str] = None
    tasks: Sequence[BuildTask] = ()
    skip_if_unchanged: bool = False


@dataclass(frozen=True)
class RunResult:
    context: RunContext
    status: str
    exit_code: int
    inputs: Tuple[Path, ...] = ()
    fingerprint: str = ""
    installed: bool = False
    configured: bool = False
    promoted: bool = False
    receipt: Optional[Path] = None
    mirrors: Tuple[MirrorReport, ...] = field(default_factory=tuple)

    @property
    def label(self) -> str:
        return self.context.label


class S101Orchestrator:
    """Sequences one Structure101 run around the injected collaborators."""

    def __init__(self, *, installer: Installer, configurer: Configurer, analyzer: Analyzer) -> None:
        self.installer = installer
        self.configurer = configurer
        self.analyzer = analyzer

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def resolve_context(self, req: RunRequest) -> RunContext:
        ctx = RunContext.resolve(
            installation_dir=req.installation_dir,
            configuration_dir=req.configuration_dir,
            build_dir=req.build_dir,
            project_dir=req.project_dir,
        )
        logger.info("Structure101 label for this run: %s", ctx.label)
        return ctx

    def ensure_installed(self, ctx: RunContext, license_id: Optional[str] = None) -> bool:
        if license_id:
            self.installer.license(license_id)
        if ctx.installation_dir.exists():
            return False
        logger.info("Installing Structure101 into %s", ctx.installation_dir)
        self.installer.install(ctx.installation_dir, ctx.configuration_dir)
        return True

    def ensure_configured(self, ctx: RunContext) -> bool:
        if ctx.configuration_dir.exists():
            return False
        logger.info("Writing default Structure101 configuration to %s", ctx.configuration_dir)
        self.configurer.configure(ctx.installation_dir, ctx.configuration_dir)
        return True

    def _rules(self, ctx: RunContext) -> Tuple[TransformRule, ...]:
        return default_rules(analysis_dir=ctx.staged.root, project_dir=ctx.project_dir)

    def stage(self, ctx: RunContext) -> MirrorReport:
        report = mirror_directory(ctx.configuration_dir, ctx.build_dir, self._rules(ctx))
        logger.info("Staged %d file(s) from %s into %s", report.files, ctx.configuration_dir, ctx.staged.root)
        return report

    def attach_inputs(self, ctx: RunContext, tasks: Sequence[BuildTask]) -> AnalysisInputs:
        inputs = AnalysisInputs()
        attach_manifest_inputs(ctx.staged.manifest, build_task_output_index(tasks), inputs)
        return inputs

    def promote(self, ctx: RunContext) -> List[MirrorReport]:
        """Copy a freshly created baseline back into the configuration directory.

        Two mirrors with different anchors: the snapshots subtree into
        ``<conf>/repository``, then the whole repository subtree into ``<conf>``.
        """
        rules = self._rules(ctx)
        reports = [
            mirror_directory(ctx.staged.snapshots, ctx.configuration_dir / REPOSITORY_DIRNAME, rules),
            mirror_directory(ctx.staged.repository, ctx.configuration_dir, rules),
        ]
        logger.info("Promoted baseline into %s", ctx.configuration_dir)
        return reports

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def run(self, req: RunRequest) -> RunResult:
        started = now_iso()
        ctx = self.resolve_context(req)

        installed = self.ensure_installed(ctx, req.license_id)
        configured = self.ensure_configured(ctx)
        mirrors: List[MirrorReport] = [self.stage(ctx)]

        inputs = self.attach_inputs(ctx, req.tasks)
        fingerprint = inputs.fingerprint(ctx.staged.config, ctx.staged.manifest)

        if req.skip_if_unchanged and not ctx.is_baseline and is_up_to_date(ctx.build_dir, fingerprint):
            logger.info("Inputs unchanged since the last successful run; skipping analysis")
            receipt = write_receipt(
                ctx,
                status=STATUS_UP_TO_DATE,
                started=started,
                inputs=inputs.paths,
                fingerprint=fingerprint,
            )
            return RunResult(
                context=ctx,
                status=STATUS_UP_TO_DATE,
                exit_code=0,
                inputs=tuple(inputs.paths),
                fingerprint=fingerprint,
                installed=installed,
                configured=configured,
                receipt=receipt,
                mirrors=tuple(mirrors),
            )

        result = self.analyzer.run(ctx)
        log_path = getattr(result, "log_path", None)

        if result.exit_code != 0:
            write_receipt(
                ctx,
                status=STATUS_ANALYSIS_FAILED,
                started=started,
                inputs=inputs.paths,
                fingerprint=fingerprint,
                command=result.command_str,
                exit_code=result.exit_code,
                elapsed_seconds=result.elapsed_seconds,
                log_path=log_path,
            )
            raise AnalyzerFailedError(result.exit_code, log_path=str(log_path) if log_path else None)

        promoted = False
        if ctx.is_baseline:
            mirrors.extend(self.promote(ctx))
            promoted = True

        receipt = write_receipt(
            ctx,
            status=STATUS_SUCCESS,
            started=started,
            inputs=inputs.paths,
            fingerprint=fingerprint,
            command=result.command_str,
            exit_code=result.exit_code,
            elapsed_seconds=result.elapsed_seconds,
            promoted=promoted,
            log_path=log_path,
        )
        return RunResult(
            context=ctx,
            status=STATUS_SUCCESS,
            exit_code=0,
            inputs=tuple(inputs.paths),
            fingerprint=fingerprint,
            installed=installed,
            configured=configured,
            promoted=promoted,
            receipt=receipt,
            mirrors=tuple(mirrors),
        )
