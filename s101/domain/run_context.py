"""s101.domain.run_context

Per-invocation run record and the baseline/recent label.

The label is resolved exactly once, before anything can create or modify the
configuration directory, and then travels with the :class:`RunContext`. No step
re-reads it from ambient configuration.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from s101.io.layout import StagedPaths, baseline_snapshot_path, build_jar_path

BASELINE = "baseline"
RECENT = "recent"
LABELS = (BASELINE, RECENT)

# Java system property the headless config reads as ${s101.label}.
LABEL_PROPERTY = "s101.label"
LABEL_ENV_VAR = "S101_LABEL"


def resolve_label(configuration_dir: Path) -> str:
    """Return ``"baseline"`` unless a baseline snapshot is already persisted."""
    if baseline_snapshot_path(configuration_dir).exists():
        return RECENT
    return BASELINE


@dataclass(frozen=True)
class RunContext:
    installation_dir: Path
    configuration_dir: Path
    build_dir: Path
    project_dir: Path
    label: str

    def __post_init__(self) -> None:
        if self.label not in LABELS:
            raise ValueError(f"label must be one of {LABELS}, got {self.label!r}")

    @classmethod
    def resolve(
        cls,
        *,
        installation_dir: Path,
        configuration_dir: Path,
        build_dir: Path,
        project_dir: Path,
    ) -> "RunContext":
        return cls(
            installation_dir=Path(installation_dir),
            configuration_dir=Path(configuration_dir),
            build_dir=Path(build_dir),
            project_dir=Path(project_dir),
            label=resolve_label(Path(configuration_dir)),
        )

    @property
    def is_baseline(self) -> bool:
        return self.label == BASELINE

    @property
    def staged(self) -> StagedPaths:
        return StagedPaths.for_build_dir(self.build_dir)

    @property
    def build_jar(self) -> Path:
        return build_jar_path(self.installation_dir)
