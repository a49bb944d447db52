"""pipeline.wiring

This module is the **composition root** for the runner.

"Composition root" means: the single place where we *assemble* the running
application from its building blocks:

- configure logging
- choose real vs stub collaborators (useful for testing)
- build the high-level pipeline facade object

Keeping this wiring in one place prevents configuration and dependency setup
from being duplicated across entrypoints (CLI, scripts, CI).
"""

from __future__ import annotations

import logging
from typing import Optional

from tools.structure101 import Structure101Analyzer, Structure101Configurer, Structure101Installer

from pipeline.collaborators import Analyzer, Configurer, Installer
from pipeline.config import S101Settings
from pipeline.orchestrator import S101Orchestrator
from pipeline.pipeline import S101Pipeline

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def configure_logging(*, verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
    )
    # urllib3 is noisy at DEBUG and adds nothing to a download progress line.
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def build_pipeline(
    settings: S101Settings,
    *,
    installer: Optional[Installer] = None,
    configurer: Optional[Configurer] = None,
    analyzer: Optional[Analyzer] = None,
) -> S101Pipeline:
    """Build the facade with real Structure101 collaborators unless overridden."""
    orchestrator = S101Orchestrator(
        installer=installer or Structure101Installer(download_url=settings.download_url),
        configurer=configurer or Structure101Configurer(project_dir=settings.project_dir, tasks=settings.tasks),
        analyzer=analyzer or Structure101Analyzer(java=settings.java),
    )
    return S101Pipeline(orchestrator)
