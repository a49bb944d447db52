from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Callable

from s101.errors import AnalyzerFailedError, S101Error

from cli.args import settings_overrides
from cli.commands.configure import run_configure
from cli.commands.install import run_install
from cli.commands.run import run_analysis
from pipeline.config import S101Settings, load_settings
from pipeline.pipeline import S101Pipeline

PipelineFactory = Callable[[S101Settings], S101Pipeline]

_COMMANDS = {
    "run": run_analysis,
    "install": run_install,
    "configure": run_configure,
}


def dispatch(args: argparse.Namespace, *, pipeline_factory: PipelineFactory) -> int:
    """Resolve settings, build the pipeline and run the selected mode.

    Runner errors become a one-line message and a non-zero exit code; anything
    else is a bug and keeps its traceback.
    """
    try:
        settings = load_settings(
            Path(args.project_dir),
            config_path=Path(args.config_path) if args.config_path else None,
            overrides=settings_overrides(args),
        )
        return int(_COMMANDS[args.mode](pipeline_factory(settings), settings))
    except AnalyzerFailedError as e:
        print(f"\n⚠️ {e}", file=sys.stderr)
        return e.exit_code or 1
    except (S101Error, FileNotFoundError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
