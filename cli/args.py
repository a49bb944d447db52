from __future__ import annotations

import argparse
from typing import List, Optional

MODES = ("run", "install", "configure")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run Structure101 headless analysis, installing and configuring if necessary.",
    )
    parser.add_argument(
        "--mode",
        choices=MODES,
        default="run",
        help=(
            "run = full analysis lifecycle (default), install = (re)install Structure101, "
            "configure = (re)write the default configuration directory"
        ),
    )
    parser.add_argument(
        "--project-dir",
        default=".",
        help="Project root; relative paths are anchored here (default: current directory).",
    )
    parser.add_argument(
        "--config",
        dest="config_path",
        default=None,
        help="Settings YAML (default: <project-dir>/s101.yaml if present).",
    )

    # Directory overrides
    parser.add_argument("--build-dir", help="Build output directory (default: <project-dir>/build).")
    parser.add_argument("--installation-dir", help="Structure101 installation directory.")
    parser.add_argument(
        "--configuration-dir",
        help="Persistent configuration directory; must be named 's101' (default: <project-dir>/s101).",
    )

    parser.add_argument("--license-id", help="Structure101 license id (env: STRUCTURE101_LICENSEID).")
    parser.add_argument("--java", help="Java executable (default: java on PATH, then $JAVA_HOME/bin/java).")
    parser.add_argument(
        "--skip-if-unchanged",
        action="store_true",
        default=None,
        help="Skip a 'recent' analysis when no declared input changed since the last successful run.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging.")
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def settings_overrides(args: argparse.Namespace) -> dict:
    """CLI values that override s101.yaml / environment (None means 'not given')."""
    return {
        "build_dir": args.build_dir,
        "installation_dir": args.installation_dir,
        "configuration_dir": args.configuration_dir,
        "license_id": args.license_id,
        "java": args.java,
        "skip_if_unchanged": args.skip_if_unchanged,
    }
