#!/usr/bin/env python3
"""
CLI wrapper for the Structure101 runner.

Modes:
  1) run       - install/configure if needed, analyze, save a new baseline
  2) install   - (re)install the Structure101 headless build tool
  3) configure - (re)write the default configuration directory

Usage:
  python s101_cli.py
  python s101_cli.py --project-dir ~/src/my-app --skip-if-unchanged
  python s101_cli.py --mode install --license-id 0123-ABCD
  python s101_cli.py --mode configure --config ci/s101.yaml

The first successful run against an empty configuration directory creates the
baseline snapshot and copies it into <project>/s101. Later runs are "recent"
runs compared against that baseline and never modify <project>/s101.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional

# ---------------------------------------------------------------------------
# Minimal bootstrap so this file can be executed directly from a checkout.
# ---------------------------------------------------------------------------
if __package__ in (None, ""):
    sys.path.insert(0, str(Path(__file__).resolve().parent))

from cli.args import parse_args
from cli.dispatch import dispatch
from pipeline.wiring import build_pipeline, configure_logging


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(verbose=bool(args.verbose))
    return dispatch(args, pipeline_factory=build_pipeline)


if __name__ == "__main__":
    raise SystemExit(main())
