from __future__ import annotations

from pipeline.config import S101Settings
from pipeline.pipeline import S101Pipeline


def run_install(pipeline: S101Pipeline, settings: S101Settings) -> int:
    print(f"\n📦 Installing Structure101 into {settings.installation_dir}")
    if not settings.license_id:
        print("  (no license id configured; set STRUCTURE101_LICENSEID or --license-id)")
    pipeline.install(settings)
    return 0
