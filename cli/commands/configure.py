from __future__ import annotations

from pipeline.config import S101Settings
from pipeline.pipeline import S101Pipeline


def run_configure(pipeline: S101Pipeline, settings: S101Settings) -> int:
    print(f"\n🛠️ Applying a default Structure101 configuration to {settings.configuration_dir}")
    if settings.configuration_dir.exists():
        print("  (existing configuration, including any saved baseline, will be replaced)")
    pipeline.configure(settings)
    print(f"✅ Configured ({len(settings.tasks)} module task(s) in project.java.hsp)")
    return 0
