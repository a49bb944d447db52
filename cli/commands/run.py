from __future__ import annotations

from pipeline.config import S101Settings
from pipeline.pipeline import S101Pipeline
from pipeline.record import STATUS_UP_TO_DATE


def run_analysis(pipeline: S101Pipeline, settings: S101Settings) -> int:
    print("\n🚀 Running Structure101")
    print(f"  Project       : {settings.project_dir}")
    print(f"  Configuration : {settings.configuration_dir}")
    print(f"  Build output  : {settings.build_dir}")

    result = pipeline.run(settings)

    print(f"  Label         : {result.label}")
    if result.inputs:
        print(f"  Inputs        : {len(result.inputs)} build output(s)")
    if result.status == STATUS_UP_TO_DATE:
        print("\n⏭️ Inputs unchanged; analysis skipped.")
    elif result.promoted:
        print(f"\n✅ Baseline created and saved to {settings.configuration_dir}.")
    else:
        print("\n✅ Analysis completed (recent run; configuration directory untouched).")
    return result.exit_code
