"""pipeline.config

Runner settings: YAML file + environment + CLI overrides.

Precedence (lowest to highest)::

    defaults  <  s101.yaml  <  environment (.env included)  <  CLI flags

Example ``s101.yaml``::

    build_dir: build
    configuration_dir: s101
    license_id: 0123-ABCD
    modules:
      - name: core:compileJava
        module: core
        outputs: [core/build/classes/java/main]
      - module: web
        outputs: [web/build/classes/java/main]

Relative paths are anchored at the project directory.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import yaml
from dotenv import load_dotenv

from s101.domain.tasks import BuildTask, build_task_output_index
from s101.errors import ConfigurationError
from s101.io.layout import ANALYSIS_DIRNAME, DOWNLOAD_URL_DEFAULT

DEFAULT_CONFIG_FILENAME = "s101.yaml"

# env var -> settings field
ENV_OVERRIDES: Dict[str, str] = {
    "STRUCTURE101_LICENSEID": "license_id",
    "S101_BUILD_DIR": "build_dir",
    "S101_INSTALLATION_DIR": "installation_dir",
    "S101_CONFIGURATION_DIR": "configuration_dir",
    "S101_DOWNLOAD_URL": "download_url",
    "S101_JAVA": "java",
}

_KNOWN_KEYS = {
    "build_dir",
    "installation_dir",
    "configuration_dir",
    "license_id",
    "download_url",
    "java",
    "skip_if_unchanged",
    "modules",
}


@dataclass(frozen=True)
class S101Settings:
    project_dir: Path
    build_dir: Path
    installation_dir: Path
    configuration_dir: Path
    license_id: Optional[str] = None
    download_url: str = DOWNLOAD_URL_DEFAULT
    java: Optional[str] = None
    skip_if_unchanged: bool = False
    tasks: Tuple[BuildTask, ...] = field(default_factory=tuple)


def _anchor(project_dir: Path, value: Any) -> Path:
    p = Path(str(value)).expanduser()
    return p if p.is_absolute() else (project_dir / p)


def _load_yaml(path: Path) -> Dict[str, Any]:
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Settings YAML must be a mapping/object at top level: {path}")
    unknown = sorted(set(raw) - _KNOWN_KEYS)
    if unknown:
        raise ConfigurationError(f"Unknown settings key(s) in {path}: {', '.join(unknown)}")
    return raw


def parse_modules(project_dir: Path, raw: Any) -> Tuple[BuildTask, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise ConfigurationError("'modules' must be a list")

    tasks: List[BuildTask] = []
    for i, item in enumerate(raw):
        if not isinstance(item, dict) or not item.get("module"):
            raise ConfigurationError(f"modules[{i}] must be a mapping with a 'module' key")
        module = str(item["module"])
        outputs = item.get("outputs") or []
        if isinstance(outputs, str):
            outputs = [outputs]
        if not isinstance(outputs, list):
            raise ConfigurationError(f"modules[{i}].outputs must be a list of paths")
        tasks.append(
            BuildTask(
                name=str(item.get("name") or f"{module}:compileJava"),
                module=module,
                outputs=tuple(_anchor(project_dir, o) for o in outputs),
            )
        )
    # Fail early on duplicate module names.
    build_task_output_index(tasks)
    return tuple(tasks)


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "y", "on"}


def load_settings(
    project_dir: Path,
    *,
    config_path: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> S101Settings:
    """Resolve settings for *project_dir*.

    When *env* is omitted, ``<project>/.env`` is loaded into ``os.environ``
    (without overriding variables that are already set) and ``os.environ`` is
    used. Passing *env* explicitly skips the ``.env`` file.
    """
    project_dir = Path(project_dir).expanduser().resolve()

    if env is None:
        load_dotenv(project_dir / ".env", override=False)
        env = os.environ

    if config_path is not None:
        cfg_file = _anchor(project_dir, config_path)
        if not cfg_file.exists():
            raise ConfigurationError(f"Settings file not found: {cfg_file}")
        raw = _load_yaml(cfg_file)
    else:
        cfg_file = project_dir / DEFAULT_CONFIG_FILENAME
        raw = _load_yaml(cfg_file) if cfg_file.exists() else {}

    values: Dict[str, Any] = {k: v for k, v in raw.items() if k != "modules" and v is not None}
    for var, key in ENV_OVERRIDES.items():
        if env.get(var):
            values[key] = env[var]
    for key, value in (overrides or {}).items():
        if value is not None:
            values[key] = value

    build_dir = _anchor(project_dir, values.get("build_dir", "build"))
    settings = S101Settings(
        project_dir=project_dir,
        build_dir=build_dir,
        installation_dir=build_dir / ".s101-install",
        configuration_dir=project_dir / ANALYSIS_DIRNAME,
        tasks=parse_modules(project_dir, raw.get("modules")),
    )

    updates: Dict[str, Any] = {}
    for key in ("installation_dir", "configuration_dir"):
        if key in values:
            updates[key] = _anchor(project_dir, values[key])
    for key in ("license_id", "download_url", "java"):
        if key in values:
            updates[key] = str(values[key])
    if "skip_if_unchanged" in values:
        updates["skip_if_unchanged"] = _as_bool(values["skip_if_unchanged"])
    settings = replace(settings, **updates)

    validate_settings(settings)
    return settings


def validate_settings(settings: S101Settings) -> None:
    if settings.configuration_dir.name != ANALYSIS_DIRNAME:
        raise ConfigurationError(
            f"Configuration directory must be named '{ANALYSIS_DIRNAME}' "
            f"(it is staged as <build>/{ANALYSIS_DIRNAME}); got {settings.configuration_dir}"
        )
    if settings.installation_dir.resolve() == (settings.build_dir / ANALYSIS_DIRNAME).resolve():
        raise ConfigurationError(
            f"Installation directory {settings.installation_dir} collides with the staged "
            f"configuration directory"
        )
