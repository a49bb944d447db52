"""tools/structure101/templates.py

Default project files written by the configurer.

Kept as plain string rendering: the files are small, and the one line the rest
of the runner cares about (the ``relative-to`` property) must come out in the
exact shape :mod:`s101.io.mirror` rewrites.
"""

from __future__ import annotations

from typing import Sequence
from xml.sax.saxutils import escape

from s101.domain.run_context import LABEL_PROPERTY
from s101.io.layout import MANIFEST_FILENAME, REPOSITORY_DIRNAME
from s101.io.manifest import ManifestEntry, format_manifest_entry


def _attr(value: str) -> str:
    return escape(value, {'"': "&quot;"})


def render_project_hsp(
    *,
    version: str,
    patch_version: str,
    relative_to: str,
    entries: Sequence[ManifestEntry],
) -> str:
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<local-project version="{_attr(version)}" build="{_attr(patch_version)}" language="java" flavor="j2se">',
        f'  <property name="relative-to" value="{_attr(relative_to)}" />',
        '  <classpath relativeto="relative-to">',
    ]
    lines += [f"    {format_manifest_entry(e)}" for e in entries]
    lines += [
        "  </classpath>",
        '  <granularity level="class" />',
        "  <transformations />",
        "</local-project>",
        "",
    ]
    return "\n".join(lines)


def render_config_xml(*, project_name: str) -> str:
    # ${s101.label} is substituted by the analyzer from the Java system property.
    label_ref = "${" + LABEL_PROPERTY + "}"
    return "\n".join(
        [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<headless version="1.0">',
            "  <operations>",
            '    <operation type="publish">',
            f'      <argument name="local-project" value="{MANIFEST_FILENAME}"/>',
            f'      <argument name="repository" value="{REPOSITORY_DIRNAME}"/>',
            f'      <argument name="project" value="{_attr(project_name)}"/>',
            f'      <argument name="label" value="{label_ref}"/>',
            '      <argument name="overwrite" value="true"/>',
            "    </operation>",
            "  </operations>",
            "</headless>",
            "",
        ]
    )


def render_repository_xml(*, version: str, project_name: str) -> str:
    return "\n".join(
        [
            '<?xml version="1.0" encoding="UTF-8"?>',
            f'<repository version="{_attr(version)}">',
            f'  <project name="{_attr(project_name)}" language="java" />',
            "</repository>",
            "",
        ]
    )
