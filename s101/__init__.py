"""s101

Core package for the Structure101 build runner.

Why this exists
---------------
The runner is split into layers:

* ``s101`` (this package) owns the *contracts*: domain types, the on-disk
  layout of the configuration/build directories, and the pure-ish IO engines
  (label resolution, manifest scanning, directory mirroring).
* ``tools`` owns the adapters that talk to the outside world (download the
  tool, write default project files, run Java).
* ``pipeline`` sequences everything and owns configuration.

Contracts never depend on tools, pipeline or cli (see
``tests/test_dependency_boundaries.py``).
"""

from __future__ import annotations
