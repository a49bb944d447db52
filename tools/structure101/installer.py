"""tools/structure101/installer.py

Structure101 installation: license file + download + unpack.

Flow::

    license(id)                 -> ~/.Structure101/java/.structure101license.properties
    install(inst, conf)         -> rm -rf inst
                                -> GET download index, pick latest build-java-all zip
                                -> download, unpack into inst (top-level folder stripped)

The archive comes from the network, so unpacking is guarded against archives
with too many entries, too many bytes, or entries that escape the installation
directory.
"""

from __future__ import annotations

import logging
import re
import tempfile
import zipfile
from pathlib import Path
from typing import List, Optional

import requests

from s101.errors import InstallError
from s101.io.fs import remove_tree, write_text_atomic
from s101.io.layout import DOWNLOAD_URL_DEFAULT

from .configurer import parse_properties

logger = logging.getLogger(__name__)

LICENSE_FILENAME = ".structure101license.properties"
LICENSE_PROPERTY = "licensecode"

ARCHIVE_NAME_RE = re.compile(r"(structure101-build-java-all-)(.*)\.zip")
HREF_RE = re.compile(r"""href\s*=\s*["']([^"']+)["']""", re.IGNORECASE)

MAX_ENTRIES = 200
MAX_BYTES = 0x10000000  # ~268MB uncompressed
CHUNK = 64 * 1024


def default_license_dir() -> Path:
    return Path.home() / ".Structure101" / "java"


def list_archive_names(index_html: str) -> List[str]:
    """All archive base names (no ``.zip``) linked from an index page, in page order."""
    out: List[str] = []
    for href in HREF_RE.findall(index_html):
        m = ARCHIVE_NAME_RE.search(href)
        if m:
            out.append(m.group(1) + m.group(2))
    return out


def find_archive_name(index_html: str) -> Optional[str]:
    """The last linked archive wins; the index lists builds oldest first."""
    names = list_archive_names(index_html)
    return names[-1] if names else None


def _inside(root: Path, candidate: Path) -> bool:
    try:
        candidate.relative_to(root)
        return True
    except ValueError:
        return False


def _strip_top_level(name: str, top_level: str) -> str:
    prefix = top_level.rstrip("/") + "/"
    return name[len(prefix):] if name.startswith(prefix) else name


def unpack_archive(archive: Path, destination: Path, *, top_level: str) -> int:
    """Unpack *archive* into *destination*, dropping the *top_level* folder.

    Returns the number of files written.
    """
    destination = Path(destination)
    destination.mkdir(parents=True, exist_ok=True)
    root = destination.resolve()

    written = 0
    total = 0
    with zipfile.ZipFile(archive) as zf:
        infos = zf.infolist()
        if len(infos) > MAX_ENTRIES:
            raise InstallError(f"Archive {archive.name} has too many entries ({len(infos)} > {MAX_ENTRIES})")

        for info in infos:
            rel = _strip_top_level(info.filename, top_level)
            if not rel or rel == "/":
                continue
            target = (root / rel).resolve()
            if not _inside(root, target):
                raise InstallError(f"Archive entry escapes installation directory: {info.filename}")

            if info.is_dir():
                target.mkdir(parents=True, exist_ok=True)
                continue

            target.parent.mkdir(parents=True, exist_ok=True)
            with zf.open(info) as src, target.open("wb") as dst:
                while True:
                    chunk = src.read(CHUNK)
                    if not chunk:
                        break
                    total += len(chunk)
                    if total > MAX_BYTES:
                        raise InstallError(f"Archive {archive.name} is too large once unpacked (> {MAX_BYTES} bytes)")
                    dst.write(chunk)
            written += 1
    return written


class Structure101Installer:
    """Installs the Structure101 headless build tool."""

    def __init__(
        self,
        *,
        download_url: str = DOWNLOAD_URL_DEFAULT,
        license_dir: Optional[Path] = None,
        timeout_seconds: int = 60,
    ) -> None:
        self.download_url = download_url.rstrip("/")
        self.license_dir = Path(license_dir) if license_dir else default_license_dir()
        self.timeout_seconds = timeout_seconds

    @property
    def license_file(self) -> Path:
        return self.license_dir / LICENSE_FILENAME

    def needs_license(self, license_id: str) -> bool:
        if not self.license_file.exists():
            return True
        props = parse_properties(self.license_file.read_text(encoding="utf-8", errors="replace"))
        return props.get(LICENSE_PROPERTY) != license_id

    def license(self, license_id: str) -> None:
        if not self.needs_license(license_id):
            logger.debug("License file already up to date: %s", self.license_file)
            return
        write_text_atomic(self.license_file, f"{LICENSE_PROPERTY}={license_id}\n")
        logger.info("Wrote Structure101 license to %s", self.license_file)

    def install(self, installation_dir: Path, configuration_dir: Path) -> None:
        installation_dir = Path(installation_dir)
        remove_tree(installation_dir)

        resp = requests.get(self.download_url, timeout=self.timeout_seconds)
        resp.raise_for_status()
        name = find_archive_name(resp.text)
        if name is None:
            raise InstallError(f"No structure101-build-java-all archive linked from {self.download_url}")

        url = f"{self.download_url}/{name}.zip"
        print(f"📥 Downloading {url} ...")
        try:
            with tempfile.TemporaryDirectory(prefix="s101-download-") as td:
                archive = Path(td) / f"{name}.zip"
                self._download(url, archive)
                count = unpack_archive(archive, installation_dir, top_level=name)
        except BaseException:
            # A half-unpacked directory would look installed to the next run.
            remove_tree(installation_dir)
            raise
        print(f"✅ Installed Structure101 ({count} files) into {installation_dir}")

    def _download(self, url: str, target: Path) -> None:
        with requests.get(url, stream=True, timeout=self.timeout_seconds) as resp:
            resp.raise_for_status()
            with target.open("wb") as f:
                for chunk in resp.iter_content(chunk_size=CHUNK):
                    if chunk:
                        f.write(chunk)

