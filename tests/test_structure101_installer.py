from __future__ import annotations

import io
import zipfile
from pathlib import Path
from typing import Dict, Iterator, List

import pytest
import requests

from s101.errors import InstallError
from tools.structure101 import installer as installer_mod
from tools.structure101.installer import (
    Structure101Installer,
    find_archive_name,
    list_archive_names,
    unpack_archive,
)

INDEX_HTML = """
<html><body>
<a href="structure101-build-java-all-6.0.100.zip">old</a>
<a href="structure101-studio-6.0.200.zip">studio</a>
<a href='structure101-build-java-all-6.0.200.zip'>new</a>
<a href="readme.txt">readme</a>
</body></html>
"""


def _zip_bytes(entries: Dict[str, bytes]) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        for name, data in entries.items():
            zf.writestr(name, data)
    return buf.getvalue()


def _write_zip(path: Path, entries: Dict[str, bytes]) -> Path:
    path.write_bytes(_zip_bytes(entries))
    return path


class FakeResponse:
    def __init__(self, *, text: str = "", content: bytes = b"", status_code: int = 200) -> None:
        self.text = text
        self.content = content
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def iter_content(self, chunk_size: int = 1) -> Iterator[bytes]:
        for i in range(0, len(self.content), chunk_size):
            yield self.content[i : i + chunk_size]

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *exc) -> None:
        return None


def test_archive_names_in_page_order_and_last_wins() -> None:
    assert list_archive_names(INDEX_HTML) == [
        "structure101-build-java-all-6.0.100",
        "structure101-build-java-all-6.0.200",
    ]
    assert find_archive_name(INDEX_HTML) == "structure101-build-java-all-6.0.200"
    assert find_archive_name("<html>nothing here</html>") is None


def test_license_file_written_once_per_id(tmp_path: Path) -> None:
    inst = Structure101Installer(license_dir=tmp_path / "java")

    inst.license("0123-ABCD")
    assert inst.license_file.read_text(encoding="utf-8") == "licensecode=0123-ABCD\n"

    # Same id: existing file left alone.
    inst.license_file.write_text("licensecode=0123-ABCD\n# edited by hand\n", encoding="utf-8")
    inst.license("0123-ABCD")
    assert "# edited by hand" in inst.license_file.read_text(encoding="utf-8")

    # New id: replaced.
    inst.license("9999-ZZZZ")
    assert inst.license_file.read_text(encoding="utf-8") == "licensecode=9999-ZZZZ\n"


def test_license_id_prefix_of_stored_id_is_rewritten(tmp_path: Path) -> None:
    inst = Structure101Installer(license_dir=tmp_path / "java")

    inst.license("ABCD-1")
    assert not inst.needs_license("ABCD-1")
    assert inst.needs_license("ABCD")

    inst.license("ABCD")
    assert inst.license_file.read_text(encoding="utf-8") == "licensecode=ABCD\n"


def test_license_id_mentioned_only_in_a_comment_is_rewritten(tmp_path: Path) -> None:
    inst = Structure101Installer(license_dir=tmp_path / "java")
    inst.license_file.parent.mkdir(parents=True)
    inst.license_file.write_text("# previous licensecode=L-2\nlicensecode=L-1\n", encoding="utf-8")

    inst.license("L-2")

    assert inst.license_file.read_text(encoding="utf-8") == "licensecode=L-2\n"


def test_unpack_strips_top_level_folder(tmp_path: Path) -> None:
    archive = _write_zip(
        tmp_path / "a.zip",
        {
            "structure101-build-java-all-6.0.200/structure101-java-build.jar": b"PK-jar",
            "structure101-build-java-all-6.0.200/lib/dep.jar": b"dep",
        },
    )

    count = unpack_archive(archive, tmp_path / "inst", top_level="structure101-build-java-all-6.0.200")

    assert count == 2
    assert (tmp_path / "inst" / "structure101-java-build.jar").read_bytes() == b"PK-jar"
    assert (tmp_path / "inst" / "lib" / "dep.jar").read_bytes() == b"dep"


def test_unpack_rejects_entries_outside_the_destination(tmp_path: Path) -> None:
    archive = _write_zip(tmp_path / "evil.zip", {"top/../../evil.txt": b"x"})

    with pytest.raises(InstallError, match="escapes"):
        unpack_archive(archive, tmp_path / "inst", top_level="top")
    assert not (tmp_path / "evil.txt").exists()


def test_unpack_rejects_too_many_entries(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(installer_mod, "MAX_ENTRIES", 2)
    archive = _write_zip(tmp_path / "many.zip", {f"top/f{i}.txt": b"x" for i in range(3)})

    with pytest.raises(InstallError, match="too many entries"):
        unpack_archive(archive, tmp_path / "inst", top_level="top")


def test_unpack_rejects_oversized_content(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(installer_mod, "MAX_BYTES", 10)
    archive = _write_zip(tmp_path / "big.zip", {"top/big.bin": b"x" * 11})

    with pytest.raises(InstallError, match="too large"):
        unpack_archive(archive, tmp_path / "inst", top_level="top")


def test_install_downloads_latest_archive(tmp_path: Path, monkeypatch) -> None:
    archive = _zip_bytes({"structure101-build-java-all-6.0.200/structure101-java-build.jar": b"PK-jar"})
    calls: List[str] = []

    def fake_get(url: str, **kwargs) -> FakeResponse:
        calls.append(url)
        assert "timeout" in kwargs
        if url.endswith(".zip"):
            assert kwargs.get("stream") is True
            return FakeResponse(content=archive)
        return FakeResponse(text=INDEX_HTML)

    monkeypatch.setattr(installer_mod.requests, "get", fake_get)
    inst_dir = tmp_path / "inst"
    inst_dir.mkdir()
    (inst_dir / "stale.jar").write_bytes(b"old")

    Structure101Installer(download_url="https://example.test/binaries/v6/", license_dir=tmp_path).install(
        inst_dir, tmp_path / "s101"
    )

    assert calls == [
        "https://example.test/binaries/v6",
        "https://example.test/binaries/v6/structure101-build-java-all-6.0.200.zip",
    ]
    assert (inst_dir / "structure101-java-build.jar").read_bytes() == b"PK-jar"
    assert not (inst_dir / "stale.jar").exists()


def test_install_without_matching_link_raises(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(installer_mod.requests, "get", lambda url, **kw: FakeResponse(text="<html/>"))

    with pytest.raises(InstallError, match="No structure101-build-java-all archive"):
        Structure101Installer(license_dir=tmp_path).install(tmp_path / "inst", tmp_path / "s101")
    assert not (tmp_path / "inst").exists()


def test_failed_unpack_leaves_no_partial_installation(tmp_path: Path, monkeypatch) -> None:
    archive = _zip_bytes({"structure101-build-java-all-6.0.200/../../evil.txt": b"x"})

    def fake_get(url: str, **kwargs) -> FakeResponse:
        if url.endswith(".zip"):
            return FakeResponse(content=archive)
        return FakeResponse(text=INDEX_HTML)

    monkeypatch.setattr(installer_mod.requests, "get", fake_get)

    with pytest.raises(InstallError):
        Structure101Installer(license_dir=tmp_path).install(tmp_path / "inst", tmp_path / "s101")
    assert not (tmp_path / "inst").exists()


def test_http_errors_propagate(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(installer_mod.requests, "get", lambda url, **kw: FakeResponse(status_code=503))

    with pytest.raises(requests.HTTPError):
        Structure101Installer(license_dir=tmp_path).install(tmp_path / "inst", tmp_path / "s101")
