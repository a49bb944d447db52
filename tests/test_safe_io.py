import unittest
from pathlib import Path
import tempfile


from s101.io.fs import read_json, remove_tree, write_json_atomic, write_text_atomic


class TestSafeIO(unittest.TestCase):
    def test_write_json_is_atomic_and_cleans_temp(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            root = Path(td)
            out_dir = root / "out"
            out_path = out_dir / "s101-run.json"

            payload = {"a": 1, "b": True, "c": None, "nested": {"x": "y"}}
            write_json_atomic(out_path, payload)

            # File written and readable
            self.assertTrue(out_path.exists())
            self.assertEqual(payload, read_json(out_path))

            # No temp files left behind on success
            tmp_files = list(out_dir.glob("*.tmp"))
            self.assertEqual([], tmp_files)

    def test_write_json_serializes_paths_as_strings(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            out_path = Path(td) / "receipt.json"
            write_json_atomic(out_path, {"build_dir": Path("build") / "s101"})
            self.assertEqual({"build_dir": str(Path("build") / "s101")}, read_json(out_path))

    def test_write_text_uses_unix_newlines(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            out_path = Path(td) / "nested" / "license.properties"
            write_text_atomic(out_path, "licensecode=abc\nother=1\n")
            self.assertEqual(b"licensecode=abc\nother=1\n", out_path.read_bytes())

    def test_write_text_replaces_existing_file(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            out_path = Path(td) / "config.xml"
            out_path.write_text("old", encoding="utf-8")
            write_text_atomic(out_path, "new")
            self.assertEqual("new", out_path.read_text(encoding="utf-8"))

    def test_remove_tree_handles_dirs_files_and_missing_paths(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            root = Path(td)
            tree = root / "install" / "lib"
            tree.mkdir(parents=True)
            (tree / "a.jar").write_bytes(b"PK")
            single = root / "single.txt"
            single.write_text("x", encoding="utf-8")

            remove_tree(root / "install")
            remove_tree(single)
            remove_tree(root / "does-not-exist")

            self.assertFalse((root / "install").exists())
            self.assertFalse(single.exists())


if __name__ == "__main__":
    unittest.main()
