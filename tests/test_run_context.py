import unittest
from pathlib import Path
import tempfile


from s101.domain.run_context import BASELINE, RECENT, RunContext, resolve_label


class TestLabelResolution(unittest.TestCase):
    def test_missing_configuration_dir_is_baseline(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            self.assertEqual(BASELINE, resolve_label(Path(td) / "s101"))

    def test_configuration_without_baseline_snapshot_is_baseline(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            conf = Path(td) / "s101"
            (conf / "repository" / "snapshots").mkdir(parents=True)
            (conf / "config.xml").write_text("<headless/>", encoding="utf-8")
            self.assertEqual(BASELINE, resolve_label(conf))

    def test_persisted_baseline_snapshot_means_recent(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            conf = Path(td) / "s101"
            (conf / "repository" / "snapshots" / "baseline").mkdir(parents=True)
            self.assertEqual(RECENT, resolve_label(conf))

    def test_other_snapshot_names_do_not_count(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            conf = Path(td) / "s101"
            (conf / "repository" / "snapshots" / "recent").mkdir(parents=True)
            self.assertEqual(BASELINE, resolve_label(conf))


class TestRunContext(unittest.TestCase):
    def test_resolve_fixes_label_and_derives_staged_paths(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            root = Path(td)
            ctx = RunContext.resolve(
                installation_dir=root / "inst",
                configuration_dir=root / "proj" / "s101",
                build_dir=root / "proj" / "build",
                project_dir=root / "proj",
            )

            self.assertEqual(BASELINE, ctx.label)
            self.assertTrue(ctx.is_baseline)
            self.assertEqual(root / "proj" / "build" / "s101", ctx.staged.root)
            self.assertEqual(root / "proj" / "build" / "s101" / "config.xml", ctx.staged.config)
            self.assertEqual(root / "proj" / "build" / "s101" / "project.java.hsp", ctx.staged.manifest)
            self.assertEqual(
                root / "proj" / "build" / "s101" / "repository" / "snapshots",
                ctx.staged.snapshots,
            )
            self.assertEqual(root / "inst" / "structure101-java-build.jar", ctx.build_jar)

            # Creating the baseline afterwards does not change an existing context.
            (root / "proj" / "s101" / "repository" / "snapshots" / "baseline").mkdir(parents=True)
            self.assertEqual(BASELINE, ctx.label)

    def test_unknown_label_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            RunContext(
                installation_dir=Path("inst"),
                configuration_dir=Path("s101"),
                build_dir=Path("build"),
                project_dir=Path("."),
                label="nightly",
            )


if __name__ == "__main__":
    unittest.main()
