#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
End-to-end tests for the `atref` command line.

Commands run in-process through `AtRef.run`, with stdout captured in a
StringIO buffer and an explicit workspace root so that the result does not
depend on where the temporary directory lives.
"""
import io
import json
import os
import unittest
from unittest import mock

from atref import cli
from atref.cli import AtRef
from tools.fixtures import TempTreeTestCase


class CliBaseTest(TempTreeTestCase):
    def run_cli(self, *args):
        argv = list(args)
        if argv[0] in ("validate", "check", "compile"):
            argv += ["--no-color", "--workspace-root-path", str(self.root)]
        buf = io.StringIO()
        code = AtRef.run(argv, stdout=buf)
        return code, buf.getvalue()

    def assertInDump(self, needle, dump):
        self.assertIn(needle, dump, f"{needle!r} not found in output:\n{dump}")

    def assertNotInDump(self, needle, dump):
        self.assertNotIn(needle, dump, f"{needle!r} unexpectedly found in output:\n{dump}")


# ---------------------------------------------------------------------- #
#  1. validate                                                           #
# ---------------------------------------------------------------------- #
class ValidateCommandTests(CliBaseTest):
    def setUp(self):
        super().setUp()
        self.ok = self.write("ok.md", "See @target.md\n")
        self.bad = self.write("bad.md", "See @target.md and @missing.md\n")
        self.write("target.md", "# Target\n")

    def test_valid_file_exits_zero(self):
        code, out = self.run_cli("validate", str(self.ok))
        self.assertEqual(code, 0)
        self.assertInDump("✓ 1:5 target.md", out)
        self.assertInDump("1 references: 1 valid, 0 invalid", out)

    def test_broken_file_exits_one(self):
        code, out = self.run_cli("validate", str(self.bad))
        self.assertEqual(code, 1)
        self.assertInDump("✗ 1:20 missing.md", out)

    def test_quiet_hides_clean_files(self):
        code, out = self.run_cli("validate", "-q", str(self.ok), str(self.bad))
        self.assertEqual(code, 1)
        self.assertNotInDump("✓", out)
        self.assertInDump("missing.md", out)
        self.assertInDump("Files checked: 2", out)

    def test_ignore_pattern(self):
        code, _ = self.run_cli("validate", "--ignore", r"^missing", str(self.bad))
        self.assertEqual(code, 0)

    def test_missing_input_file(self):
        code, _ = self.run_cli("validate", self.path("absent.md"))
        self.assertEqual(code, 1)

    def test_recursive_summary(self):
        root = self.write("root.md", "@ok.md @bad.md\n")
        code, out = self.run_cli("validate", "-r", str(root))
        self.assertEqual(code, 1)
        self.assertInDump("Validation complete (recursive)", out)
        self.assertInDump("4 markdown files", out)
        self.assertInDump("Broken References:", out)
        self.assertInDump("1 broken reference found", out)

    def test_directory_input_expands(self):
        code, out = self.run_cli("validate", str(self.root))
        self.assertEqual(code, 1)
        self.assertInDump("Files checked: 3", out)


# ---------------------------------------------------------------------- #
#  2. check                                                              #
# ---------------------------------------------------------------------- #
class CheckCommandTests(CliBaseTest):
    def test_clean_tree(self):
        self.write("a.md", "@b.md\n")
        self.write("b.md", "B\n")
        code, out = self.run_cli("check", str(self.root))
        self.assertEqual(code, 0)
        self.assertInDump("Scanned 2 markdown file(s)", out)
        self.assertInDump("All references are valid!", out)

    def test_broken_tree(self):
        self.write("docs/a.md", "text\n@nowhere.md\n")
        code, out = self.run_cli("check", str(self.root))
        self.assertEqual(code, 1)
        self.assertInDump("✗ @nowhere.md (line 2, col 1)", out)
        self.assertInDump("Files with broken refs: 1 / 1", out)

    def test_workspace_root_applies_to_bare_references(self):
        self.write("shared.md", "S\n")
        self.write("docs/a.md", "@shared.md\n")
        code, _ = self.run_cli("check", self.path("docs"))
        self.assertEqual(code, 0)

    def test_empty_directory(self):
        code, out = self.run_cli("check", str(self.root))
        self.assertEqual(code, 0)
        self.assertInDump("No markdown files found", out)

    def test_bad_paths(self):
        self.write("notes.txt", "x")
        self.assertEqual(self.run_cli("check", self.path("absent"))[0], 1)
        self.assertEqual(self.run_cli("check", self.path("notes.txt"))[0], 1)


# ---------------------------------------------------------------------- #
#  3. compile                                                            #
# ---------------------------------------------------------------------- #
class CompileCommandTests(CliBaseTest):
    def setUp(self):
        super().setUp()
        self.main = self.write("main.md", """
            # Main

            @part.md
        """)
        self.write("part.md", "# Part\n")

    def test_single_file_writes_built_sibling(self):
        code, out = self.run_cli("compile", str(self.main))
        self.assertEqual(code, 0)
        self.assertInDump("# main.md", out)
        self.assertInDump("Summary: 1 resolved", out)
        built = (self.root / "main.built.md").read_text(encoding="utf-8")
        self.assertIn("## Part", built)

    def test_explicit_output(self):
        target = self.path("out/main.md")
        code, _ = self.run_cli("compile", str(self.main), "-o", target)
        self.assertEqual(code, 0)
        self.assertTrue(os.path.isfile(target))

    def test_output_rejects_multiple_inputs(self):
        other = self.write("other.md", "x\n")
        code, _ = self.run_cli("compile", str(self.main), str(other), "-o", self.path("x.md"))
        self.assertEqual(code, 1)

    def test_failed_reference_exits_one(self):
        broken = self.write("broken.md", "@nothing.md\n")
        code, out = self.run_cli("compile", str(broken))
        self.assertEqual(code, 1)
        self.assertInDump("1 failed", out)

    def test_heading_mode_none(self):
        code, _ = self.run_cli("compile", str(self.main), "--heading-mode", "none")
        self.assertEqual(code, 0)
        built = (self.root / "main.built.md").read_text(encoding="utf-8")
        self.assertIn("\n# Part\n", built)

    def test_invalid_heading_mode_is_a_usage_error(self):
        with mock.patch("sys.stderr", new=io.StringIO()):
            with self.assertRaises(SystemExit) as cm:
                self.run_cli("compile", str(self.main), "--heading-mode", "sideways")
        self.assertEqual(cm.exception.code, 2)

    def test_multiple_files_total_line(self):
        other = self.write("other.md", "@part.md\n")
        code, out = self.run_cli("compile", str(self.main), str(other))
        self.assertEqual(code, 0)
        self.assertInDump("Total: 2 files compiled, 2 references resolved, 0 failed", out)

    def test_folder_with_report(self):
        report = self.path("report.json")
        code, out = self.run_cli("compile", str(self.root), "--optimize-duplicates", "--report", report)
        self.assertEqual(code, 0)
        self.assertInDump("Total: 2 files", out)
        self.assertTrue((self.root / "dist" / "main.md").is_file())
        with open(report, encoding="utf-8") as fh:
            payload = json.load(fh)
        self.assertEqual(payload["documents"], 2)


# ---------------------------------------------------------------------- #
#  4. main() exit codes                                                  #
# ---------------------------------------------------------------------- #
class MainEntryTests(unittest.TestCase):
    def _main(self, side_effect, env=None):
        with mock.patch.object(cli.AtRef, "run", side_effect=side_effect), \
                mock.patch.object(cli.sys, "argv", ["atref", "check"]), \
                mock.patch.dict(os.environ, env or {}, clear=False):
            cli.main()

    def test_exit_status_is_propagated(self):
        with self.assertRaises(SystemExit) as cm:
            self._main(lambda argv: 1)
        self.assertEqual(cm.exception.code, 1)

    def test_keyboard_interrupt(self):
        with self.assertRaises(SystemExit) as cm:
            self._main(KeyboardInterrupt)
        self.assertEqual(cm.exception.code, 130)

    def test_broken_pipe(self):
        with self.assertRaises(SystemExit) as cm:
            self._main(BrokenPipeError)
        self.assertEqual(cm.exception.code, 0)

    def test_unexpected_error(self):
        with self.assertRaises(SystemExit) as cm:
            self._main(RuntimeError("boom"), {"DEBUG": "0"})
        self.assertEqual(cm.exception.code, 1)

    def test_debug_reraises(self):
        with self.assertRaises(RuntimeError):
            self._main(RuntimeError("boom"), {"DEBUG": "1"})


if __name__ == "__main__":
    unittest.main(verbosity=2)
