#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Path resolution tests: bare, relative and rooted references, extension
probing, directories and workspace roots.
"""
import unittest

from atref.core.options import ResolveOptions
from atref.io.filesystem import MemoryFileSystem
from atref.resolution.path_resolver import (
    PathResolver,
    base_for_reference,
    find_workspace_root,
    path_exists,
    resolve_path,
)
from tools.fixtures import TempTreeTestCase


class _StatFailingFS(MemoryFileSystem):
    def is_dir(self, path: str) -> bool:
        raise PermissionError(f"Permission denied: {path}")


class LocalResolutionTests(TempTreeTestCase):
    def setUp(self):
        super().setUp()
        self.write("file.ts", "export {}\n")
        self.write("nested/deep.md", "# Deep\n")
        self.write("indexed/index.ts", "export {}\n")
        self.write("script.js", "\n")
        self.base = str(self.root)

    def _resolve(self, path, **kw):
        return resolve_path(path, ResolveOptions(base_path=self.base, **kw))

    def test_bare_path(self):
        res = self._resolve("file.ts")
        self.assertTrue(res.exists)
        self.assertFalse(res.is_directory)
        self.assertEqual(res.path, self.path("file.ts"))
        self.assertIsNone(res.error)

    def test_dot_slash_equals_bare(self):
        self.assertEqual(self._resolve("./file.ts"), self._resolve("file.ts"))

    def test_parent_relative(self):
        res = resolve_path("../file.ts", ResolveOptions(base_path=self.path("nested")))
        self.assertTrue(res.exists)
        self.assertEqual(res.path, self.path("file.ts"))

    def test_nested_path(self):
        self.assertTrue(self._resolve("nested/deep.md").exists)

    def test_leading_slash_is_base_relative(self):
        res = self._resolve("/nested/deep.md")
        self.assertTrue(res.exists)
        self.assertEqual(res.path, self.path("nested/deep.md"))

    def test_existing_absolute_path_is_used_as_is(self):
        other = self.path("nested/deep.md")
        res = resolve_path(other, ResolveOptions(base_path=self.path("indexed")))
        self.assertTrue(res.exists)
        self.assertEqual(res.path, other)

    def test_absolute_path_probes_extensions(self):
        res = resolve_path(self.path("script"), ResolveOptions(try_extensions=[".js"]))
        self.assertEqual(res.path, self.path("script.js"))

    def test_missing_file_reports_candidate(self):
        res = self._resolve("missing.md")
        self.assertFalse(res.exists)
        self.assertEqual(res.path, self.path("missing.md"))
        self.assertEqual(res.error, f"File not found: {self.path('missing.md')}")

    def test_directory_is_flagged(self):
        res = self._resolve("nested")
        self.assertTrue(res.exists)
        self.assertTrue(res.is_directory)
        self.assertFalse(res.is_file)

    def test_extension_probing(self):
        res = self._resolve("script", try_extensions=[".ts", ".js"])
        self.assertTrue(res.exists)
        self.assertEqual(res.path, self.path("script.js"))

    def test_extension_probe_prefers_first_hit(self):
        self.write("both.ts", "")
        self.write("both.js", "")
        res = self._resolve("both", try_extensions=[".ts", ".js"])
        self.assertEqual(res.path, self.path("both.ts"))

    def test_index_probing_needs_missing_literal(self):
        # The literal directory exists, so no index probing happens.
        self.assertTrue(self._resolve("indexed", try_extensions=[".ts"]).is_directory)
        res = self._resolve("indexed/index", try_extensions=[".ts"])
        self.assertEqual(res.path, self.path("indexed/index.ts"))

    def test_path_exists_shortcut(self):
        self.assertTrue(path_exists("file.ts", self.base))
        self.assertFalse(path_exists("nope.ts", self.base))


class MemoryResolutionTests(unittest.TestCase):
    def setUp(self):
        self.fs = MemoryFileSystem({
            "/ws/docs/a.md": "A",
            "/ws/lib/index.md": "L",
        })
        self.opts = ResolveOptions(base_path="/ws", filesystem=self.fs, try_extensions=[".md"])

    def test_resolves_against_memory_tree(self):
        res = resolve_path("docs/a", self.opts)
        self.assertEqual(res.path, "/ws/docs/a.md")

    def test_index_file_under_missing_literal(self):
        fs = MemoryFileSystem({"/ws/mod/index.md": "M"})
        resolver = PathResolver(filesystem=fs, try_extensions=[".md"])
        # "mod2" does not exist at all; "mod" exists as a directory.
        self.assertFalse(resolver.resolve("mod2", "/ws").exists)
        self.assertTrue(resolver.resolve("mod", "/ws").is_directory)

    def test_stat_failure_is_reported(self):
        fs = _StatFailingFS({"/ws/a.md": "A"})
        res = PathResolver(filesystem=fs).resolve("a.md", "/ws")
        self.assertFalse(res.exists)
        self.assertEqual(res.error, "Cannot stat file: /ws/a.md")

    def test_rooted_path_prefers_existing_target(self):
        fs = MemoryFileSystem({"/shared/c.md": "C", "/ws/shared/c.md": "W"})
        resolver = PathResolver(filesystem=fs)
        self.assertEqual(resolver.resolve("/shared/c.md", "/ws").path, "/shared/c.md")
        self.assertEqual(resolver.resolve("/docs/a.md", "/ws").path, "/ws/docs/a.md")

    def test_missing_rooted_path_reports_base_candidate(self):
        res = PathResolver(filesystem=self.fs).resolve("/nope.md", "/ws")
        self.assertFalse(res.exists)
        self.assertEqual(res.error, "File not found: /ws/nope.md")


class BaseSelectionTests(unittest.TestCase):
    def test_relative_prefix_follows_document(self):
        self.assertEqual(base_for_reference("./x.md", "/ws/docs/a.md", "/ws"), "/ws/docs")
        self.assertEqual(base_for_reference("../x.md", "/ws/docs/a.md", "/ws"), "/ws/docs")

    def test_bare_path_prefers_base(self):
        self.assertEqual(base_for_reference("x.md", "/ws/docs/a.md", "/ws"), "/ws")
        self.assertEqual(base_for_reference("x.md", "/ws/docs/a.md", None), "/ws/docs")

    def test_without_source(self):
        self.assertEqual(base_for_reference("./x.md", None, "/ws"), "/ws")
        self.assertIsNone(base_for_reference("x.md", None, None))


class WorkspaceRootTests(TempTreeTestCase):
    def test_nearest_git_ancestor(self):
        self.mkdir(".git")
        nested = self.mkdir("a/b/c")
        self.assertEqual(find_workspace_root(str(nested)), str(self.root))

    def test_explicit_root_wins(self):
        self.mkdir(".git")
        nested = self.mkdir("a")
        self.assertEqual(find_workspace_root(str(self.root), str(nested)), str(nested))

    def test_falls_back_to_start(self):
        nested = self.mkdir("solo")
        found = find_workspace_root(str(nested))
        # Either an enclosing checkout or the start directory itself.
        self.assertTrue(str(nested).startswith(found))


if __name__ == "__main__":
    unittest.main(verbosity=2)
