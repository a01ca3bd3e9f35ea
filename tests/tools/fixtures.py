#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
fixtures – Throw-away document trees for the atref test-suite.

Each test gets its own temporary directory; nothing is shared between
tests and nothing is written outside the temporary root.
"""
from __future__ import annotations

import os
import tempfile
import textwrap
import unittest
from pathlib import Path
from typing import Dict


# ────────────────────────── utilities ──────────────────────────
def _write(path: Path, body: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def doc(body: str) -> str:
    """Dedent an inline document body the same way `_write` does."""
    return textwrap.dedent(body).lstrip()


def memory_tree(files: Dict[str, str]) -> Dict[str, str]:
    """Dedent every body of an in-memory tree."""
    return {path: doc(body) for path, body in files.items()}


# ───────────────────── base test case ─────────────────────
class TempTreeTestCase(unittest.TestCase):
    """Test case owning a fresh temporary directory per test."""

    def setUp(self) -> None:
        super().setUp()
        self._tmp = tempfile.TemporaryDirectory(prefix="atref-test-")
        self.root = Path(os.path.realpath(self._tmp.name))

    def tearDown(self) -> None:
        self._tmp.cleanup()
        super().tearDown()

    def write(self, rel: str, body: str = "") -> Path:
        return _write(self.root / rel, body)

    def write_bytes(self, rel: str, data: bytes) -> Path:
        target = self.root / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        return target

    def mkdir(self, rel: str) -> Path:
        target = self.root / rel
        target.mkdir(parents=True, exist_ok=True)
        return target

    def path(self, rel: str) -> str:
        return str(self.root / rel)
