#!/usr/bin/env python3
"""
Tests for policy-driven copying and file writers.

Run with: python3 -m pytest aargo/build_scripts/test_build_utils.py
"""

import os
import tempfile
import unittest

from aargo.build_scripts.build_utils import (
    CopyPolicy,
    copy_file,
    copy_tree,
    format_size,
    is_non_empty_dir,
    write_json_file,
)


def _write(path, content):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w") as f:
        f.write(content)


def _read(path):
    with open(path) as f:
        return f.read()


class TestCopyFile(unittest.TestCase):
    """Test the three copy policies."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.src = os.path.join(self.tmp.name, "src", "a.h")
        self.dst = os.path.join(self.tmp.name, "dst", "a.h")
        _write(self.src, "new")

    def tearDown(self):
        self.tmp.cleanup()

    def test_creates_parent_directories(self):
        self.assertTrue(copy_file(self.src, self.dst))
        self.assertEqual(_read(self.dst), "new")

    def test_skip_keeps_existing(self):
        _write(self.dst, "old")
        self.assertFalse(copy_file(self.src, self.dst, CopyPolicy.SKIP))
        self.assertEqual(_read(self.dst), "old")

    def test_overwrite_replaces_existing(self):
        _write(self.dst, "old")
        self.assertTrue(copy_file(self.src, self.dst, CopyPolicy.OVERWRITE))
        self.assertEqual(_read(self.dst), "new")

    def test_fail_raises(self):
        _write(self.dst, "old")
        with self.assertRaises(FileExistsError):
            copy_file(self.src, self.dst, CopyPolicy.FAIL)


class TestCopyTree(unittest.TestCase):
    """Test merging directory trees."""

    def test_merges_into_existing_tree(self):
        with tempfile.TemporaryDirectory() as root:
            src = os.path.join(root, "include")
            dst = os.path.join(root, "out")
            _write(os.path.join(src, "foo", "a.h"), "a")
            _write(os.path.join(src, "foo", "b.h"), "b")
            _write(os.path.join(src, "top.h"), "top")
            _write(os.path.join(dst, "foo", "a.h"), "kept")
            _write(os.path.join(dst, "other.h"), "other")

            stats = copy_tree(src, dst, CopyPolicy.SKIP)

            self.assertEqual(stats.copied, 2)
            self.assertEqual(stats.skipped, 1)
            self.assertEqual(_read(os.path.join(dst, "foo", "a.h")), "kept")
            self.assertEqual(_read(os.path.join(dst, "foo", "b.h")), "b")
            self.assertEqual(_read(os.path.join(dst, "top.h")), "top")
            self.assertTrue(os.path.isfile(os.path.join(dst, "other.h")))

    def test_empty_source_creates_destination(self):
        with tempfile.TemporaryDirectory() as root:
            src = os.path.join(root, "empty")
            os.makedirs(src)
            dst = os.path.join(root, "out")
            stats = copy_tree(src, dst)
            self.assertEqual((stats.copied, stats.skipped), (0, 0))
            self.assertTrue(os.path.isdir(dst))
            self.assertFalse(is_non_empty_dir(dst))


class TestWriters(unittest.TestCase):

    def test_json_has_trailing_newline(self):
        with tempfile.TemporaryDirectory() as root:
            path = os.path.join(root, "x", "abi.json")
            write_json_file(path, {"abi": "x86", "api": 16})
            with open(path, "rb") as f:
                data = f.read()
            self.assertEqual(data, b'{\n  "abi": "x86",\n  "api": 16\n}\n')

    def test_format_size(self):
        self.assertEqual(format_size(100), "100.00 B")
        self.assertEqual(format_size(1024 * 1024), "1.00 MB")


if __name__ == "__main__":
    unittest.main()
