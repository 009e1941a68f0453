#!/usr/bin/env python3
"""
End-to-end tests for the conversion pipeline.

Run with: python3 -m pytest aargo/build_scripts/test_pipeline.py
"""

import json
import os
import tempfile
import unittest
import zipfile
from pathlib import Path

from aargo.build_scripts.build_config import BuildConfig
from aargo.build_scripts.errors import MissingFieldError
from aargo.build_scripts.pipeline import run_pipeline
from aargo.build_scripts.test_layout import make_package


class TestRunPipeline(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.root = Path(self.tmp.name)
        self.packages = self.root / "packages"
        make_package(self.tmp.name, "foo", version="1.2-beta", libs=["libfoo.so"],
                     headers=["foo/foo.h"])
        make_package(self.tmp.name, "bar", version="2.0", headers=["bar.h"],
                     depends="foo, baz, vcpkg-cmake:x64-linux")
        make_package(self.tmp.name, "baz", arch="x64-linux", libs=["libbaz.a"])

    def tearDown(self):
        self.tmp.cleanup()

    def _prefab_json(self, archive):
        with zipfile.ZipFile(archive) as zf:
            return json.loads(zf.read("prefab/prefab.json"))

    def test_foo_and_bar(self):
        result = run_pipeline(self.packages, BuildConfig())

        output = self.root / "aar"
        self.assertEqual(sorted(p.name for p in result.archives), ["bar-2.0.aar", "foo-1.2.aar"])
        self.assertEqual(sorted(os.listdir(output)), ["bar-2.0.aar", "foo-1.2.aar"])
        self.assertEqual(result.produced, {"foo", "bar"})
        self.assertEqual([d.name for d in result.excluded], ["baz"])
        self.assertEqual(result.types, {"Port"})
        self.assertEqual(result.skipped, [])

        bar = self._prefab_json(output / "bar-2.0.aar")
        self.assertEqual(bar["dependencies"], ["foo"])
        foo = self._prefab_json(output / "foo-1.2.aar")
        self.assertEqual(foo["version"], "1.2")
        self.assertEqual(foo["dependencies"], [])

        with zipfile.ZipFile(output / "foo-1.2.aar") as zf:
            names = zf.namelist()
        self.assertIn("AndroidManifest.xml", names)
        self.assertIn("prefab/modules/foo/libs/android.arm64-v8a/libfoo.so", names)
        self.assertIn("prefab/modules/foo/libs/android.arm64-v8a/abi.json", names)
        self.assertIn("prefab/modules/foo/libs/android.arm64-v8a/include/foo/foo.h", names)

        # staging is kept for inspection
        self.assertTrue((self.root / "aar-build" / "foo-1.2.aar").is_dir())
        self.assertFalse((self.root / "aar-build" / "baz-1.0.aar").exists())

    def test_host_tool_dependency_not_exported(self):
        make_package(self.tmp.name, "protobuf", libs=["libprotobuf.a"])
        make_package(self.tmp.name, "grpc", libs=["libgrpc.a"], depends="protobuf:x64-linux")

        run_pipeline(self.packages, BuildConfig())

        output = self.root / "aar"
        self.assertTrue((output / "protobuf-1.0.aar").is_file())
        self.assertEqual(self._prefab_json(output / "grpc-1.0.aar")["dependencies"], [])

    def test_rerun_is_byte_identical(self):
        first = run_pipeline(self.packages, BuildConfig())
        before = {p.name: p.read_bytes() for p in first.archives}
        second = run_pipeline(self.packages, BuildConfig())
        after = {p.name: p.read_bytes() for p in second.archives}
        self.assertEqual(before, after)

    def test_custom_directories(self):
        staging = self.root / "custom-staging"
        output = self.root / "custom-out"
        run_pipeline(self.packages, BuildConfig(), staging, output)
        self.assertTrue((staging / "bar-2.0.aar" / "prefab" / "prefab.json").is_file())
        self.assertTrue((output / "bar-2.0.aar").is_file())

    def test_missing_field_aborts_run(self):
        broken = self.packages / "broken_arm64-android"
        broken.mkdir()
        (broken / "CONTROL").write_text("Package: broken\nVersion: 1.0\n")
        with self.assertRaises(MissingFieldError):
            run_pipeline(self.packages, BuildConfig())
        self.assertEqual(os.listdir(self.root / "aar"), [])


if __name__ == "__main__":
    unittest.main()
