#!/usr/bin/env python3
"""
Tests for CONTROL record parsing.

Run with: python3 -m pytest aargo/build_scripts/test_control.py
"""

import os
import tempfile
import textwrap
import unittest
from pathlib import Path

from aargo.build_scripts.control import (
    format_control,
    parse_control,
    parse_depends,
    parse_fields,
    read_control_file,
    read_packages,
)
from aargo.build_scripts.errors import MissingFieldError, UnrepresentableVersionError

ZLIB_CONTROL = textwrap.dedent(
    """\
    Package: zlib
    Version: 1.2.11-10
    Depends: vcpkg-cmake:x64-linux, openssl[core], pthread (!windows)
    Architecture: arm64-android
    Multi-Arch: same
    Abi: 4fd34a2ee2b6c4c2b4a3d1ea8b1d1a86
    Description: A compression library
     with a second description line
    Type: Port

    Feature: tools
    Package: not-zlib
    """
)


class TestParseFields(unittest.TestCase):
    """Test the key/value block reader."""

    def test_continuation_appends_with_newline(self):
        fields = parse_fields(ZLIB_CONTROL)
        self.assertEqual(
            fields["Description"],
            "A compression library\nwith a second description line",
        )

    def test_stops_at_first_line_without_separator(self):
        fields = parse_fields(ZLIB_CONTROL)
        self.assertEqual(fields["Package"], "zlib")
        self.assertNotIn("Feature", fields)

    def test_leading_continuation_ends_block(self):
        self.assertEqual(parse_fields(" orphan\nPackage: x\n"), {})

    def test_value_keeps_later_colons(self):
        fields = parse_fields("Abi: a:b:c\n")
        self.assertEqual(fields["Abi"], "a:b:c")


class TestParseControl(unittest.TestCase):
    """Test descriptor construction."""

    def test_descriptor_fields(self):
        descriptor = parse_control(ZLIB_CONTROL, "/pkgs/zlib/CONTROL")
        self.assertEqual(descriptor.name, "zlib")
        self.assertEqual(descriptor.raw_version, "1.2.11-10")
        self.assertEqual(descriptor.normalized_version, "1.2.11.10")
        self.assertEqual(descriptor.architecture, "arm64-android")
        self.assertEqual(descriptor.abi_hash, "4fd34a2ee2b6c4c2b4a3d1ea8b1d1a86")
        self.assertEqual(descriptor.type, "Port")
        self.assertEqual(descriptor.source_directory, Path("/pkgs/zlib"))
        self.assertEqual(descriptor.output_archive_name, "zlib-1.2.11.10.aar")

    def test_dependency_qualifiers_dropped(self):
        descriptor = parse_control(ZLIB_CONTROL, "/pkgs/zlib/CONTROL")
        self.assertEqual(descriptor.dependencies, frozenset({"openssl", "pthread"}))

    def test_host_qualified_dependency_dropped(self):
        self.assertEqual(
            parse_depends("protobuf:x64-linux, protobuf[lite], zlib"),
            frozenset({"protobuf", "zlib"}),
        )
        self.assertEqual(parse_depends("vcpkg-cmake:x64-linux"), frozenset())

    def test_no_depends(self):
        text = "Package: a\nVersion: 1\nArchitecture: x86-android\nAbi: h\nType: Port\n"
        self.assertEqual(parse_control(text, "CONTROL").dependencies, frozenset())

    def test_missing_required_field(self):
        for field in ("Package", "Version", "Architecture", "Abi", "Type"):
            lines = [
                line for line in ZLIB_CONTROL.splitlines()
                if not line.startswith(field + ":")
            ]
            with self.assertRaises(MissingFieldError) as context:
                parse_control("\n".join(lines), "/pkgs/zlib/CONTROL")
            self.assertEqual(context.exception.field, field)
            self.assertIn("/pkgs/zlib/CONTROL", str(context.exception))

    def test_unrepresentable_version(self):
        text = "Package: a\nVersion: latest\nArchitecture: x86-android\nAbi: h\nType: Port\n"
        with self.assertRaises(UnrepresentableVersionError):
            parse_control(text, "CONTROL")

    def test_format_round_trip(self):
        descriptor = parse_control(ZLIB_CONTROL, "/pkgs/zlib/CONTROL")
        reparsed = parse_control(format_control(descriptor), "/pkgs/zlib/CONTROL")
        self.assertEqual(reparsed, descriptor)


class TestReadPackages(unittest.TestCase):
    """Test directory scanning and triplet filtering."""

    def _write(self, root, dirname, name, arch, type_="Port"):
        package_dir = os.path.join(root, dirname)
        os.makedirs(package_dir)
        with open(os.path.join(package_dir, "CONTROL"), "w") as f:
            f.write(
                f"Package: {name}\nVersion: 1.0\nArchitecture: {arch}\n"
                f"Abi: hash\nType: {type_}\n"
            )
        return package_dir

    def test_filters_non_android(self):
        with tempfile.TemporaryDirectory() as root:
            self._write(root, "b_arm64-android", "b", "arm64-android")
            self._write(root, "a_x64-android", "a", "x64-android")
            self._write(root, "c_x64-linux", "c", "x64-linux", type_="Alias")
            os.makedirs(os.path.join(root, "no-control"))
            with open(os.path.join(root, "stray.txt"), "w") as f:
                f.write("ignored")

            result = read_packages(root)

            self.assertEqual([d.name for d in result.descriptors], ["a", "b"])
            self.assertEqual([d.name for d in result.excluded], ["c"])
            self.assertEqual(result.types, {"Port", "Alias"})

    def test_read_control_file_uses_parent_directory(self):
        with tempfile.TemporaryDirectory() as root:
            package_dir = self._write(root, "a_arm-android", "a", "arm-android")
            descriptor = read_control_file(os.path.join(package_dir, "CONTROL"))
            self.assertEqual(descriptor.source_directory, Path(package_dir))


if __name__ == "__main__":
    unittest.main()
