#
# Copyright 2024 aargo Project Authors. All rights reserved.
# Use of this source code is governed by a MIT-style
# license that can be found at
#
# https://opensource.org/license/MIT
#
# The above copyright notice and this permission
# notice shall be included in all copies or
# substantial portions of the Software.

"""
Reader for vcpkg CONTROL records.

An installed vcpkg package directory looks like:

    packages/zlib_arm64-android/
    ├── CONTROL
    ├── include/
    └── lib/

CONTROL starts with a block of 'Key: Value' lines. A line beginning with a
space continues the previous value. The block ends at the first line without
a ':' (usually the blank line before the feature paragraphs).
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional, Set

from .errors import MissingFieldError
from .identifiers import normalize_version

CONTROL_FILE_NAME = "CONTROL"
ANDROID_ARCH_SUFFIX = "-android"
CONTINUATION_PREFIX = " "
AAR_EXTENSION = ".aar"

REQUIRED_FIELDS = ("Package", "Version", "Architecture", "Abi", "Type")

# "curl[ssl]" and "pthread (!windows)" both name a package
_QUALIFIER_PATTERN = re.compile(r"[\[(].*$")
# "vcpkg-cmake:x64-linux" is a host tool, not a runtime dependency
HOST_QUALIFIER = ":"


@dataclass(frozen=True)
class PackageDescriptor:
    """One architecture slice of a vcpkg package."""
    name: str
    raw_version: str
    normalized_version: str
    dependencies: FrozenSet[str]
    architecture: str
    abi_hash: str
    type: str
    source_directory: Path
    description: Optional[str] = None

    @property
    def output_archive_name(self) -> str:
        return f"{self.name}-{self.normalized_version}{AAR_EXTENSION}"


@dataclass
class ReadResult:
    descriptors: List[PackageDescriptor] = field(default_factory=list)
    excluded: List[PackageDescriptor] = field(default_factory=list)
    types: Set[str] = field(default_factory=set)


def parse_fields(text: str) -> Dict[str, str]:
    """Parse the leading 'Key: Value' block of a CONTROL record."""
    fields = {}
    last_key = None
    for line in text.splitlines():
        if line.startswith(CONTINUATION_PREFIX):
            if last_key is None:
                break
            fields[last_key] += "\n" + line.strip()
            continue
        if ":" not in line:
            break
        key, value = line.split(":", 1)
        last_key = key.strip()
        fields[last_key] = value.strip()
    return fields


def dependency_name(entry: str) -> str:
    """Drop feature and platform qualifiers from a Depends entry."""
    return _QUALIFIER_PATTERN.sub("", entry).strip()


def parse_depends(value: Optional[str]) -> FrozenSet[str]:
    """Runtime dependency names of a Depends value; host-qualified entries are dropped."""
    if not value:
        return frozenset()
    names = (
        dependency_name(entry) for entry in value.split(",")
        if HOST_QUALIFIER not in entry
    )
    return frozenset(name for name in names if name)


def parse_control(text: str, source_path, package_dir=None) -> PackageDescriptor:
    """
    Parse CONTROL text into a PackageDescriptor.

    Args:
        text: Record contents
        source_path: Where the text came from, used in error messages
        package_dir: Directory holding include/ and lib/ (default: the
            parent of source_path)

    Returns:
        PackageDescriptor

    Raises:
        MissingFieldError: a required key is absent
        UnrepresentableVersionError: Version cannot be normalized
    """
    fields = parse_fields(text)
    for required in REQUIRED_FIELDS:
        if required not in fields:
            raise MissingFieldError(required, source_path)

    if package_dir is None:
        package_dir = Path(source_path).parent

    return PackageDescriptor(
        name=fields["Package"],
        raw_version=fields["Version"],
        normalized_version=normalize_version(fields["Version"]),
        dependencies=parse_depends(fields.get("Depends")),
        architecture=fields["Architecture"],
        abi_hash=fields["Abi"],
        type=fields["Type"],
        source_directory=Path(package_dir),
        description=fields.get("Description"),
    )


def format_control(descriptor: PackageDescriptor) -> str:
    """Serialize a descriptor back into CONTROL syntax."""
    lines = [
        f"Package: {descriptor.name}",
        f"Version: {descriptor.raw_version}",
        f"Architecture: {descriptor.architecture}",
        f"Abi: {descriptor.abi_hash}",
        f"Type: {descriptor.type}",
    ]
    if descriptor.dependencies:
        lines.append(f"Depends: {', '.join(sorted(descriptor.dependencies))}")
    if descriptor.description:
        first, *rest = descriptor.description.split("\n")
        lines.append(f"Description: {first}")
        lines.extend(CONTINUATION_PREFIX + line for line in rest)
    return "\n".join(lines) + "\n"


def read_control_file(path) -> PackageDescriptor:
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        return parse_control(f.read(), path, path.parent)


def is_android_architecture(architecture: str) -> bool:
    return architecture.endswith(ANDROID_ARCH_SUFFIX)


def read_packages(packages_dir, control_name: str = CONTROL_FILE_NAME) -> ReadResult:
    """
    Read every package record under packages_dir.

    Subdirectories without a CONTROL file are ignored. Records whose
    architecture is not an Android triplet are returned in `excluded`.

    Args:
        packages_dir: vcpkg 'packages' directory
        control_name: Metadata file name inside each package directory

    Returns:
        ReadResult with descriptors in directory name order
    """
    result = ReadResult()
    for entry in sorted(os.listdir(packages_dir)):
        control_path = Path(packages_dir) / entry / control_name
        if not control_path.is_file():
            continue
        descriptor = read_control_file(control_path)
        result.types.add(descriptor.type)
        if is_android_architecture(descriptor.architecture):
            result.descriptors.append(descriptor)
        else:
            result.excluded.append(descriptor)
    return result
