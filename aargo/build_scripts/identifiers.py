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
Version and identifier normalization.

Prefab only accepts versions made of one to four dot-separated integers, and
AndroidManifest.xml package names must be valid Java package names. vcpkg
versions and port names satisfy neither, so both get rewritten here.
"""

import re
from typing import Iterable

from .errors import UnrepresentableVersionError

VERSION_PATTERN = re.compile(r"^\d+(\.\d+){0,3}$")

# Java keywords and literals; a manifest package segment may not be one of them
JAVA_RESERVED_WORDS = frozenset([
    "abstract", "assert", "boolean", "break", "byte", "case", "catch",
    "char", "class", "const", "continue", "default", "do", "double", "else",
    "enum", "extends", "false", "final", "finally", "float", "for", "goto",
    "if", "implements", "import", "instanceof", "int", "interface", "long",
    "native", "new", "null", "package", "private", "protected", "public",
    "return", "short", "static", "strictfp", "super", "switch",
    "synchronized", "this", "throw", "throws", "transient", "true", "try",
    "void", "volatile", "while",
])


def is_normalized_version(version: str) -> bool:
    return VERSION_PATTERN.match(version) is not None


def normalize_version(raw_version: str) -> str:
    """
    Turn a vcpkg version into a prefab-compatible one.

    Candidates are tried in order and the first one matching
    VERSION_PATTERN wins:
        1. the raw string ('1.2.3')
        2. hyphens replaced by dots ('1.2-3' -> '1.2.3')
        3. everything but digits and dots removed ('v1.2' -> '1.2',
           '1.2-beta' -> '1.2')

    Args:
        raw_version: Version as read from the CONTROL record

    Returns:
        str: Normalized version

    Raises:
        UnrepresentableVersionError: no candidate matched
    """
    candidates = (
        raw_version,
        raw_version.replace("-", "."),
        re.sub(r"[^0-9.]", "", raw_version),
    )
    for candidate in candidates:
        if is_normalized_version(candidate):
            return candidate
    raise UnrepresentableVersionError(raw_version)


def _escape_segment(segment: str, reserved_words: Iterable[str]) -> str:
    if segment in reserved_words:
        return "_" + segment
    return segment


def sanitize_package_id(namespace: str, name: str,
                        reserved_words: Iterable[str] = JAVA_RESERVED_WORDS) -> str:
    """
    Build the AndroidManifest.xml package attribute for a vcpkg port.

    'boost-filesystem' becomes '<namespace>.boost.filesystem'. Only the first
    hyphen turns into a separator; later ones are dropped, so
    'boost-property-tree' becomes '<namespace>.boost.propertytree'.

    Args:
        namespace: Dotted prefix, e.g. 'com.vcpkg.ndk.support'
        name: vcpkg port name
        reserved_words: Segments that must be escaped with a leading '_'

    Returns:
        str: Dotted package identifier
    """
    if "-" in name:
        left, right = name.split("-", 1)
        package_id = f"{namespace}.{left}.{right.replace('-', '')}"
    else:
        package_id = f"{namespace}.{name}"

    reserved = frozenset(reserved_words)
    return ".".join(_escape_segment(s, reserved) for s in package_id.split("."))
