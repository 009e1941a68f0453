#!/usr/bin/env python3
# -- coding: utf-8 --
#
# prefab.py
# aargo
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
Package-level metadata for staged AARs.

Runs after every slice is staged, because a dependency is only kept when the
package it names was itself produced. Writes, per staging root:
- prefab/prefab.json       package name, version and resolved dependencies
- AndroidManifest.xml      minimal library manifest
"""

import os
import textwrap
from typing import Dict, Iterable, List, Set

from .build_config import BuildConfig
from .build_utils import is_non_empty_dir, write_json_file, write_text_file
from .control import PackageDescriptor
from .identifiers import sanitize_package_id
from .layout import PREFAB_DIR

PREFAB_SCHEMA_VERSION = 1
PREFAB_JSON = "prefab.json"
ANDROID_MANIFEST = "AndroidManifest.xml"


def group_by_archive(descriptors: Iterable[PackageDescriptor]) -> Dict[str, List[PackageDescriptor]]:
    groups = {}
    for descriptor in descriptors:
        groups.setdefault(descriptor.output_archive_name, []).append(descriptor)
    return groups


def produced_names(descriptors: Iterable[PackageDescriptor], staged: Dict[str, os.PathLike]) -> Set[str]:
    """
    Names of packages that reached a non-empty staging directory.

    Args:
        descriptors: All slices that went through staging
        staged: Output archive name -> staging root

    Returns:
        Set of package names
    """
    names = set()
    for descriptor in descriptors:
        root = staged.get(descriptor.output_archive_name)
        if root is not None and is_non_empty_dir(root):
            names.add(descriptor.name)
    return names


def resolve_dependencies(slices: Iterable[PackageDescriptor], produced: Set[str]) -> List[str]:
    """Dependencies of all slices of one archive that were also produced, sorted."""
    wanted = set()
    for descriptor in slices:
        wanted |= descriptor.dependencies
    return sorted(wanted & produced)


def write_prefab_json(staging_root, descriptor: PackageDescriptor, dependencies: List[str]) -> None:
    write_json_file(
        os.path.join(staging_root, PREFAB_DIR, PREFAB_JSON),
        {
            "schema_version": PREFAB_SCHEMA_VERSION,
            "name": descriptor.name,
            "version": descriptor.normalized_version,
            "dependencies": dependencies,
        },
    )


def render_manifest(package_id: str, config: BuildConfig) -> str:
    return textwrap.dedent(
        f"""\
        <?xml version="1.0" encoding="utf-8"?>
        <manifest xmlns:android="http://schemas.android.com/apk/res/android"
            package="{package_id}"
            android:versionCode="{config.version_code}"
            android:versionName="{config.version_name}" >
            <uses-sdk
                android:minSdkVersion="{config.min_sdk}"
                android:targetSdkVersion="{config.target_sdk}" />
        </manifest>
        """
    )


def write_manifest(staging_root, descriptor: PackageDescriptor, config: BuildConfig) -> str:
    package_id = sanitize_package_id(config.namespace, descriptor.name, config.reserved_words)
    write_text_file(os.path.join(staging_root, ANDROID_MANIFEST), render_manifest(package_id, config))
    return package_id


def synthesize_packages(descriptors: List[PackageDescriptor], staged: Dict[str, os.PathLike],
                        config: BuildConfig) -> Set[str]:
    """
    Write prefab.json and AndroidManifest.xml for every produced package.

    Args:
        descriptors: All staged slices
        staged: Output archive name -> staging root
        config: Build configuration

    Returns:
        Set of produced package names
    """
    produced = produced_names(descriptors, staged)
    for archive_name, slices in group_by_archive(descriptors).items():
        root = staged.get(archive_name)
        if root is None or not is_non_empty_dir(root):
            continue
        dependencies = resolve_dependencies(slices, produced)
        descriptor = slices[-1]
        write_prefab_json(root, descriptor, dependencies)
        package_id = write_manifest(root, descriptor, config)
        print(f"   📝 {archive_name}: {package_id} deps={dependencies}")
    return produced
