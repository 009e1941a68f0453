#!/usr/bin/env python3
# -- coding: utf-8 --
#
# layout.py
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
Prefab staging layout.

Every architecture slice of a package writes into the same staging directory,
keyed by the output archive name:

    aar-build/zlib-1.2.11.aar/
    └── prefab/
        └── modules/
            └── z/
                ├── module.json
                └── libs/
                    ├── android.arm64-v8a/
                    │   ├── abi.json
                    │   ├── include/
                    │   └── libz.a
                    └── android.x86_64/
                        └── ...

Header-only packages get prefab/modules/<name>/include/ instead of libs/.
"""

import os
from pathlib import Path
from typing import Dict, Iterable, List

from .build_config import BuildConfig
from .build_utils import CopyPolicy, copy_file, copy_tree, write_json_file
from .control import PackageDescriptor
from .errors import UnknownArchitectureError

# vcpkg triplet -> Android ABI
ABI_TABLE = {
    "arm-android": "armeabi-v7a",
    "arm64-android": "arm64-v8a",
    "x86-android": "x86",
    "x64-android": "x86_64",
}

ABIS_32_BIT = ("armeabi-v7a", "x86")

LIBRARY_EXTENSIONS = (".so", ".a")
LIBRARY_PREFIX = "lib"

PREFAB_DIR = "prefab"
MODULES_DIR = "modules"
MODULE_JSON = "module.json"
ABI_JSON = "abi.json"


def abi_for_architecture(architecture: str) -> str:
    try:
        return ABI_TABLE[architecture]
    except KeyError:
        raise UnknownArchitectureError(architecture) from None


def platform_id(abi: str) -> str:
    return f"android.{abi}"


def api_level_for_abi(abi: str, config: BuildConfig) -> int:
    if abi in ABIS_32_BIT:
        return config.api_level_32
    return config.api_level_64


def find_libraries(lib_dir) -> List[Path]:
    """
    List static and shared libraries directly inside lib_dir.

    Returns:
        Library paths sorted by file name; empty if lib_dir does not exist
    """
    lib_dir = Path(lib_dir)
    if not lib_dir.is_dir():
        return []
    return sorted(
        (p for p in lib_dir.iterdir() if p.is_file() and p.suffix in LIBRARY_EXTENSIONS),
        key=lambda p: p.name,
    )


def module_name_for(descriptor: PackageDescriptor, libraries: List[Path]) -> str:
    """
    Name of the prefab module for one slice.

    The last library wins: a package shipping libfoo.a and libbar.a ends up
    as a single module called 'foo' (sorted order), holding both files.
    A library named just 'lib' falls back to the package name.
    """
    if not libraries:
        return descriptor.name
    stem = libraries[-1].stem
    if stem.startswith(LIBRARY_PREFIX):
        stem = stem[len(LIBRARY_PREFIX):]
    return stem or descriptor.name


def staging_root(staging_dir, descriptor: PackageDescriptor) -> Path:
    return Path(staging_dir) / descriptor.output_archive_name


def write_abi_json(abi_dir, abi: str, config: BuildConfig) -> None:
    write_json_file(
        os.path.join(abi_dir, ABI_JSON),
        {
            "abi": abi,
            "api": api_level_for_abi(abi, config),
            "ndk": config.ndk,
            "stl": config.stl,
        },
    )


def write_module_json(module_dir, library_name) -> None:
    write_json_file(
        os.path.join(module_dir, MODULE_JSON),
        {
            "export_libraries": [],
            "library_name": library_name,
        },
    )


def stage_descriptor(descriptor: PackageDescriptor, staging_dir, config: BuildConfig) -> Path:
    """
    Copy one architecture slice into its package's staging directory.

    Files already present are kept, so re-running over the same staging
    tree only adds what is missing.

    Args:
        descriptor: Slice to stage
        staging_dir: Root of all staging directories
        config: Build configuration (API levels, NDK, STL)

    Returns:
        Path: The package's staging root

    Raises:
        UnknownArchitectureError: the triplet is not in ABI_TABLE
    """
    abi = abi_for_architecture(descriptor.architecture)
    root = staging_root(staging_dir, descriptor)
    libraries = find_libraries(descriptor.source_directory / "lib")
    module_name = module_name_for(descriptor, libraries)
    module_dir = root / PREFAB_DIR / MODULES_DIR / module_name
    source_includes = descriptor.source_directory / "include"

    if libraries:
        abi_dir = module_dir / "libs" / platform_id(abi)
        abi_dir.mkdir(parents=True, exist_ok=True)
        for library in libraries:
            copy_file(library, abi_dir / library.name, CopyPolicy.SKIP, config.verbose)
        write_abi_json(abi_dir, abi, config)
        include_dir = abi_dir / "include"
    else:
        include_dir = module_dir / "include"
        module_dir.mkdir(parents=True, exist_ok=True)

    if source_includes.is_dir():
        stats = copy_tree(source_includes, include_dir, CopyPolicy.SKIP, config.verbose)
        if config.verbose:
            print(f"   include: {stats.copied} copied, {stats.skipped} skipped")

    write_module_json(module_dir, module_name)
    return root


def stage_packages(descriptors: Iterable[PackageDescriptor], staging_dir,
                   config: BuildConfig) -> Dict[str, Path]:
    """
    Stage every slice.

    Module names are derived per slice. Slices of one package whose last
    library differs stage into separate module directories of the same
    archive, each with its own module.json.

    Returns:
        Dict mapping output archive name to staging root, in first-seen order
    """
    staged = {}
    for descriptor in descriptors:
        abi = abi_for_architecture(descriptor.architecture)
        print(f"   📦 Staging {descriptor.name} {descriptor.raw_version} [{abi}]")
        root = stage_descriptor(descriptor, staging_dir, config)
        if root.is_dir():
            staged.setdefault(descriptor.output_archive_name, root)
    return staged
