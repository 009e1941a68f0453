#!/usr/bin/env python3
# -- coding: utf-8 --
#
# archive.py
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
AAR emission.

Each staging root is zipped as-is into <output>/<archive name>. Entries use
fixed timestamps and permissions and are written in sorted depth-first
order, so the same staging tree always produces the same bytes.
"""

import os
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List

from .build_utils import format_size, is_non_empty_dir

# earliest timestamp a ZIP entry can carry
ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)
DIR_MODE = 0o40755
FILE_MODE = 0o100644


@dataclass
class EmitResult:
    archives: List[Path] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)


def _zip_info(arcname: str, mode: int) -> zipfile.ZipInfo:
    info = zipfile.ZipInfo(arcname, date_time=ZIP_EPOCH)
    info.external_attr = mode << 16
    info.create_system = 3
    return info


def iter_tree(root) -> Iterable[tuple]:
    """
    Walk root depth-first in sorted order.

    Yields:
        (archive name, absolute path or None for directories)
    """
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        rel_dir = os.path.relpath(dirpath, root)
        if rel_dir != ".":
            yield Path(rel_dir).as_posix() + "/", None
        for filename in sorted(filenames):
            path = os.path.join(dirpath, filename)
            yield Path(os.path.relpath(path, root)).as_posix(), path


def emit_archive(staging_root, output_path) -> Path:
    """
    Zip one staging root into an AAR, replacing any previous archive.

    Args:
        staging_root: Directory holding prefab/ and AndroidManifest.xml
        output_path: Archive path to (re)create

    Returns:
        Path: output_path
    """
    output_path = Path(output_path)
    if output_path.exists():
        output_path.unlink()
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with zipfile.ZipFile(output_path, "w", zipfile.ZIP_DEFLATED) as zipf:
        for arcname, path in iter_tree(staging_root):
            if path is None:
                info = _zip_info(arcname, DIR_MODE)
                info.external_attr |= 0x10
                zipf.writestr(info, b"")
            else:
                info = _zip_info(arcname, FILE_MODE)
                info.compress_type = zipfile.ZIP_DEFLATED
                with open(path, "rb") as f:
                    zipf.writestr(info, f.read())
    return output_path


def emit_archives(archive_names: Iterable[str], staging_dir, output_dir) -> EmitResult:
    """
    Emit one AAR per staged package.

    Names whose staging directory is missing or empty are reported once as
    skipped.

    Args:
        archive_names: Output archive names (also the staging directory names)
        staging_dir: Root of all staging directories
        output_dir: Directory receiving the archives

    Returns:
        EmitResult
    """
    result = EmitResult()
    for archive_name in dict.fromkeys(archive_names):
        root = Path(staging_dir) / archive_name
        if not is_non_empty_dir(root):
            print(f"   ⏭️  Skipped {archive_name} (nothing staged)")
            result.skipped.append(archive_name)
            continue
        output_path = Path(output_dir) / archive_name
        emit_archive(root, output_path)
        print(f"   ✅ {output_path} ({format_size(output_path.stat().st_size)})")
        result.archives.append(output_path)
    return result


def list_archive(archive_path) -> List[str]:
    with zipfile.ZipFile(archive_path, "r") as zf:
        return zf.namelist()


def print_archive_tree(archive_path, indent="    "):
    """
    Print the tree structure of an AAR.

    Example output:
        AAR contents:
        ├── AndroidManifest.xml (0.3 KB)
        └── prefab/
            ├── modules/
            │   └── z/
            │       ├── libs/
            │       │   └── android.arm64-v8a/
            │       │       ├── abi.json (0.1 KB)
            │       │       └── libz.a (0.12 MB)
            │       └── module.json (0.0 KB)
            └── prefab.json (0.1 KB)

    Raises:
        zipfile.BadZipFile: archive_path is not a ZIP file
    """
    with zipfile.ZipFile(archive_path, "r") as zf:
        tree = {}
        for info in zf.infolist():
            parts = info.filename.split("/")
            current = tree
            for i, part in enumerate(parts):
                if not part:
                    continue
                if part not in current:
                    is_file = (i == len(parts) - 1) and not info.filename.endswith("/")
                    current[part] = {"__size__": info.file_size} if is_file else {}
                current = current[part]

    print(f"{indent}AAR contents:")
    _print_tree_level(tree, indent, "")


def _print_tree_level(tree, base_indent, prefix):
    items = sorted(tree.items())
    for i, (name, subtree) in enumerate(items):
        is_last = (i == len(items) - 1)
        connector = "└── " if is_last else "├── "

        if "__size__" in subtree:
            size_mb = subtree["__size__"] / (1024 * 1024)
            if size_mb >= 0.01:
                size_str = f"({size_mb:.2f} MB)"
            else:
                size_str = f"({subtree['__size__'] / 1024:.1f} KB)"
            print(f"{base_indent}{prefix}{connector}{name} {size_str}")
        else:
            print(f"{base_indent}{prefix}{connector}{name}/")
            new_prefix = prefix + ("    " if is_last else "│   ")
            _print_tree_level(subtree, base_indent, new_prefix)
