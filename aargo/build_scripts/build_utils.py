#!/usr/bin/env python3
# -- coding: utf-8 --
#
# build_utils.py
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
File utilities shared by the staging, synthesis and archive steps.

- Policy-driven file and tree copying (overwrite, skip, fail)
- Text/JSON writers with stable byte output
- Human readable size formatting for reports
"""

import json
import os
import shutil
from dataclasses import dataclass
from enum import Enum


class CopyPolicy(Enum):
    """What to do when the destination file already exists."""
    OVERWRITE = "overwrite"
    SKIP = "skip"
    FAIL = "fail"


@dataclass
class CopyStats:
    copied: int = 0
    skipped: int = 0

    def add(self, other: "CopyStats") -> None:
        self.copied += other.copied
        self.skipped += other.skipped


def copy_file(src, dst, policy=CopyPolicy.SKIP, verbose=False):
    """
    Copy a single file, creating destination directories as needed.

    Args:
        src: Source file path
        dst: Destination file path
        policy: CopyPolicy applied when dst already exists
        verbose: Print one line per file

    Returns:
        bool: True if the file was written, False if it was skipped

    Raises:
        FileExistsError: dst exists and policy is CopyPolicy.FAIL
    """
    if os.path.exists(dst):
        if policy == CopyPolicy.SKIP:
            if verbose:
                print(f"  = {dst} (exists, skipped)")
            return False
        if policy == CopyPolicy.FAIL:
            raise FileExistsError(f"Destination already exists: {dst}")

    parent = os.path.dirname(dst)
    if parent:
        os.makedirs(parent, exist_ok=True)
    shutil.copy2(src, dst)
    if verbose:
        print(f"  + {dst}")
    return True


def copy_tree(src, dst, policy=CopyPolicy.SKIP, verbose=False):
    """
    Recursively copy a directory tree file by file.

    Unlike shutil.copytree this merges into an existing destination, which is
    how several architecture slices share one module directory.

    Args:
        src: Source directory
        dst: Destination directory (created if missing)
        policy: CopyPolicy applied to every file
        verbose: Print one line per file

    Returns:
        CopyStats: Number of files copied and skipped
    """
    stats = CopyStats()
    os.makedirs(dst, exist_ok=True)
    for root, dirs, files in os.walk(src):
        dirs.sort()
        rel_root = os.path.relpath(root, src)
        dst_root = dst if rel_root == "." else os.path.join(dst, rel_root)
        os.makedirs(dst_root, exist_ok=True)
        for filename in sorted(files):
            written = copy_file(
                os.path.join(root, filename),
                os.path.join(dst_root, filename),
                policy,
                verbose,
            )
            if written:
                stats.copied += 1
            else:
                stats.skipped += 1
    return stats


def write_text_file(path, content: str) -> None:
    """Write UTF-8 text with '\\n' line endings on every host."""
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="\n") as f:
        f.write(content)


def write_json_file(path, data) -> None:
    write_text_file(path, json.dumps(data, indent=2) + "\n")


def is_non_empty_dir(path) -> bool:
    return os.path.isdir(path) and len(os.listdir(path)) > 0


def format_size(size_bytes):
    """Format bytes to human-readable size"""
    for unit in ['B', 'KB', 'MB', 'GB']:
        if size_bytes < 1024.0:
            return f"{size_bytes:.2f} {unit}"
        size_bytes /= 1024.0
    return f"{size_bytes:.2f} TB"


def get_dir_size(path):
    """Get total size of directory in bytes"""
    total_size = 0
    for dirpath, dirnames, filenames in os.walk(path):
        for filename in filenames:
            total_size += os.path.getsize(os.path.join(dirpath, filename))
    return total_size
