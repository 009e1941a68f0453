#!/usr/bin/env python3
# -- coding: utf-8 --
#
# pipeline.py
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
vcpkg packages -> prefab AARs.

Stages run one after the other, each over every package:
1. read CONTROL records, drop non-Android triplets
2. stage all architecture slices into aar-build/<name>-<version>.aar/
3. write prefab.json / AndroidManifest.xml using the set of produced packages
4. zip every staging root into aar/<name>-<version>.aar

Synthesis must see the complete staging result, so no stage starts before
the previous one has finished.
"""

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Set

from .archive import emit_archives
from .build_config import BuildConfig
from .control import PackageDescriptor, read_packages
from .layout import stage_packages
from .prefab import group_by_archive, synthesize_packages

STAGING_DIR_NAME = "aar-build"
OUTPUT_DIR_NAME = "aar"


@dataclass
class PipelineResult:
    descriptors: List[PackageDescriptor] = field(default_factory=list)
    excluded: List[PackageDescriptor] = field(default_factory=list)
    types: Set[str] = field(default_factory=set)
    produced: Set[str] = field(default_factory=set)
    archives: List[Path] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)

    def print_summary(self):
        print("\n" + "=" * 60)
        print("  Conversion Summary")
        print("=" * 60)
        print(f"  Package types seen: {', '.join(sorted(self.types)) or '-'}")
        if self.excluded:
            print(f"  ⏭️  Excluded {len(self.excluded)} non-Android slices:")
            for descriptor in self.excluded:
                print(f"     - {descriptor.name} [{descriptor.architecture}]")
        print(f"  📦 Produced packages: {', '.join(sorted(self.produced)) or '-'}")
        print(f"  ✅ Emitted {len(self.archives)} archives:")
        for archive in self.archives:
            print(f"     - {archive.name}")
        if self.skipped:
            print(f"  ⏭️  Skipped {len(self.skipped)} packages with nothing staged:")
            for name in self.skipped:
                print(f"     - {name}")
        print("=" * 60 + "\n")


def default_staging_dir(packages_dir) -> Path:
    return Path(packages_dir).resolve().parent / STAGING_DIR_NAME


def default_output_dir(packages_dir) -> Path:
    return Path(packages_dir).resolve().parent / OUTPUT_DIR_NAME


def run_pipeline(packages_dir, config: BuildConfig,
                 staging_dir: Optional[Path] = None,
                 output_dir: Optional[Path] = None) -> PipelineResult:
    """
    Convert every Android package under packages_dir into an AAR.

    Args:
        packages_dir: vcpkg 'packages' directory
        config: Build configuration
        staging_dir: Intermediate tree (default: sibling 'aar-build'); kept
            after the run for inspection
        output_dir: Archive destination (default: sibling 'aar')

    Returns:
        PipelineResult

    Raises:
        AargoError: any fatal conversion error; the run stops immediately
    """
    before_time = time.time()
    staging_dir = Path(staging_dir) if staging_dir else default_staging_dir(packages_dir)
    output_dir = Path(output_dir) if output_dir else default_output_dir(packages_dir)
    staging_dir.mkdir(parents=True, exist_ok=True)
    output_dir.mkdir(parents=True, exist_ok=True)

    print("==================Read packages========================")
    read = read_packages(packages_dir)
    result = PipelineResult(
        descriptors=read.descriptors,
        excluded=read.excluded,
        types=read.types,
    )
    print(f"   🔍 {len(read.descriptors)} Android slices, {len(read.excluded)} excluded")

    print("==================Stage modules========================")
    staged = stage_packages(result.descriptors, staging_dir, config)

    print("==================Write metadata========================")
    result.produced = synthesize_packages(result.descriptors, staged, config)

    print("==================Emit archives========================")
    emitted = emit_archives(group_by_archive(result.descriptors).keys(), staging_dir, output_dir)
    result.archives = emitted.archives
    result.skipped = emitted.skipped

    print(f"use time: {int(time.time() - before_time)} s")
    return result
