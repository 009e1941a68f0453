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

import os
import sys
import argparse
import shutil

# setup path
# >>>>>>>>>>>>>>
SCRIPT_PATH = os.path.split(os.path.realpath(__file__))[0]
PROJECT_ROOT_PATH = os.path.dirname(os.path.dirname(SCRIPT_PATH))
sys.path.append(PROJECT_ROOT_PATH)
# <<<<<<<<<<<<<
# import this project modules
from aargo.utils.context.namespace import CliNameSpace
from aargo.utils.context.context import CliContext
from aargo.utils.context.command import CliCommand, command_argv
from aargo.build_scripts.build_utils import format_size, get_dir_size
from aargo.build_scripts.pipeline import default_output_dir, default_staging_dir


class Clean(CliCommand):
    def description(self) -> str:
        return """
        This is a subcommand to remove conversion outputs.

        Cleans the following directories (siblings of PACKAGES_DIR):
        - aar-build/              # Staging trees
        - aar/                    # Built archives

        Examples:
            aargo clean ./vcpkg/packages              # Clean both (with confirmation)
            aargo clean ./vcpkg/packages --dry-run    # Preview what will be cleaned
            aargo clean ./vcpkg/packages -y           # Clean without confirmation
            aargo clean ./vcpkg/packages --staging-only
        """

    def cli(self) -> CliNameSpace:
        parser = argparse.ArgumentParser(
            prog="aargo clean",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            description=self.description(),
        )
        parser.add_argument(
            "packages_dir",
            type=str,
            help="vcpkg packages directory the outputs were built from",
        )
        parser.add_argument(
            "--staging-only",
            action="store_true",
            help="Clean only the staging directory, keep built archives",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show what would be cleaned without actually deleting",
        )
        parser.add_argument(
            "-y", "--yes",
            action="store_true",
            help="Skip confirmation prompts",
        )
        module_name = os.path.splitext(os.path.basename(__file__))[0]
        args, unknown = parser.parse_known_args(command_argv(module_name), namespace=CliNameSpace())
        return args

    def exec(self, context: CliContext, args: CliNameSpace):
        print("Cleaning conversion outputs...\n")
        cleaner = OutputCleaner(dry_run=args.dry_run, skip_confirm=args.yes)
        cleaner.clean_dir(str(default_staging_dir(args.packages_dir)), "aar-build/")
        if not args.staging_only:
            cleaner.clean_dir(str(default_output_dir(args.packages_dir)), "aar/")
        cleaner.print_summary()


class OutputCleaner:
    def __init__(self, dry_run=False, skip_confirm=False):
        self.dry_run = dry_run
        self.skip_confirm = skip_confirm
        self.cleaned_dirs = []
        self.cleaned_size = 0
        self.failed_dirs = []

    def remove_directory(self, dir_path, dir_name=None):
        """Remove a directory and track the result"""
        if not os.path.isdir(dir_path):
            return False

        size = get_dir_size(dir_path)
        display_name = dir_name or os.path.basename(dir_path)

        if self.dry_run:
            print(f"  [DRY RUN] Would remove: {display_name} ({format_size(size)})")
            return True

        try:
            shutil.rmtree(dir_path)
        except OSError as e:
            self.failed_dirs.append((display_name, str(e)))
            print(f"  ❌ Failed to remove {display_name}: {e}")
            return False
        self.cleaned_dirs.append(display_name)
        self.cleaned_size += size
        print(f"  ✅ Removed: {display_name} ({format_size(size)})")
        return True

    def confirm_clean(self, message):
        """Ask user for confirmation"""
        if self.skip_confirm:
            return True

        response = input(f"{message} (y/N): ").strip().lower()
        return response in ['y', 'yes']

    def clean_dir(self, dir_path, dir_name):
        print("\n" + "="*60)
        print(f"  Cleaning {dir_name}")
        print("="*60)

        if not os.path.exists(dir_path):
            print(f"  ℹ️  {dir_name} does not exist")
            return

        if not self.dry_run and not self.confirm_clean(f"  Remove {dir_path}?"):
            print("  ⏭️  Skipped")
            return

        self.remove_directory(dir_path, dir_name)

    def print_summary(self):
        """Print summary of cleaning operation"""
        print("\n" + "="*60)
        print("  Cleaning Summary")
        print("="*60)

        if self.dry_run:
            print("  [DRY RUN MODE - No files were actually deleted]")

        if self.cleaned_dirs:
            print(f"  ✅ Successfully cleaned {len(self.cleaned_dirs)} directories:")
            for dir_name in self.cleaned_dirs:
                print(f"     - {dir_name}")
            print(f"\n  💾 Total space freed: {format_size(self.cleaned_size)}")
        else:
            print("  ℹ️  No directories were cleaned")

        if self.failed_dirs:
            print(f"\n  ❌ Failed to clean {len(self.failed_dirs)} directories:")
            for dir_name, error in self.failed_dirs:
                print(f"     - {dir_name}: {error}")

        print("="*60 + "\n")
