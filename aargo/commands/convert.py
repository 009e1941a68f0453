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
from aargo.build_scripts.build_config import load_build_config
from aargo.build_scripts.pipeline import run_pipeline


class Convert(CliCommand):
    def description(self) -> str:
        return """
        Convert a vcpkg 'packages' directory into prefab AARs.

        Every package directory holding a CONTROL file with an Android triplet
        (arm-android, arm64-android, x86-android, x64-android) is staged, and
        all triplets of one package/version are merged into a single AAR.

        Output (siblings of PACKAGES_DIR unless overridden):
            aar-build/<name>-<version>.aar/   Staging tree, kept for inspection
            aar/<name>-<version>.aar          Final archives

        Build-wide values are read from AARGO.toml when present; the options
        below override them.

        Examples:
            aargo convert ./vcpkg/packages
            aargo convert ./vcpkg/packages --namespace com.example.native
            aargo convert ./vcpkg/packages --api32 19 --api64 21 --stl c++_static
        """

    def cli(self) -> CliNameSpace:
        parser = argparse.ArgumentParser(
            prog="aargo convert",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            description=self.description(),
        )
        parser.add_argument(
            "packages_dir",
            type=str,
            help="vcpkg packages directory",
        )
        parser.add_argument(
            "--staging",
            type=str,
            help="Staging directory (default: <packages_dir>/../aar-build)",
        )
        parser.add_argument(
            "--output",
            type=str,
            help="Output directory (default: <packages_dir>/../aar)",
        )
        parser.add_argument(
            "--config",
            type=str,
            help="Path to AARGO.toml (default: ./AARGO.toml if present)",
        )
        parser.add_argument(
            "--namespace",
            type=str,
            help="Package namespace used in AndroidManifest.xml",
        )
        parser.add_argument(
            "--api32",
            type=int,
            help="API level recorded for 32-bit ABIs",
        )
        parser.add_argument(
            "--api64",
            type=int,
            help="API level recorded for 64-bit ABIs",
        )
        parser.add_argument(
            "--ndk",
            type=int,
            help="NDK major version recorded in abi.json",
        )
        parser.add_argument(
            "--stl",
            type=str,
            help="STL recorded in abi.json (e.g. c++_shared)",
        )
        parser.add_argument(
            "-v", "--verbose",
            action="store_true",
            help="Print every copied file",
        )
        module_name = os.path.splitext(os.path.basename(__file__))[0]
        args, unknown = parser.parse_known_args(command_argv(module_name), namespace=CliNameSpace())
        return args

    def exec(self, context: CliContext, args: CliNameSpace):
        if not os.path.isdir(args.packages_dir):
            print(f"ERROR: packages directory not found: {args.packages_dir}")
            sys.exit(1)

        context.config_file = args.config
        config = load_build_config(args.config).with_overrides(
            namespace=args.namespace,
            api_level_32=args.api32,
            api_level_64=args.api64,
            ndk=args.ndk,
            stl=args.stl,
            verbose=args.verbose or None,
        )
        print(config.get_config_summary())
        print()

        result = run_pipeline(args.packages_dir, config, args.staging, args.output)
        result.print_summary()
