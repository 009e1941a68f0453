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
import zipfile

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
from aargo.build_scripts.archive import print_archive_tree


class Tree(CliCommand):
    def description(self) -> str:
        return """
        Print the entry tree of one or more built AARs.

        Examples:
            aargo tree ./vcpkg/aar/zlib-1.2.11.aar
            aargo tree ./vcpkg/aar/*.aar
        """

    def cli(self) -> CliNameSpace:
        parser = argparse.ArgumentParser(
            prog="aargo tree",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            description=self.description(),
        )
        parser.add_argument(
            "archives",
            nargs="+",
            type=str,
            help="AAR files to show",
        )
        module_name = os.path.splitext(os.path.basename(__file__))[0]
        args, unknown = parser.parse_known_args(command_argv(module_name), namespace=CliNameSpace())
        return args

    def exec(self, context: CliContext, args: CliNameSpace):
        failed = False
        for archive in args.archives:
            print(f"\n{archive}")
            if not os.path.isfile(archive):
                print("    [AAR file not found]")
                failed = True
                continue
            try:
                print_archive_tree(archive)
            except zipfile.BadZipFile:
                print("    [Invalid AAR file]")
                failed = True
        if failed:
            sys.exit(1)
