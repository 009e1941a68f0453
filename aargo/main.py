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
import importlib
import argparse

# setup path
# >>>>>>>>>>>>>>
SCRIPT_PATH = os.path.split(os.path.realpath(__file__))[0]
PROJECT_ROOT_PATH = os.path.dirname(SCRIPT_PATH)
sys.path.append(PROJECT_ROOT_PATH)
PACKAGE_NAME = os.path.basename(SCRIPT_PATH)
# <<<<<<<<<<<<<<
# import this project modules
from aargo.build_scripts.errors import AargoError
from aargo.utils.context.namespace import CliNameSpace
from aargo.utils.context.context import CliContext
from aargo.utils.context.command import CliCommand


# Root Class for Command Line Interface
class Cli(CliCommand):
    def description(self) -> str:
        return """AARGO - vcpkg to Android prefab AAR converter

Turns the installed packages of a vcpkg 'packages' directory into Android
Archive (AAR) files carrying prefab metadata, one AAR per package with all
of its Android ABIs merged.

USAGE:
    aargo <command> [options]

COMMANDS:
    convert     Convert a vcpkg packages directory into AARs
    clean       Remove the staging and output directories
    tree        Show the contents of built AARs

EXAMPLES:
    aargo convert ./vcpkg/packages                  # Writes ./vcpkg/aar/*.aar
    aargo convert ./vcpkg/packages --api64 24       # Override an API level
    aargo tree ./vcpkg/aar/zlib-1.2.11.aar          # Inspect an archive
    aargo clean ./vcpkg/packages -y                 # Remove aar-build/ and aar/

For more information on a specific command:
    aargo <command> --help
        """

    def get_command_list(self) -> list:
        arr = []
        for command in os.listdir(os.path.join(SCRIPT_PATH, "commands")):
            if command.startswith(("_", "test_")) or not command.endswith(".py"):
                continue
            arr.append(os.path.splitext(command)[0])
        return sorted(arr)

    def _help_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="aargo",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            description=self.description(),
        )
        parser.add_argument(
            "subcommand",
            metavar=f"{self.get_command_list()}",
            type=str,
            choices=self.get_command_list(),
        )
        return parser

    def cli(self) -> CliNameSpace:
        # aargo --help, but NOT aargo convert --help
        if len(sys.argv) == 2 and sys.argv[1] in ['--help', '-h']:
            self._help_parser().print_help()
            sys.exit(0)

        parser = argparse.ArgumentParser(
            prog="aargo",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            description=self.description(),
            add_help=False,
        )
        parser.add_argument(
            "subcommand",
            metavar=f"{self.get_command_list()}",
            type=str,
            nargs='?',
            choices=self.get_command_list(),
        )
        # parse only known args - this will NOT consume --help if present
        args, unknown = parser.parse_known_args(namespace=CliNameSpace())
        return args

    def exec(self, context: CliContext, args: CliNameSpace):
        if not args.subcommand:
            print("ERROR: No command specified\n")
            self._help_parser().print_help()
            sys.exit(1)

        module = importlib.import_module(f"{PACKAGE_NAME}.commands.{args.subcommand}")
        klass = getattr(module, args.subcommand.capitalize())
        sub_cmd = klass()
        try:
            sub_cmd.exec(context, sub_cmd.cli())
        except AargoError as e:
            print(f"ERROR: {e}")
            sys.exit(1)


def main():
    cmd = Cli()
    cmd.exec(CliContext(), cmd.cli())


if __name__ == "__main__":
    main()
