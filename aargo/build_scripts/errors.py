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

"""Errors raised by the conversion pipeline. Every one of them aborts the run."""


class AargoError(Exception):
    """Base class for fatal conversion errors"""
    pass


class MissingFieldError(AargoError):
    """A CONTROL record lacks a required key"""

    def __init__(self, field: str, source_path):
        self.field = field
        self.source_path = source_path
        super().__init__(f"Missing required field '{field}' in {source_path}")


class UnknownArchitectureError(AargoError):
    """A triplet has no entry in the ABI table"""

    def __init__(self, architecture: str):
        self.architecture = architecture
        super().__init__(f"Unknown architecture '{architecture}'")


class UnrepresentableVersionError(AargoError):
    """No normalization stage produced a dotted numeric version"""

    def __init__(self, raw_version: str):
        self.raw_version = raw_version
        super().__init__(
            f"Version '{raw_version}' cannot be represented as a dotted numeric version"
        )


class ConfigError(AargoError):
    """The configuration file exists but cannot be used"""
    pass
