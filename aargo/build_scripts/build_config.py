#!/usr/bin/env python3
# -- coding: utf-8 --
#
# build_config.py
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
Build-wide configuration for the AAR conversion.

Values come from three places, later ones winning:
- built-in defaults (the values vcpkg's Android prefab export uses)
- an optional AARGO.toml in the working directory (or an explicit path)
- command line overrides

Configuration structure:
    [prefab]
    namespace = "com.vcpkg.ndk.support"
    api_level_32 = 16
    api_level_64 = 21
    ndk = 21
    stl = "c++_shared"

    [manifest]
    min_sdk = 16
    target_sdk = 29
    version_code = 1
    version_name = "1.0"
    reserved_words = ["kotlin"]
"""

import os
import sys
from dataclasses import dataclass, field, replace
from typing import Any, Dict, FrozenSet, Optional

if sys.version_info >= (3, 11, 0, "alpha", 7):
    import tomllib
else:
    import tomli as tomllib

from .errors import ConfigError
from .identifiers import JAVA_RESERVED_WORDS

CONFIG_FILE_NAME = "AARGO.toml"


@dataclass(frozen=True)
class BuildConfig:
    """Scalar inputs shared by every package of one run."""
    namespace: str = "com.vcpkg.ndk.support"
    api_level_32: int = 16
    api_level_64: int = 21
    ndk: int = 21
    stl: str = "c++_shared"
    min_sdk: int = 16
    target_sdk: int = 29
    version_code: int = 1
    version_name: str = "1.0"
    reserved_words: FrozenSet[str] = field(default=JAVA_RESERVED_WORDS)
    verbose: bool = False

    def with_overrides(self, **overrides) -> "BuildConfig":
        """Return a copy with every non-None override applied."""
        values = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **values)

    def get_config_summary(self) -> str:
        lines = [
            "Build Configuration:",
            f"  Namespace: {self.namespace}",
            f"  API level (32-bit): {self.api_level_32}",
            f"  API level (64-bit): {self.api_level_64}",
            f"  NDK: {self.ndk}",
            f"  STL: {self.stl}",
            f"  minSdk/targetSdk: {self.min_sdk}/{self.target_sdk}",
        ]
        return "\n".join(lines)


def _require_int(table: Dict[str, Any], key: str, default: int, config_file: str) -> int:
    value = table.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"'{key}' must be an integer in {config_file}, got {value!r}")
    return value


def _require_str(table: Dict[str, Any], key: str, default: str, config_file: str) -> str:
    value = table.get(key, default)
    if not isinstance(value, str):
        raise ConfigError(f"'{key}' must be a string in {config_file}, got {value!r}")
    return value


def config_from_dict(toml_data: Dict[str, Any], config_file: str = CONFIG_FILE_NAME) -> BuildConfig:
    """
    Build a BuildConfig from parsed TOML data.

    Args:
        toml_data: Parsed TOML document
        config_file: File name used in error messages

    Returns:
        BuildConfig with unspecified keys left at their defaults
    """
    defaults = BuildConfig()
    prefab = toml_data.get("prefab", {})
    manifest = toml_data.get("manifest", {})

    extra_words = manifest.get("reserved_words", [])
    if not isinstance(extra_words, list) or not all(isinstance(w, str) for w in extra_words):
        raise ConfigError(f"'reserved_words' must be a list of strings in {config_file}")

    return BuildConfig(
        namespace=_require_str(prefab, "namespace", defaults.namespace, config_file),
        api_level_32=_require_int(prefab, "api_level_32", defaults.api_level_32, config_file),
        api_level_64=_require_int(prefab, "api_level_64", defaults.api_level_64, config_file),
        ndk=_require_int(prefab, "ndk", defaults.ndk, config_file),
        stl=_require_str(prefab, "stl", defaults.stl, config_file),
        min_sdk=_require_int(manifest, "min_sdk", defaults.min_sdk, config_file),
        target_sdk=_require_int(manifest, "target_sdk", defaults.target_sdk, config_file),
        version_code=_require_int(manifest, "version_code", defaults.version_code, config_file),
        version_name=_require_str(manifest, "version_name", defaults.version_name, config_file),
        reserved_words=JAVA_RESERVED_WORDS | frozenset(extra_words),
    )


def load_build_config(config_file: Optional[str] = None) -> BuildConfig:
    """
    Load configuration from AARGO.toml.

    Args:
        config_file: Explicit path. When None, AARGO.toml in the current
            working directory is used if present.

    Returns:
        BuildConfig. Defaults are used when no file is found.

    Raises:
        ConfigError: the file exists but is not valid TOML or has bad values,
            or an explicitly requested file does not exist.
    """
    explicit = config_file is not None
    if not explicit:
        config_file = os.path.join(os.getcwd(), CONFIG_FILE_NAME)

    if not os.path.isfile(config_file):
        if explicit:
            raise ConfigError(f"Config file not found: {config_file}")
        print(f"   ⚠️  Warning: {CONFIG_FILE_NAME} not found at {config_file}")
        print("   ⚠️  Using default configuration values")
        return BuildConfig()

    try:
        with open(config_file, "rb") as f:
            toml_data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Error reading {config_file}: {e}") from e

    return config_from_dict(toml_data, config_file)
