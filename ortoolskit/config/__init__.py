"""Configuration for ortoolskit."""

from .parser import (
    CONFIG_FILE_NAME,
    DOCS_ONLY_VAR,
    OUT_DIR_VAR,
    BuildConfig,
    SchemaConfig,
    ToolsConfig,
    load_config_file,
)

__all__ = [
    "CONFIG_FILE_NAME",
    "DOCS_ONLY_VAR",
    "OUT_DIR_VAR",
    "BuildConfig",
    "SchemaConfig",
    "ToolsConfig",
    "load_config_file",
]
