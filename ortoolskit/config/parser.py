"""Build configuration for ortoolskit.

Configuration comes from three layers, later layers winning:

1. built-in defaults
2. an optional ortoolskit.yaml file
3. the build environment (OUT_DIR, DOCS_RS, CXX, AR, PROTOC)

Example ortoolskit.yaml:

    source_dir: src
    adapter_source: cp_sat_wrapper.cpp
    schemas:
      files: [cp_model.proto, sat_parameters.proto]
      language: python
    tools:
      cxx: clang++
      protoc: /opt/protobuf/bin/protoc
    directive_style: cargo
    lock_timeout: 600
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from ortoolskit.build.linker import DirectiveStyle
from ortoolskit.core.exceptions import ConfigurationError
from ortoolskit.core.locking import DEFAULT_LOCK_TIMEOUT
from ortoolskit.schema.compiler import SCHEMA_FILES

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "ortoolskit.yaml"

OUT_DIR_VAR = "OUT_DIR"
DOCS_ONLY_VAR = "DOCS_RS"

_TOP_LEVEL_KEYS = {
    "source_dir",
    "adapter_source",
    "schemas",
    "tools",
    "directive_style",
    "lock_timeout",
}
_SCHEMA_KEYS = {"files", "language"}
_TOOL_KEYS = {"cxx", "ar", "protoc"}
_TOOL_ENV_VARS = {"cxx": "CXX", "ar": "AR", "protoc": "PROTOC"}


@dataclass
class ToolsConfig:
    """External tool commands."""

    cxx: str = "c++"
    ar: str = "ar"
    protoc: str = "protoc"


@dataclass
class SchemaConfig:
    """Schema compilation settings."""

    files: List[str] = field(default_factory=lambda: list(SCHEMA_FILES))
    language: str = "python"


@dataclass
class BuildConfig:
    """
    Complete build configuration.

    Attributes:
        out_dir: Working/output directory supplied by the build environment
        docs_only: Documentation-only build (no fetch, compile or link)
        source_dir: Directory holding the adapter source and schema files
        adapter_source: Adapter source file
        schemas: Schema compilation settings
        tools: External tool commands
        directive_style: Rendering of linker directives
        lock_timeout: Seconds to wait for a concurrent install
    """

    out_dir: Path
    docs_only: bool = False
    source_dir: Path = field(default_factory=lambda: Path("src"))
    adapter_source: Path = field(default_factory=lambda: Path("src/cp_sat_wrapper.cpp"))
    schemas: SchemaConfig = field(default_factory=SchemaConfig)
    tools: ToolsConfig = field(default_factory=ToolsConfig)
    directive_style: DirectiveStyle = DirectiveStyle.CARGO
    lock_timeout: float = DEFAULT_LOCK_TIMEOUT

    @classmethod
    def from_environment(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        config_file: Optional[Path] = None,
        project_root: Optional[Path] = None,
    ) -> "BuildConfig":
        """
        Build configuration from the environment and an optional YAML file.

        Args:
            environ: Environment mapping (default: os.environ)
            config_file: YAML file; if None, '<project_root>/ortoolskit.yaml'
                is used when it exists
            project_root: Base for relative paths (default: config file's
                directory, else the current directory)

        Raises:
            ConfigurationError: If OUT_DIR is missing or the file is invalid
        """
        if environ is None:
            environ = os.environ

        out_dir = environ.get(OUT_DIR_VAR)
        if not out_dir:
            raise ConfigurationError(
                f"{OUT_DIR_VAR} environment variable is not set"
            )

        if config_file is None:
            candidate = (project_root or Path.cwd()) / CONFIG_FILE_NAME
            if candidate.is_file():
                config_file = candidate

        data: Dict[str, Any] = {}
        if config_file is not None:
            data = load_config_file(config_file)
            if project_root is None:
                project_root = Path(config_file).resolve().parent

        root = project_root or Path.cwd()
        config = _parse_config(data, root, Path(out_dir))

        # presence alone switches docs mode on
        config.docs_only = DOCS_ONLY_VAR in environ

        for key, var in _TOOL_ENV_VARS.items():
            if environ.get(var):
                setattr(config.tools, key, environ[var])

        return config


def load_config_file(config_file: Path) -> Dict[str, Any]:
    """
    Load and parse a YAML configuration file.

    Returns:
        Configuration dictionary (empty if the file is empty)

    Raises:
        ConfigurationError: If the file is missing or not valid YAML
    """
    config_file = Path(config_file)
    if not config_file.is_file():
        raise ConfigurationError(f"Configuration file not found: {config_file}")

    logger.debug(f"Loading configuration from {config_file}")
    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_file}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"{config_file} must contain a mapping")
    return data


def _check_keys(data: Dict[str, Any], allowed: set, section: str) -> None:
    unknown = sorted(set(data) - allowed)
    if unknown:
        raise ConfigurationError(
            f"Unknown keys in {section}: {', '.join(unknown)}"
        )


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = data.get(name) or {}
    if not isinstance(value, dict):
        raise ConfigurationError(f"'{name}' must be a mapping")
    return value


def _string(
    data: Dict[str, Any], key: str, default: str, name: Optional[str] = None
) -> str:
    value = data.get(key, default)
    if not isinstance(value, str) or not value:
        raise ConfigurationError(f"'{name or key}' must be a non-empty string")
    return value


def _parse_config(data: Dict[str, Any], root: Path, out_dir: Path) -> BuildConfig:
    _check_keys(data, _TOP_LEVEL_KEYS, "configuration")

    source_dir = root / _string(data, "source_dir", "src")
    adapter_source = source_dir / _string(data, "adapter_source", "cp_sat_wrapper.cpp")

    schema_data = _section(data, "schemas")
    _check_keys(schema_data, _SCHEMA_KEYS, "schemas")
    schemas = SchemaConfig()
    if "files" in schema_data:
        files = schema_data["files"]
        if not isinstance(files, list) or not all(isinstance(f, str) for f in files):
            raise ConfigurationError("'schemas.files' must be a list of file names")
        schemas.files = files
    schemas.language = _string(schema_data, "language", "python", "schemas.language")

    tool_data = _section(data, "tools")
    _check_keys(tool_data, _TOOL_KEYS, "tools")
    tools = ToolsConfig(
        **{key: _string(tool_data, key, "", f"tools.{key}") for key in tool_data}
    )

    style_name = data.get("directive_style", DirectiveStyle.CARGO.value)
    try:
        directive_style = DirectiveStyle(style_name)
    except ValueError:
        valid = ", ".join(style.value for style in DirectiveStyle)
        raise ConfigurationError(
            f"Invalid directive_style '{style_name}' (expected one of: {valid})"
        ) from None

    try:
        lock_timeout = float(data.get("lock_timeout", DEFAULT_LOCK_TIMEOUT))
    except (TypeError, ValueError):
        raise ConfigurationError("'lock_timeout' must be a number") from None

    return BuildConfig(
        out_dir=out_dir,
        source_dir=source_dir,
        adapter_source=adapter_source,
        schemas=schemas,
        tools=tools,
        directive_style=directive_style,
        lock_timeout=lock_timeout,
    )
