"""
Protocol schema compilation.

The CP-SAT model and solver parameter schemas are compiled with the external
'protoc' tool. Generated bindings are written to the output directory using
protoc's own naming conventions.
"""

import logging
import shlex
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from ortoolskit.core.exceptions import SchemaCompileError
from ortoolskit.core.filesystem import find_executable

logger = logging.getLogger(__name__)

SCHEMA_FILES = ("cp_model.proto", "sat_parameters.proto")


@dataclass
class SchemaCompileSpec:
    """
    Schema compiler invocation.

    Attributes:
        source_dir: Directory holding the schema files; also the import path
        output_dir: Directory receiving the generated bindings
        schema_files: Schema file names relative to source_dir
        language: protoc output language ('python', 'cpp', 'java', ...)
        protoc: protoc command
    """

    source_dir: Path
    output_dir: Path
    schema_files: List[str] = field(default_factory=lambda: list(SCHEMA_FILES))
    language: str = "python"
    protoc: str = "protoc"

    @property
    def schema_paths(self) -> List[Path]:
        return [self.source_dir / name for name in self.schema_files]

    def command(self) -> List[str]:
        parts = shlex.split(self.protoc)
        if not parts:
            raise SchemaCompileError("No schema compiler configured")

        executable = find_executable(parts[0])
        if executable is None:
            raise SchemaCompileError(f"Schema compiler not found: {parts[0]}")

        return [
            str(executable),
            *parts[1:],
            f"--proto_path={self.source_dir}",
            f"--{self.language}_out={self.output_dir}",
            *(str(path) for path in self.schema_paths),
        ]


def compile_schemas(spec: SchemaCompileSpec) -> Path:
    """
    Compile the schema files.

    Args:
        spec: Schema compiler invocation

    Returns:
        Output directory holding the generated bindings

    Raises:
        SchemaCompileError: If a schema file or the compiler is missing, or
            the compiler exits with an error
    """
    missing = [str(path) for path in spec.schema_paths if not path.is_file()]
    if missing:
        raise SchemaCompileError(f"Schema files not found: {', '.join(missing)}")

    spec.output_dir.mkdir(parents=True, exist_ok=True)
    command = spec.command()
    logger.info(f"Compiling schemas: {', '.join(spec.schema_files)}")
    logger.debug(f"Running: {' '.join(command)}")

    try:
        result = subprocess.run(command, capture_output=True, text=True)
    except OSError as e:
        raise SchemaCompileError(f"Failed to run schema compiler: {e}") from e

    if result.returncode != 0:
        raise SchemaCompileError(
            f"Schema compiler failed with exit code {result.returncode}",
            stderr=result.stderr,
        )

    return spec.output_dir
