"""
Native adapter compilation.

The adapter is a single C++ source file bridging the host program to the
OR-Tools C++ API. It is compiled against the headers of the normalized
library layout and packed into a static archive.

The OR-Tools headers expect OR_PROTO_DLL from their own build system. It
is defined empty, leaving the declarations without export annotations.
"""

import logging
import shlex
import subprocess
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from ortoolskit.build.linker import DirectiveKind, LinkDirective
from ortoolskit.core.exceptions import CompileError
from ortoolskit.core.filesystem import find_executable
from ortoolskit.core.layout import NormalizedLibraryLayout

logger = logging.getLogger(__name__)

ADAPTER_ARCHIVE_NAME = "cp_sat_wrapper"
CXX_STANDARD_FLAG = "-std=c++17"
VISIBILITY_MACRO_FLAG = "-DOR_PROTO_DLL="


@dataclass
class AdapterBuildSpec:
    """
    Compilation configuration for the native adapter.

    Attributes:
        source: C++ source file of the adapter
        include_dirs: Header search paths
        output_dir: Directory receiving the object file and static archive
        flags: Compiler flags
        archive_name: Library name (archive is 'lib<archive_name>.a')
        cxx: C++ compiler command (may include wrapper arguments)
        ar: Archiver command
    """

    source: Path
    include_dirs: List[Path]
    output_dir: Path
    flags: List[str] = field(
        default_factory=lambda: [CXX_STANDARD_FLAG, VISIBILITY_MACRO_FLAG]
    )
    archive_name: str = ADAPTER_ARCHIVE_NAME
    cxx: str = "c++"
    ar: str = "ar"

    @classmethod
    def for_layout(
        cls,
        source: Path,
        layout: NormalizedLibraryLayout,
        output_dir: Path,
        cxx: str = "c++",
        ar: str = "ar",
    ) -> "AdapterBuildSpec":
        """Build spec compiling source against layout's include directory."""
        flags = [CXX_STANDARD_FLAG, VISIBILITY_MACRO_FLAG]
        if sys.platform != "darwin":
            flags.append("-fPIC")
        return cls(
            source=Path(source),
            include_dirs=[layout.include_dir],
            output_dir=Path(output_dir),
            flags=flags,
            cxx=cxx,
            ar=ar,
        )

    @property
    def object_path(self) -> Path:
        return self.output_dir / f"{self.source.stem}.o"

    @property
    def archive_path(self) -> Path:
        return self.output_dir / f"lib{self.archive_name}.a"

    def compile_command(self) -> List[str]:
        """Compiler invocation producing the object file."""
        command = _resolve_tool(self.cxx, "C++ compiler")
        command.extend(self.flags)
        command.extend(f"-I{include_dir}" for include_dir in self.include_dirs)
        command.extend(["-c", str(self.source), "-o", str(self.object_path)])
        return command

    def archive_command(self) -> List[str]:
        """Archiver invocation packing the object file."""
        command = _resolve_tool(self.ar, "archiver")
        command.extend(["crs", str(self.archive_path), str(self.object_path)])
        return command

    def link_directives(self) -> List[LinkDirective]:
        """
        Directives linking the static archive into the host program.

        Returns:
            One static LIB directive followed by one native SEARCH directive
        """
        return [
            LinkDirective(DirectiveKind.LIB, self.archive_name, modifier="static"),
            LinkDirective(DirectiveKind.SEARCH, str(self.output_dir), modifier="native"),
        ]


def _resolve_tool(tool: str, description: str) -> List[str]:
    """
    Split a tool command and check its executable exists.

    Raises:
        CompileError: If the executable cannot be found
    """
    parts = shlex.split(tool)
    if not parts:
        raise CompileError(f"No {description} configured")

    executable = find_executable(parts[0])
    if executable is None:
        raise CompileError(f"{description} not found: {parts[0]}")
    return [str(executable), *parts[1:]]


def _run(command: List[str], description: str) -> None:
    logger.debug(f"Running: {' '.join(command)}")
    try:
        result = subprocess.run(command, capture_output=True, text=True)
    except OSError as e:
        raise CompileError(f"Failed to run {description}: {e}") from e

    if result.returncode != 0:
        raise CompileError(
            f"{description} failed with exit code {result.returncode}",
            stderr=result.stderr,
        )


def build_adapter(spec: AdapterBuildSpec) -> Path:
    """
    Compile the adapter and pack it into a static archive.

    Args:
        spec: Adapter build configuration

    Returns:
        Path to the static archive

    Raises:
        CompileError: If the source is missing, a tool is missing, or a
            tool exits with an error
    """
    if not spec.source.is_file():
        raise CompileError(f"Adapter source not found: {spec.source}")

    spec.output_dir.mkdir(parents=True, exist_ok=True)
    logger.info(f"Compiling {spec.source.name}")

    _run(spec.compile_command(), f"Compiling {spec.source.name}")

    # ar appends to an existing archive
    spec.archive_path.unlink(missing_ok=True)
    _run(spec.archive_command(), f"Archiving {spec.archive_path.name}")

    logger.info(f"Built {spec.archive_path}")
    return spec.archive_path
