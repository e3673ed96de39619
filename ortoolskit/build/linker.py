"""
Linker directives for the enclosing build system.

Directives are printed to stdout and consumed by whatever drives the
build. Two renderings are supported:

- 'cargo': 'cargo:rustc-link-lib=ortools' style lines
- 'flags': plain linker flags ('-lortools', '-L/path')
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional, TextIO

from ortoolskit.core.layout import NormalizedLibraryLayout

logger = logging.getLogger(__name__)

LINKED_LIBRARIES = ("ortools", "protobuf")


class DirectiveKind(Enum):
    LIB = "lib"
    SEARCH = "search"


class DirectiveStyle(Enum):
    CARGO = "cargo"
    FLAGS = "flags"


@dataclass(frozen=True)
class LinkDirective:
    """
    A library to link or a path to search.

    The optional modifier (e.g. 'static', 'native') is only rendered in
    cargo style: 'cargo:rustc-link-lib=static=name'.
    """

    kind: DirectiveKind
    value: str
    modifier: Optional[str] = None

    def render(self, style: DirectiveStyle) -> str:
        if style is DirectiveStyle.CARGO:
            value = f"{self.modifier}={self.value}" if self.modifier else self.value
            if self.kind is DirectiveKind.LIB:
                return f"cargo:rustc-link-lib={value}"
            return f"cargo:rustc-link-search={value}"

        if self.kind is DirectiveKind.LIB:
            return f"-l{self.value}"
        return f"-L{self.value}"


def link_directives(layout: NormalizedLibraryLayout) -> List[LinkDirective]:
    """
    Directives linking the prebuilt library and its protobuf runtime.

    Returns:
        Two LIB directives followed by one SEARCH directive
    """
    directives = [LinkDirective(DirectiveKind.LIB, name) for name in LINKED_LIBRARIES]
    directives.append(LinkDirective(DirectiveKind.SEARCH, str(layout.lib_dir)))
    return directives


def format_directives(
    directives: Iterable[LinkDirective], style: DirectiveStyle
) -> List[str]:
    return [directive.render(style) for directive in directives]


def format_diagnostic(message: str, style: DirectiveStyle) -> str:
    """Render an informational message for the build system."""
    if style is DirectiveStyle.CARGO:
        return f"cargo:warning={message}"
    return f"# {message}"


def emit_lines(lines: Iterable[str], stream: TextIO) -> None:
    for line in lines:
        print(line, file=stream)
    stream.flush()


def install_path_diagnostic(library_dir: Path, style: DirectiveStyle) -> str:
    return format_diagnostic(f"installing ortools lib in {library_dir}", style)
