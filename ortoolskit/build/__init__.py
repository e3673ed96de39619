"""
Native build steps: adapter compilation and linker directives.
"""

from .adapter import AdapterBuildSpec, build_adapter
from .linker import (
    DirectiveKind,
    DirectiveStyle,
    LinkDirective,
    format_directives,
    link_directives,
)

__all__ = [
    "AdapterBuildSpec",
    "build_adapter",
    "DirectiveKind",
    "DirectiveStyle",
    "LinkDirective",
    "format_directives",
    "link_directives",
]
