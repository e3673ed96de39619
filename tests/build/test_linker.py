"""
Unit tests for linker directives.
"""

import io

from ortoolskit.build.linker import (
    DirectiveKind,
    DirectiveStyle,
    LinkDirective,
    emit_lines,
    format_directives,
    install_path_diagnostic,
    link_directives,
)
from ortoolskit.core.layout import NormalizedLibraryLayout


class TestLinkDirectives:
    """Tests for link_directives()."""

    def test_two_libraries_and_one_search_path(self, tmp_path):
        layout = NormalizedLibraryLayout.in_directory(tmp_path)

        directives = link_directives(layout)

        assert directives == [
            LinkDirective(DirectiveKind.LIB, "ortools"),
            LinkDirective(DirectiveKind.LIB, "protobuf"),
            LinkDirective(DirectiveKind.SEARCH, str(tmp_path / "ortools" / "lib")),
        ]


class TestFormatting:
    """Tests for directive rendering."""

    def test_cargo_style(self, tmp_path):
        layout = NormalizedLibraryLayout.in_directory(tmp_path)

        lines = format_directives(link_directives(layout), DirectiveStyle.CARGO)

        assert lines == [
            "cargo:rustc-link-lib=ortools",
            "cargo:rustc-link-lib=protobuf",
            f"cargo:rustc-link-search={tmp_path / 'ortools' / 'lib'}",
        ]

    def test_flags_style(self, tmp_path):
        layout = NormalizedLibraryLayout.in_directory(tmp_path)

        lines = format_directives(link_directives(layout), DirectiveStyle.FLAGS)

        assert lines == [
            "-lortools",
            "-lprotobuf",
            f"-L{tmp_path / 'ortools' / 'lib'}",
        ]

    def test_modifier_only_rendered_in_cargo_style(self):
        directive = LinkDirective(DirectiveKind.LIB, "cp_sat_wrapper", modifier="static")

        assert directive.render(DirectiveStyle.CARGO) == (
            "cargo:rustc-link-lib=static=cp_sat_wrapper"
        )
        assert directive.render(DirectiveStyle.FLAGS) == "-lcp_sat_wrapper"

    def test_install_path_diagnostic(self, tmp_path):
        cargo = install_path_diagnostic(tmp_path / "ortools", DirectiveStyle.CARGO)
        flags = install_path_diagnostic(tmp_path / "ortools", DirectiveStyle.FLAGS)

        assert cargo == f"cargo:warning=installing ortools lib in {tmp_path / 'ortools'}"
        assert flags.startswith("# installing ortools lib in")

    def test_emit_lines(self):
        stream = io.StringIO()

        emit_lines(["a", "b"], stream)

        assert stream.getvalue() == "a\nb\n"
