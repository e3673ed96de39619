"""
Unit tests for native adapter compilation.
"""

import subprocess
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from ortoolskit.build.adapter import (
    CXX_STANDARD_FLAG,
    VISIBILITY_MACRO_FLAG,
    AdapterBuildSpec,
    build_adapter,
)
from ortoolskit.build.linker import DirectiveStyle, format_directives
from ortoolskit.core.exceptions import CompileError
from ortoolskit.core.layout import NormalizedLibraryLayout


def fake_find_executable(name, search_paths=None):
    return Path("/usr/bin") / name


@pytest.fixture
def spec(tmp_path, project_sources, installed_library):
    layout = NormalizedLibraryLayout(installed_library)
    return AdapterBuildSpec.for_layout(
        source=project_sources / "cp_sat_wrapper.cpp",
        layout=layout,
        output_dir=installed_library.parent,
    )


class TestAdapterBuildSpec:
    """Tests for AdapterBuildSpec."""

    def test_for_layout_uses_include_dir(self, spec, installed_library):
        assert spec.include_dirs == [installed_library / "include"]
        assert CXX_STANDARD_FLAG in spec.flags
        assert VISIBILITY_MACRO_FLAG in spec.flags

    def test_output_paths(self, spec, installed_library):
        assert spec.object_path == installed_library.parent / "cp_sat_wrapper.o"
        assert spec.archive_path == installed_library.parent / "libcp_sat_wrapper.a"

    def test_link_directives(self, spec, installed_library):
        out_dir = installed_library.parent

        directives = spec.link_directives()

        assert format_directives(directives, DirectiveStyle.CARGO) == [
            "cargo:rustc-link-lib=static=cp_sat_wrapper",
            f"cargo:rustc-link-search=native={out_dir}",
        ]
        assert format_directives(directives, DirectiveStyle.FLAGS) == [
            "-lcp_sat_wrapper",
            f"-L{out_dir}",
        ]

    @patch("ortoolskit.build.adapter.find_executable", side_effect=fake_find_executable)
    def test_compile_command(self, mock_find, spec, installed_library):
        command = spec.compile_command()

        assert command[0] == "/usr/bin/c++"
        assert "-std=c++17" in command
        assert "-DOR_PROTO_DLL=" in command
        assert f"-I{installed_library / 'include'}" in command
        assert command[-4:] == [
            "-c",
            str(spec.source),
            "-o",
            str(spec.object_path),
        ]

    @patch("ortoolskit.build.adapter.find_executable", side_effect=fake_find_executable)
    def test_compiler_wrapper_arguments(self, mock_find, spec):
        spec.cxx = "ccache g++"

        command = spec.compile_command()

        assert command[:2] == ["/usr/bin/ccache", "g++"]

    @patch("ortoolskit.build.adapter.find_executable", side_effect=fake_find_executable)
    def test_archive_command(self, mock_find, spec):
        assert spec.archive_command() == [
            "/usr/bin/ar",
            "crs",
            str(spec.archive_path),
            str(spec.object_path),
        ]

    @patch("ortoolskit.build.adapter.find_executable", return_value=None)
    def test_missing_compiler(self, mock_find, spec):
        with pytest.raises(CompileError, match="C\\+\\+ compiler not found"):
            spec.compile_command()


class TestBuildAdapter:
    """Tests for build_adapter()."""

    @patch("ortoolskit.build.adapter.find_executable", side_effect=fake_find_executable)
    @patch("ortoolskit.build.adapter.subprocess.run")
    def test_compiles_then_archives(self, mock_run, mock_find, spec):
        mock_run.return_value = Mock(returncode=0, stdout="", stderr="")

        archive = build_adapter(spec)

        assert archive == spec.archive_path
        assert mock_run.call_count == 2
        compile_cmd = mock_run.call_args_list[0].args[0]
        archive_cmd = mock_run.call_args_list[1].args[0]
        assert compile_cmd[0] == "/usr/bin/c++"
        assert archive_cmd[:2] == ["/usr/bin/ar", "crs"]

    @patch("ortoolskit.build.adapter.find_executable", side_effect=fake_find_executable)
    @patch("ortoolskit.build.adapter.subprocess.run")
    def test_compile_failure(self, mock_run, mock_find, spec):
        mock_run.return_value = Mock(
            returncode=1, stdout="", stderr="cp_model.h: No such file or directory"
        )

        with pytest.raises(CompileError, match="No such file") as exc_info:
            build_adapter(spec)

        assert "cp_model.h" in exc_info.value.stderr
        assert mock_run.call_count == 1

    @patch("ortoolskit.build.adapter.find_executable", side_effect=fake_find_executable)
    @patch("ortoolskit.build.adapter.subprocess.run", side_effect=OSError("exec format error"))
    def test_tool_cannot_start(self, mock_run, mock_find, spec):
        with pytest.raises(CompileError, match="exec format error"):
            build_adapter(spec)

    def test_missing_source(self, spec, tmp_path):
        spec.source = tmp_path / "missing.cpp"

        with pytest.raises(CompileError, match="Adapter source not found"):
            build_adapter(spec)


@pytest.mark.integration
def test_real_compile(tmp_path):
    """Compile a trivial adapter with the host toolchain."""
    library = tmp_path / "ortools"
    (library / "include").mkdir(parents=True)
    (library / "include" / "bridge.h").write_text("#pragma once\nint answer();\n")
    source = tmp_path / "cp_sat_wrapper.cpp"
    source.write_text('#include "bridge.h"\nint answer() { return 42; }\n')
    spec = AdapterBuildSpec.for_layout(source, NormalizedLibraryLayout(library), tmp_path)

    archive = build_adapter(spec)

    assert archive.is_file()
    listing = subprocess.run(["ar", "t", str(archive)], capture_output=True, text=True)
    assert "cp_sat_wrapper.o" in listing.stdout
