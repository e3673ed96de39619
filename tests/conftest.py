"""
Pytest configuration and shared fixtures for ortoolskit tests.
"""

import io
import tarfile
from pathlib import Path
from typing import Callable, Dict, Optional

import pytest

from ortoolskit.core.platform import clear_platform_cache

EXTRACTED_DIR_NAME = "or-tools-v9.14-debian-build"


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that require network access or a C++ toolchain",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (requires --integration)",
    )


@pytest.fixture(autouse=True)
def _reset_platform_cache():
    """Platform detection is cached per process; isolate tests from each other."""
    clear_platform_cache()
    yield
    clear_platform_cache()


# ============================================================================
# Archive Fixtures
# ============================================================================


def build_tar_gz(files: Dict[str, bytes], dirs: Optional[list] = None) -> bytes:
    """
    Build an in-memory .tar.gz archive.

    Args:
        files: Mapping of member path -> content
        dirs: Extra directory members to add

    Returns:
        Archive bytes
    """
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
        for name in dirs or []:
            info = tarfile.TarInfo(name)
            info.type = tarfile.DIRTYPE
            info.mode = 0o755
            tar.addfile(info)
        for name, content in files.items():
            info = tarfile.TarInfo(name)
            info.size = len(content)
            info.mode = 0o644
            tar.addfile(info, io.BytesIO(content))
    return buffer.getvalue()


def library_files(top_level: str) -> Dict[str, bytes]:
    """Files of a minimal OR-Tools distribution under top_level."""
    return {
        f"{top_level}/include/ortools/sat/cp_model.h": b"#pragma once\n",
        f"{top_level}/lib/libortools.a": b"!<arch>\n",
        f"{top_level}/lib/libprotobuf.a": b"!<arch>\n",
        f"{top_level}/README.md": b"OR-Tools\n",
    }


@pytest.fixture
def make_tar_gz() -> Callable[..., bytes]:
    """Factory building .tar.gz archives in memory."""
    return build_tar_gz


@pytest.fixture
def ortools_archive() -> bytes:
    """A valid archive whose sole top-level entry is the library directory."""
    return build_tar_gz(
        library_files(EXTRACTED_DIR_NAME),
        dirs=[EXTRACTED_DIR_NAME, f"{EXTRACTED_DIR_NAME}/include", f"{EXTRACTED_DIR_NAME}/lib"],
    )


# ============================================================================
# Directory Fixtures
# ============================================================================


@pytest.fixture
def out_dir(tmp_path) -> Path:
    """Empty build output directory."""
    path = tmp_path / "out"
    path.mkdir()
    return path


@pytest.fixture
def installed_library(out_dir) -> Path:
    """Output directory with an already normalized library (warm cache)."""
    library = out_dir / "ortools"
    (library / "include" / "ortools").mkdir(parents=True)
    (library / "lib").mkdir()
    (library / "lib" / "libortools.a").write_bytes(b"!<arch>\n")
    return library


@pytest.fixture
def project_sources(tmp_path) -> Path:
    """Project source directory with the adapter and schema files."""
    src = tmp_path / "project" / "src"
    src.mkdir(parents=True)
    (src / "cp_sat_wrapper.cpp").write_text(
        '#include "ortools/sat/cp_model.h"\nextern "C" int solve() { return 0; }\n'
    )
    (src / "cp_model.proto").write_text('syntax = "proto3";\npackage operations_research.sat;\n')
    (src / "sat_parameters.proto").write_text(
        'syntax = "proto2";\npackage operations_research.sat;\n'
    )
    return src
