"""
Build pipeline orchestration.

Runs every step needed to make OR-Tools usable from the host program:

1. Compile the protocol schemas
2. Install the prebuilt library (skipped on warm cache)
3. Compile the native adapter against the installed headers and emit its
   static-library directives
4. Emit the OR-Tools linker directives

In a documentation-only build (DOCS_RS set) steps 2-4 are skipped so that
neither network access nor a native toolchain is needed; schema
compilation still runs.
"""

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, TextIO

from ortoolskit.build.adapter import AdapterBuildSpec, build_adapter
from ortoolskit.build.linker import (
    LinkDirective,
    emit_lines,
    format_directives,
    install_path_diagnostic,
    link_directives,
)
from ortoolskit.config import BuildConfig
from ortoolskit.core.layout import NormalizedLibraryLayout
from ortoolskit.library.installer import InstallResult, LibraryInstaller
from ortoolskit.schema.compiler import SchemaCompileSpec, compile_schemas

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Outcome of a pipeline run."""

    layout: NormalizedLibraryLayout
    schema_output: Optional[Path] = None
    install: Optional[InstallResult] = None
    adapter_archive: Optional[Path] = None
    adapter_directives: List[LinkDirective] = field(default_factory=list)
    directives: List[LinkDirective] = field(default_factory=list)


class BuildPipeline:
    """
    Orchestrates schema compilation, library install, adapter build and
    linker configuration.

    Example:
        >>> config = BuildConfig.from_environment()
        >>> result = BuildPipeline(config).run()
    """

    def __init__(
        self,
        config: BuildConfig,
        installer: Optional[LibraryInstaller] = None,
        stream: Optional[TextIO] = None,
    ):
        """
        Args:
            config: Build configuration
            installer: Library installer (default: one for config.out_dir)
            stream: Where build directives are written (default: stdout)
        """
        self.config = config
        self.installer = installer or LibraryInstaller(
            config.out_dir, lock_timeout=config.lock_timeout
        )
        self.stream = stream or sys.stdout

    @property
    def layout(self) -> NormalizedLibraryLayout:
        return self.installer.layout

    def schema_spec(self) -> SchemaCompileSpec:
        return SchemaCompileSpec(
            source_dir=self.config.source_dir,
            output_dir=self.config.out_dir,
            schema_files=list(self.config.schemas.files),
            language=self.config.schemas.language,
            protoc=self.config.tools.protoc,
        )

    def adapter_spec(self) -> AdapterBuildSpec:
        return AdapterBuildSpec.for_layout(
            source=self.config.adapter_source,
            layout=self.layout,
            output_dir=self.config.out_dir,
            cxx=self.config.tools.cxx,
            ar=self.config.tools.ar,
        )

    def compile_schemas(self) -> Path:
        return compile_schemas(self.schema_spec())

    def install_library(self) -> InstallResult:
        return self.installer.ensure_installed()

    def run(self) -> PipelineResult:
        """
        Run the full pipeline.

        Returns:
            PipelineResult

        Raises:
            OrToolsKitError: On any failure; there is no partial success
        """
        result = PipelineResult(layout=self.layout)
        style = self.config.directive_style

        result.schema_output = self.compile_schemas()

        emit_lines([install_path_diagnostic(self.layout.root, style)], self.stream)

        if self.config.docs_only:
            logger.info("Documentation-only build: skipping install, compile and link")
            return result

        result.install = self.install_library()

        adapter_spec = self.adapter_spec()
        result.adapter_archive = build_adapter(adapter_spec)
        result.adapter_directives = adapter_spec.link_directives()
        emit_lines(format_directives(result.adapter_directives, style), self.stream)

        result.directives = link_directives(self.layout)
        emit_lines(format_directives(result.directives, style), self.stream)
        return result
