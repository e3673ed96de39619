"""
Protocol schema compilation.
"""

from .compiler import SCHEMA_FILES, SchemaCompileSpec, compile_schemas

__all__ = ["SCHEMA_FILES", "SchemaCompileSpec", "compile_schemas"]
