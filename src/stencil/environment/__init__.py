"""Stencil environment: compiler facade, registries, loaders and errors."""

from stencil.environment.exceptions import (
    CompileError,
    ErrorCode,
    InheritanceCycleError,
    ResolutionError,
    ScanningError,
    SourceSnippet,
    StructuralError,
    TemplateError,
    TemplateSyntaxError,
    UnknownFilterError,
    UnknownFilterTypeError,
    build_source_snippet,
)
from stencil.environment.loaders import (
    ChoiceLoader,
    DictLoader,
    FileSystemLoader,
    FunctionLoader,
    Loader,
)
from stencil.environment.registry import (
    Arguments,
    CallMapping,
    Generator,
    MappingRegistry,
    Rename,
)
from stencil.environment.core import Environment  # noqa: I001

__all__ = [
    "Arguments",
    "CallMapping",
    "ChoiceLoader",
    "CompileError",
    "DictLoader",
    "Environment",
    "ErrorCode",
    "FileSystemLoader",
    "FunctionLoader",
    "Generator",
    "InheritanceCycleError",
    "Loader",
    "MappingRegistry",
    "Rename",
    "ResolutionError",
    "ScanningError",
    "SourceSnippet",
    "StructuralError",
    "TemplateError",
    "TemplateSyntaxError",
    "UnknownFilterError",
    "UnknownFilterTypeError",
    "build_source_snippet",
]
