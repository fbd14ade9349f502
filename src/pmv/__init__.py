"""Create new Rust scripting projects from a built-in template.

The package validates project names against Cargo's package name rules,
enumerates template trees from package data or a directory, and materialises
them with literal ``__PROJECT_NAME__`` substitution. The tree is built in a
staging directory and moved into place in one step, so a failed run never
leaves a half-written project behind.
"""

from __future__ import annotations

from .config import ScaffoldConfig
from .engine import InstantiationResult, Instantiator, instantiate
from .errors import (
    ContentWriteFailed,
    DestinationConflict,
    InstantiationError,
    NameErrorKind,
    PathWriteFailed,
    PmvError,
    ProjectNameError,
    TemplateUnreadable,
)
from .naming import ProjectName, suggest_name, validate
from .scaffold import ProjectScaffolder, create_project
from .source import (
    DirectoryTemplateSource,
    EntryKind,
    MemoryTemplateSource,
    PackageTemplateSource,
    TemplateEntry,
    TemplateSource,
    builtin_template,
)
from .template import PLACEHOLDER_TOKENS, TemplateRenderer

__all__ = [
    "ContentWriteFailed",
    "DestinationConflict",
    "DirectoryTemplateSource",
    "EntryKind",
    "InstantiationError",
    "InstantiationResult",
    "Instantiator",
    "MemoryTemplateSource",
    "NameErrorKind",
    "PLACEHOLDER_TOKENS",
    "PackageTemplateSource",
    "PathWriteFailed",
    "PmvError",
    "ProjectName",
    "ProjectNameError",
    "ProjectScaffolder",
    "ScaffoldConfig",
    "TemplateEntry",
    "TemplateRenderer",
    "TemplateSource",
    "TemplateUnreadable",
    "builtin_template",
    "create_project",
    "instantiate",
    "suggest_name",
    "validate",
]

__version__ = "0.1.0"
