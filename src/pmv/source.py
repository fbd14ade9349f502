"""Template sources: read-only, ordered trees of template entries."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path, PurePosixPath
from typing import Iterator, Mapping

from pathspec import GitIgnoreSpec
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .errors import TemplateUnreadable

__all__ = [
    "BUILTIN_TEMPLATE",
    "DirectoryTemplateSource",
    "EntryKind",
    "MemoryTemplateSource",
    "PackageTemplateSource",
    "TemplateEntry",
    "TemplateSource",
    "builtin_template",
]

LOGGER = logging.getLogger(__name__)

BUILTIN_TEMPLATE = ("pmv.templates", "script")

_IGNORED_NAMES = frozenset({"__pycache__", ".DS_Store", ".git", ".hg", ".svn", ".bzr", "_darcs"})
_IGNORED_SUFFIXES = (".pyc", ".pyo")
_FORBIDDEN_SEGMENT_CHARACTERS = frozenset("/\\\0")


class EntryKind(str, Enum):
    """Kinds of nodes in a template tree."""

    FILE = "file"
    DIRECTORY = "directory"


class TemplateEntry(BaseModel):
    """A single file or directory of a template, addressed relative to its root."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    relative_path: tuple[str, ...] = Field(..., description="Path segments relative to the template root.")
    kind: EntryKind = Field(..., description="Whether the entry is a file or a directory.")
    content: bytes = Field(default=b"", description="Raw file contents. Always empty for directories.")
    executable: bool = Field(default=False, description="Whether the generated file should be executable.")

    @field_validator("relative_path")
    @classmethod
    def _check_segments(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if not value:
            raise ValueError("relative_path must contain at least one segment")
        for segment in value:
            if segment in {"", ".", ".."}:
                raise ValueError(f"invalid path segment {segment!r}")
            if _FORBIDDEN_SEGMENT_CHARACTERS.intersection(segment):
                raise ValueError(f"path segment {segment!r} contains a separator")
        return value

    @model_validator(mode="after")
    def _check_directory_payload(self) -> "TemplateEntry":
        if self.kind is EntryKind.DIRECTORY and (self.content or self.executable):
            raise ValueError("directory entries cannot carry content")
        return self

    @property
    def posix_path(self) -> str:
        return "/".join(self.relative_path)


class TemplateSource(ABC):
    """Enumerable, read-only template tree.

    Every call to :meth:`entries` starts a fresh enumeration. Entries are
    yielded with parents before their children and siblings in lexical order.
    """

    @abstractmethod
    def entries(self) -> Iterator[TemplateEntry]:
        """Yield every entry of the template in deterministic order."""

    @property
    @abstractmethod
    def location(self) -> Path:
        """Human readable location of the template, used in error reports."""

    def __iter__(self) -> Iterator[TemplateEntry]:
        return self.entries()


def _is_ignored(name: str) -> bool:
    return name in _IGNORED_NAMES or name.endswith(_IGNORED_SUFFIXES)


class _TraversableSource(TemplateSource):
    """Shared walker for filesystem directories and package resources."""

    @abstractmethod
    def _root(self) -> Traversable:
        """Return the root of the tree, raising :class:`TemplateUnreadable` if absent."""

    def _gitignore(self, root: Traversable) -> GitIgnoreSpec | None:
        """Return the patterns of the template's top-level ``.gitignore``, if any."""

        candidate = root.joinpath(".gitignore")
        try:
            if not candidate.is_file():
                return None
            lines = candidate.read_text(encoding="utf-8").splitlines()
        except (OSError, UnicodeDecodeError) as exc:
            raise TemplateUnreadable(self.location / ".gitignore", exc) from exc
        return GitIgnoreSpec.from_lines(lines)

    def _listing(self) -> list[tuple[tuple[str, ...], Traversable]]:
        root = self._root()
        ignored = self._gitignore(root)
        found: list[tuple[tuple[str, ...], Traversable]] = []
        pending: list[tuple[tuple[str, ...], Traversable]] = [((), root)]
        try:
            while pending:
                prefix, directory = pending.pop()
                for child in directory.iterdir():
                    if _is_ignored(child.name):
                        continue
                    segments = (*prefix, child.name)
                    is_dir = child.is_dir()
                    # Directory patterns such as ``target/`` only match with the trailing slash.
                    relative = "/".join(segments) + ("/" if is_dir else "")
                    if ignored is not None and ignored.match_file(relative):
                        continue
                    if is_dir:
                        found.append((segments, child))
                        pending.append((segments, child))
                    elif child.is_file():
                        found.append((segments, child))
        except OSError as exc:
            raise TemplateUnreadable(self.location, exc) from exc

        found.sort(key=lambda item: item[0])
        return found

    def entries(self) -> Iterator[TemplateEntry]:
        listing = self._listing()
        LOGGER.debug("enumerated %d template entries under %s", len(listing), self.location)
        for segments, node in listing:
            location = self.location.joinpath(*segments)
            try:
                if node.is_dir():
                    entry = TemplateEntry(relative_path=segments, kind=EntryKind.DIRECTORY)
                else:
                    entry = TemplateEntry(
                        relative_path=segments,
                        kind=EntryKind.FILE,
                        content=node.read_bytes(),
                        executable=self._is_executable(node),
                    )
            except (OSError, ValidationError) as exc:
                raise TemplateUnreadable(location, exc) from exc
            yield entry

    def _is_executable(self, node: Traversable) -> bool:
        return False


class DirectoryTemplateSource(_TraversableSource):
    """Template stored as a plain directory on disk."""

    def __init__(self, root: Path | str) -> None:
        self._path = Path(root).expanduser()

    @property
    def location(self) -> Path:
        return self._path

    def _root(self) -> Traversable:
        if not self._path.is_dir():
            raise TemplateUnreadable(self._path, NotADirectoryError(f"{self._path} is not a directory"))
        return self._path

    def _is_executable(self, node: Traversable) -> bool:
        if not isinstance(node, Path):
            return False
        try:
            return bool(node.stat().st_mode & 0o111)
        except OSError as exc:
            raise TemplateUnreadable(node, exc) from exc


class PackageTemplateSource(_TraversableSource):
    """Template shipped as package data inside an importable package."""

    def __init__(self, package: str, name: str) -> None:
        self.package = package
        self.name = name

    @property
    def location(self) -> Path:
        return Path(self.package.replace(".", "/"), self.name)

    def _root(self) -> Traversable:
        try:
            root = resources.files(self.package).joinpath(self.name)
        except ModuleNotFoundError as exc:
            raise TemplateUnreadable(self.location, exc) from exc
        if not root.is_dir():
            raise TemplateUnreadable(self.location, FileNotFoundError(f"no template named {self.name!r}"))
        return root


class MemoryTemplateSource(TemplateSource):
    """Immutable in-memory template built from a ``{"a/b.txt": content}`` mapping.

    Keys use ``/`` as separator. A key ending in ``/`` declares an empty
    directory. Parent directories of every key are added automatically.
    """

    def __init__(self, files: Mapping[str, bytes | str], *, name: str = "<memory>") -> None:
        self._name = name
        entries: dict[tuple[str, ...], TemplateEntry] = {}
        for key, content in files.items():
            is_directory = key.endswith("/")
            segments = tuple(part for part in PurePosixPath(key).parts if part != "/")
            for depth in range(1, len(segments)):
                parent = segments[:depth]
                entries.setdefault(parent, TemplateEntry(relative_path=parent, kind=EntryKind.DIRECTORY))
            if is_directory:
                entries[segments] = TemplateEntry(relative_path=segments, kind=EntryKind.DIRECTORY)
                continue
            payload = content.encode("utf-8") if isinstance(content, str) else bytes(content)
            entries[segments] = TemplateEntry(relative_path=segments, kind=EntryKind.FILE, content=payload)
        self._entries = tuple(entries[key] for key in sorted(entries))

    @property
    def location(self) -> Path:
        return Path(self._name)

    def entries(self) -> Iterator[TemplateEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


def builtin_template() -> TemplateSource:
    """Return the template bundled with pmv."""

    return PackageTemplateSource(*BUILTIN_TEMPLATE)
