"""Materialise a template tree at a destination, all or nothing.

The tree is written into a hidden staging directory created next to the
destination and moved into place with a single rename once every entry has
been written. A failure at any point removes the staging directory, so the
destination is either absent (or still empty) or fully populated.
"""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Iterable
from uuid import uuid4

from .errors import ContentWriteFailed, DestinationConflict, InstantiationError, PathWriteFailed
from .naming import ProjectName
from .source import EntryKind, TemplateEntry
from .template import TemplateRenderer

__all__ = ["InstantiationResult", "Instantiator", "check_destination", "instantiate"]

LOGGER = logging.getLogger(__name__)

_FORBIDDEN_SEGMENT_CHARACTERS = frozenset("/\\\0")


@dataclass(frozen=True, slots=True)
class InstantiationResult:
    """Outcome of a successful instantiation.

    ``directories`` and ``files`` hold destination-relative POSIX paths in the
    order they were written.
    """

    destination: Path
    directories: tuple[str, ...]
    files: tuple[str, ...]


def check_destination(destination: Path) -> None:
    """Raise :class:`DestinationConflict` unless ``destination`` is absent or an empty directory."""

    if not os.path.lexists(destination):
        return
    if destination.is_dir() and not destination.is_symlink():
        try:
            with os.scandir(destination) as listing:
                if next(listing, None) is None:
                    return
        except OSError as exc:
            raise DestinationConflict(destination, exc) from exc
    raise DestinationConflict(destination)


class Instantiator:
    """Write rendered template entries below a destination directory.

    :meth:`_make_directory` and :meth:`_write_file` perform the actual
    filesystem writes and are the only methods that touch the staging tree.
    """

    def instantiate(
        self,
        entries: Iterable[TemplateEntry],
        name: ProjectName,
        destination: str | Path,
    ) -> InstantiationResult:
        """Render ``entries`` for ``name`` and move the result to ``destination``."""

        destination = Path(destination).expanduser().absolute()
        check_destination(destination)

        # Read the whole template before the first write, so an unreadable
        # template fails cleanly and the staging directory is never part of it.
        entries = tuple(entries)

        renderer = TemplateRenderer(name)
        parent = destination.parent
        created = [ancestor for ancestor in (parent, *parent.parents) if not ancestor.exists()]
        try:
            parent.mkdir(parents=True, exist_ok=True)
            staging = parent / f".{destination.name}.pmv-{uuid4().hex[:12]}"
            staging.mkdir()
        except OSError as exc:
            error = PathWriteFailed(destination, exc)
            error.leftover = self._remove_ancestors(created)
            raise error from exc
        LOGGER.debug("staging %s in %s", destination, staging)

        try:
            directories, files = self._populate(entries, renderer, staging, destination)
            self._publish(staging, destination)
        except InstantiationError as exc:
            exc.leftover = self._discard(staging) or self._remove_ancestors(created)
            raise
        except BaseException:
            if self._discard(staging) is None:
                self._remove_ancestors(created)
            raise

        LOGGER.debug("created %s (%d directories, %d files)", destination, len(directories), len(files))
        return InstantiationResult(destination=destination, directories=tuple(directories), files=tuple(files))

    def _populate(
        self,
        entries: Iterable[TemplateEntry],
        renderer: TemplateRenderer,
        staging: Path,
        destination: Path,
    ) -> tuple[list[str], list[str]]:
        directories: list[str] = []
        files: list[str] = []
        for entry in entries:
            segments = renderer.render_path(entry.relative_path)
            relative = PurePosixPath(*segments)
            reported = destination.joinpath(*segments)
            for segment in segments:
                if segment in {"", ".", ".."} or _FORBIDDEN_SEGMENT_CHARACTERS.intersection(segment):
                    raise PathWriteFailed(reported, ValueError(f"invalid rendered path segment {segment!r}"))

            target = staging.joinpath(*segments)
            if entry.kind is EntryKind.DIRECTORY:
                try:
                    self._make_directory(target)
                except OSError as exc:
                    raise PathWriteFailed(reported, exc) from exc
                directories.append(str(relative))
                continue

            try:
                self._make_directory(target.parent)
            except OSError as exc:
                raise PathWriteFailed(reported.parent, exc) from exc
            try:
                self._write_file(target, renderer.render_bytes(entry.content), executable=entry.executable)
            except OSError as exc:
                raise ContentWriteFailed(reported, exc) from exc
            LOGGER.debug("wrote %s", relative)
            files.append(str(relative))
        return directories, files

    def _make_directory(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)

    def _write_file(self, path: Path, content: bytes, *, executable: bool = False) -> None:
        # Exclusive create: two entries rendering to the same path is an error.
        with path.open("xb") as handle:
            handle.write(content)
        if executable:
            path.chmod(path.stat().st_mode | 0o111)

    def _publish(self, staging: Path, destination: Path) -> None:
        check_destination(destination)
        removed_empty = False
        try:
            if destination.is_dir():
                destination.rmdir()
                removed_empty = True
            staging.rename(destination)
        except OSError as exc:
            if removed_empty and not destination.exists():
                destination.mkdir()
            raise PathWriteFailed(destination, exc) from exc
        LOGGER.debug("moved %s to %s", staging, destination)

    def _discard(self, staging: Path) -> Path | None:
        if not staging.exists():
            return None
        try:
            shutil.rmtree(staging)
        except OSError as exc:
            LOGGER.warning("could not remove staging directory %s: %s", staging, exc)
            return staging
        return None

    def _remove_ancestors(self, created: list[Path]) -> Path | None:
        """Remove the destination ancestors this run created, deepest first."""

        for ancestor in created:
            try:
                if ancestor.exists():
                    ancestor.rmdir()
            except OSError as exc:
                LOGGER.warning("could not remove directory %s: %s", ancestor, exc)
                return ancestor
        return None


def instantiate(
    entries: Iterable[TemplateEntry],
    name: ProjectName,
    destination: str | Path,
) -> InstantiationResult:
    """Materialise ``entries`` for ``name`` at ``destination``.

    Raises
    ------
    DestinationConflict
        ``destination`` exists and is not an empty directory. Nothing is written.
    PathWriteFailed, ContentWriteFailed
        A directory or file could not be written, or the finished tree could not
        be moved into place. The destination is left as it was.
    TemplateUnreadable
        The template could not be read while it was being walked.
    """

    return Instantiator().instantiate(entries, name, destination)
