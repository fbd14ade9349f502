"""Literal placeholder substitution for template paths and file contents."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Mapping

from .naming import ProjectName

__all__ = [
    "PLACEHOLDER_TOKENS",
    "PROJECT_IDENT",
    "PROJECT_NAME",
    "TemplateRenderer",
]


PROJECT_NAME = "__PROJECT_NAME__"
PROJECT_IDENT = "__PROJECT_IDENT__"

_TOKEN_VALUES: Mapping[str, Callable[[ProjectName], str]] = MappingProxyType(
    {
        PROJECT_NAME: str,
        PROJECT_IDENT: lambda name: name.ident,
    }
)

PLACEHOLDER_TOKENS: tuple[str, ...] = tuple(_TOKEN_VALUES)


def _alternation(tokens: tuple[str, ...]) -> str:
    # Longest first so a token that prefixes another can never shadow it.
    return "|".join(re.escape(token) for token in sorted(tokens, key=len, reverse=True))


_TEXT_PATTERN = re.compile(_alternation(PLACEHOLDER_TOKENS))
_BYTES_PATTERN = re.compile(_alternation(PLACEHOLDER_TOKENS).encode("ascii"))


@dataclass(frozen=True, slots=True)
class TemplateRenderer:
    """Replace every placeholder token with the value derived from ``name``.

    Tokens are matched as exact literals in a single left-to-right pass, so
    substituted text is never scanned again.
    """

    name: ProjectName
    values: Mapping[str, str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        values = {token: derive(self.name) for token, derive in _TOKEN_VALUES.items()}
        object.__setattr__(self, "values", MappingProxyType(values))

    def render_segment(self, segment: str) -> str:
        """Render a single path segment."""

        return _TEXT_PATTERN.sub(lambda match: self.values[match.group(0)], segment)

    def render_path(self, segments: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(self.render_segment(segment) for segment in segments)

    def render_bytes(self, content: bytes) -> bytes:
        """Render file contents byte-for-byte; bytes outside tokens are untouched."""

        encoded = {token.encode("ascii"): value.encode("utf-8") for token, value in self.values.items()}
        return _BYTES_PATTERN.sub(lambda match: encoded[match.group(0)], content)
