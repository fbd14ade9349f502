"""Project name validation.

A project name ends up as the ``package.name`` key of the generated
``Cargo.toml``, as a path segment of the generated tree and, by default, as the
name of the destination directory. :func:`validate` therefore mirrors Cargo's
package name grammar (restricted to lowercase) and refuses anything that could
escape the destination.
"""

from __future__ import annotations

import re
import unicodedata

from .errors import NameErrorKind, ProjectNameError

__all__ = ["MAX_NAME_LENGTH", "RESERVED_WORDS", "ProjectName", "slugify", "suggest_name", "validate"]


MAX_NAME_LENGTH = 64

_NAME_PATTERN = re.compile(r"[a-z][a-z0-9_-]*")
_FORBIDDEN_CHARACTERS = frozenset("/\\\0")
_SEPARATORS = re.compile(r"[\s\-]+")

# Compared against the crate identifier form of the name (``-`` mapped to ``_``).
_RUST_KEYWORDS = frozenset(
    """
    as async await break const continue crate dyn else enum extern false fn for
    if impl in let loop match mod move mut pub ref return self static struct
    super trait true type unsafe use where while abstract become box do final
    gen macro override priv try typeof unsized virtual yield
    """.split()
)
_CARGO_RESERVED = frozenset({"build", "deps", "examples", "incremental", "test"})
_SYSROOT_CRATES = frozenset({"alloc", "core", "proc_macro", "std", "test"})
_WINDOWS_DEVICES = frozenset(
    {"con", "prn", "aux", "nul"}
    | {f"com{index}" for index in range(1, 10)}
    | {f"lpt{index}" for index in range(1, 10)}
)

RESERVED_WORDS = _RUST_KEYWORDS | _CARGO_RESERVED | _SYSROOT_CRATES | _WINDOWS_DEVICES


class ProjectName(str):
    """A project name that passed :func:`validate`.

    Instances behave exactly like :class:`str`; only :func:`validate` should
    create them.
    """

    __slots__ = ()

    @property
    def ident(self) -> str:
        """The name as it is spelled in Rust source (``-`` replaced by ``_``)."""

        return self.replace("-", "_")


def validate(raw: str) -> ProjectName:
    """Return ``raw`` as a :class:`ProjectName` or raise :class:`ProjectNameError`.

    Surrounding whitespace is ignored. The check is pure and may be repeated on
    its own output with the same result.
    """

    name = raw.strip()
    if not name:
        raise ProjectNameError(NameErrorKind.EMPTY_NAME, raw, "project name must not be empty")

    if _FORBIDDEN_CHARACTERS.intersection(name) or name in {".", ".."}:
        raise ProjectNameError(
            NameErrorKind.INVALID_CHARACTERS,
            raw,
            f"project name {name!r} must not contain path separators",
        )

    if not _NAME_PATTERN.fullmatch(name):
        if name[0].isdigit():
            message = f"project name {name!r} must not start with a digit"
        else:
            message = (
                f"project name {name!r} must start with a lowercase letter and contain only "
                "lowercase letters, digits, '-' and '_'"
            )
        raise ProjectNameError(NameErrorKind.INVALID_CHARACTERS, raw, message)

    if len(name) > MAX_NAME_LENGTH:
        raise ProjectNameError(
            NameErrorKind.INVALID_CHARACTERS,
            raw,
            f"project name must be at most {MAX_NAME_LENGTH} characters long",
        )

    if name in RESERVED_WORDS or name.replace("-", "_") in RESERVED_WORDS:
        raise ProjectNameError(
            NameErrorKind.RESERVED_WORD,
            raw,
            f"project name {name!r} is a reserved word",
        )

    return ProjectName(name)


def slugify(value: str, *, separator: str = "-") -> str:
    """Create a lowercase ASCII slug from ``value``."""

    text = unicodedata.normalize("NFKD", str(value))
    text = text.encode("ascii", "ignore").decode("ascii")
    text = re.sub(r"[^\w\- ]", "", text).strip().lower()
    if not text:
        return ""

    collapsed = _SEPARATORS.sub(separator, text)
    collapsed = re.sub(rf"{re.escape(separator)}+", separator, collapsed)
    return collapsed.strip(separator)


def suggest_name(raw: str) -> str | None:
    """Propose a valid project name close to ``raw``, or ``None`` if there is none."""

    candidate = slugify(raw).lstrip("0123456789_-")[:MAX_NAME_LENGTH].rstrip("_-")
    if not candidate:
        return None

    try:
        return str(validate(candidate))
    except ProjectNameError as exc:
        if exc.kind is not NameErrorKind.RESERVED_WORD:
            return None

    # Reserved words are short, so the suffix never hits the length limit.
    return str(validate(f"{candidate}-rs"))
