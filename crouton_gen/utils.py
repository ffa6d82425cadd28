# File: crouton_gen/utils.py
"""
Crouton Gen - Naming Utilities & File Helpers
===============================================
String transformations shared by every generator, plus the small file-I/O,
checksum and timing helpers used by the exporter and orchestrator.

Naming rules:
- ``pascal`` upper-cases the first letter of every ``-``/``_``/space
  separated segment and drops the separator.  Existing capitals are kept,
  so ``MyCollection`` stays ``MyCollection``.
- ``to_case`` derives singular/plural with a plain suffix rule: a trailing
  ``s`` means "already plural", otherwise ``s`` is appended.  There is no
  irregular-plural dictionary (``category`` becomes ``categorys``).

All pure string functions are decorated with ``@lru_cache(maxsize=None)``;
the same collection and field names are converted many times per run.
"""

from __future__ import annotations

import functools
import hashlib
import logging
import os
import re
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crouton_gen.utils")

# ---------------------------------------------------------------------------
# Pre-compiled regex patterns
# ---------------------------------------------------------------------------

_PASCAL_RE: re.Pattern[str] = re.compile(r"(^|[_\-\s]+)([a-z])")
_UPPER_RE: re.Pattern[str] = re.compile(r"([A-Z])")
_KEBAB_RE1: re.Pattern[str] = re.compile(r"([a-z])([A-Z])")
_KEBAB_RE2: re.Pattern[str] = re.compile(r"([A-Z])([A-Z][a-z])")
_LAYER_SPLIT_RE: re.Pattern[str] = re.compile(r"[-_]")
_IDENTIFIER_RE: re.Pattern[str] = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


# ---------------------------------------------------------------------------
# Case forms
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CaseForms:
    """Every derived spelling of a collection or layer name."""

    singular: str = ""
    plural: str = ""
    pascal_case: str = ""
    pascal_case_plural: str = ""
    camel_case: str = ""
    camel_case_plural: str = ""
    upper_case: str = ""
    kebab_case: str = ""

    def as_dict(self) -> Dict[str, str]:
        """Return the forms keyed the way generated code refers to them."""
        return {
            "singular": self.singular,
            "plural": self.plural,
            "pascalCase": self.pascal_case,
            "pascalCasePlural": self.pascal_case_plural,
            "camelCase": self.camel_case,
            "camelCasePlural": self.camel_case_plural,
            "upperCase": self.upper_case,
            "kebabCase": self.kebab_case,
        }


# ---------------------------------------------------------------------------
# Cached string transformation functions
# ---------------------------------------------------------------------------


@functools.lru_cache(maxsize=None)
def pascal(name: str) -> str:
    """
    Convert kebab, snake or space separated input to PascalCase.

    Examples:
        >>> pascal("my-long-collection-name")
        'MyLongCollectionName'
        >>> pascal("user_profile")
        'UserProfile'
        >>> pascal("MyCollection")
        'MyCollection'
    """
    if not name:
        return ""
    return _PASCAL_RE.sub(lambda m: m.group(2).upper(), name)


@functools.lru_cache(maxsize=None)
def to_snake_case(name: str) -> str:
    """
    Convert camelCase / PascalCase / kebab-case to snake_case.

    Examples:
        >>> to_snake_case("shopProducts")
        'shop_products'
        >>> to_snake_case("ShopProducts")
        'shop_products'
    """
    if not name:
        return ""
    s: str = _UPPER_RE.sub(r"_\1", name)
    if s.startswith("_"):
        s = s[1:]
    return s.replace("-", "_").lower()


@functools.lru_cache(maxsize=None)
def to_kebab_case(name: str) -> str:
    """
    Convert camelCase or PascalCase to kebab-case.

    Examples:
        >>> to_kebab_case("emailTemplates")
        'email-templates'
        >>> to_kebab_case("HTMLParser")
        'html-parser'
    """
    if not name:
        return ""
    s: str = _KEBAB_RE1.sub(r"\1-\2", name)
    s = _KEBAB_RE2.sub(r"\1-\2", s)
    return s.lower()


@functools.lru_cache(maxsize=None)
def to_camel_case(name: str) -> str:
    """
    Join ``-``/``_`` separated parts into camelCase, keeping the first part.

    Used for layer names so they form valid identifiers:

        >>> to_camel_case("knowledge-base")
        'knowledgeBase'
    """
    if not name:
        return ""
    parts: List[str] = _LAYER_SPLIT_RE.split(name)
    head: str = parts[0]
    tail: str = "".join(p[:1].upper() + p[1:] for p in parts[1:])
    return head + tail


def _lower_first(value: str) -> str:
    return value[:1].lower() + value[1:]


@functools.lru_cache(maxsize=None)
def to_case(name: str) -> CaseForms:
    """
    Compute all case forms of *name* once.

    A trailing ``s`` marks the input as plural; the singular is the input
    without it.  Otherwise the plural is the input plus ``s``.  A single
    character is an ordinary word (``"a"`` gives plural ``"as"``).

        >>> to_case("product").pascal_case_plural
        'Products'
        >>> to_case("").plural
        ''
    """
    if not name:
        return CaseForms()

    singular: str = name[:-1] if name.endswith("s") and len(name) > 1 else name
    plural: str = name if name.endswith("s") else name + "s"

    singular_pascal: str = pascal(singular)
    plural_pascal: str = pascal(plural)

    return CaseForms(
        singular=singular.lower(),
        plural=plural.lower(),
        pascal_case=singular_pascal,
        pascal_case_plural=plural_pascal,
        camel_case=_lower_first(singular_pascal),
        camel_case_plural=_lower_first(plural_pascal),
        upper_case=singular.upper(),
        kebab_case=singular.lower(),
    )


@functools.lru_cache(maxsize=None)
def to_label(name: str) -> str:
    """Capitalise the first character (``price`` becomes ``Price``)."""
    return name[:1].upper() + name[1:]


def is_identifier(name: str) -> bool:
    """True when *name* is a valid JavaScript/TypeScript identifier."""
    return bool(name) and _IDENTIFIER_RE.match(name) is not None


# ---------------------------------------------------------------------------
# Source text helpers
# ---------------------------------------------------------------------------


def ts_string(value: str) -> str:
    """Render *value* as a single-quoted TypeScript string literal."""
    escaped: str = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def boolean_literal(value: Any) -> str:
    """TypeScript literal for a boolean default; anything but true is ``false``."""
    if isinstance(value, str):
        return "true" if value.strip().lower() == "true" else "false"
    return "true" if value is True else "false"


def indent_lines(lines: Sequence[str], level: int = 1, size: int = 2) -> List[str]:
    """Indent every non-empty line by *level* x *size* spaces."""
    prefix: str = " " * (level * size)
    return [f"{prefix}{line}" if line else line for line in lines]


def join_entries(entries: Sequence[str], level: int = 1, size: int = 2) -> List[str]:
    """
    Indent object/array entries and put a comma after all but the last.

    Multi-line entries are kept intact; only their final line gets the comma.
    """
    out: List[str] = []
    for i, entry in enumerate(entries):
        entry_lines: List[str] = entry.split("\n")
        if i < len(entries) - 1:
            entry_lines[-1] = entry_lines[-1] + ","
        out.extend(indent_lines(entry_lines, level, size))
    return out


# ---------------------------------------------------------------------------
# File I/O helpers
# ---------------------------------------------------------------------------


def ensure_directory(path: Path) -> None:
    """Create directory (and parents) if it doesn't exist."""
    path.mkdir(parents=True, exist_ok=True)
    logger.debug("Ensured directory exists: %s", path)


def write_file(path: Path, content: str, atomic: bool = True) -> int:
    """
    Write *content* to *path*.

    When *atomic* is True the text goes to a temporary file in the same
    directory first and is then renamed over the target.

    Returns the number of bytes written.
    """
    ensure_directory(path.parent)

    encoded: bytes = content.encode("utf-8")

    if atomic:
        fd, tmp_path = tempfile.mkstemp(
            dir=str(path.parent),
            prefix=f".{path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(encoded)
            os.replace(tmp_path, str(path))
        except OSError:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
    else:
        path.write_bytes(encoded)

    logger.debug("Wrote %d bytes to %s", len(encoded), path)
    return len(encoded)


def read_file(path: Path) -> str:
    """Read a file and return its content as a string."""
    return path.read_text(encoding="utf-8")


# ---------------------------------------------------------------------------
# Checksum & metrics
# ---------------------------------------------------------------------------


def sha256_hex(content: str) -> str:
    """Return SHA-256 hex digest of a string."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def count_lines(content: str) -> int:
    """Count the number of lines in a string."""
    if not content:
        return 0
    return content.count("\n") + (1 if not content.endswith("\n") else 0)


# ---------------------------------------------------------------------------
# Timer context manager
# ---------------------------------------------------------------------------


class Timer:
    """
    Context-manager timer for the orchestrator's pipeline steps.

    Usage:
        with Timer("schema") as t:
            ...
        print(t.elapsed)
    """

    __slots__ = ("label", "start_time", "end_time", "elapsed")

    def __init__(self, label: str = "operation") -> None:
        self.label: str = label
        self.start_time: float = 0.0
        self.end_time: float = 0.0
        self.elapsed: float = 0.0

    def __enter__(self) -> "Timer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[object],
    ) -> None:
        self.end_time = time.perf_counter()
        self.elapsed = self.end_time - self.start_time
        logger.debug("Timer [%s]: %.4f seconds", self.label, self.elapsed)

    def __repr__(self) -> str:
        return f"<Timer {self.label}: {self.elapsed:.4f}s>"


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "CaseForms",
    "Timer",
    "boolean_literal",
    "count_lines",
    "ensure_directory",
    "indent_lines",
    "is_identifier",
    "join_entries",
    "pascal",
    "read_file",
    "sha256_hex",
    "to_camel_case",
    "to_case",
    "to_kebab_case",
    "to_label",
    "to_snake_case",
    "ts_string",
    "write_file",
]

logger.debug("crouton_gen.utils loaded — %d public symbols.", len(__all__))
