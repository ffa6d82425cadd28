# File: crouton_gen/paths.py
"""
Crouton Gen - Import Path Resolver
====================================
Generated files import each other either through the ``#layers/...`` alias
namespace (one virtual layer per ``{layerName}-{collectionName}``) or through
hard-coded relative paths that match the on-disk layout.

Alias patterns contain ``{var}`` placeholders.  Fallback paths contain none
and are returned as-is, whatever variables the caller passes.

Failure handling is deliberately soft:
- a missing variable logs a warning and leaves ``{var}`` in the result;
- an unknown key with no fallback logs an error and returns ``""``.
Callers check for an empty result before emitting an import.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crouton_gen.paths")

_PLACEHOLDER_RE: re.Pattern[str] = re.compile(r"\{(\w+)\}")

_LAYER_ROOT: str = "#layers/{layerName}-{collectionName}"

# Paths are relative to the generated file that does the importing:
#   api handlers  -> server/api/teams/[id]/{layer}-{plural}/
#   queries       -> server/database/
#   composables   -> app/composables/
DEFAULT_PATTERNS: Dict[str, str] = {
    "fromApiToQueries": f"{_LAYER_ROOT}/server/database/queries",
    "fromApiToSchema": f"{_LAYER_ROOT}/server/database/schema",
    "fromApiToTypes": f"{_LAYER_ROOT}/types",
    "fromComponentToTypes": f"{_LAYER_ROOT}/types",
    "fromComponentToComposables": f"{_LAYER_ROOT}/app/composables/{{composableName}}",
    "fromTypesToComposable": f"{_LAYER_ROOT}/app/composables/{{composableName}}",
    "fromQueriesToTypes": f"{_LAYER_ROOT}/types",
}

DEFAULT_FALLBACKS: Dict[str, str] = {
    "fromApiToQueries": "../../../../database/queries",
    "fromApiToSchema": "../../../../database/schema",
    "fromApiToTypes": "../../../../../types",
    "fromComponentToTypes": "../../types",
    "fromQueriesToTypes": "../../types",
}


@dataclass(slots=True)
class PathConfig:
    """Alias patterns plus relative fallbacks, keyed by import direction."""

    patterns: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_PATTERNS))
    fallback: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_FALLBACKS))

    @staticmethod
    def resolve(pattern: str, variables: Optional[Mapping[str, str]] = None) -> str:
        """
        Substitute every ``{name}`` in *pattern*.

        A name used several times is replaced everywhere.  A name missing from
        *variables* is left untouched and reported once as a warning.
        """
        values: Mapping[str, str] = variables or {}
        warned: List[str] = []

        def _sub(match: re.Match[str]) -> str:
            name: str = match.group(1)
            if name in values:
                return str(values[name])
            if name not in warned:
                warned.append(name)
                logger.warning("Variable %s not provided for path pattern", name)
            return match.group(0)

        return _PLACEHOLDER_RE.sub(_sub, pattern)

    def get_import_path(
        self,
        key: str,
        variables: Optional[Mapping[str, str]] = None,
        use_aliases: bool = True,
    ) -> str:
        """
        Return the import path for *key*.

        With ``use_aliases`` the alias pattern is resolved; otherwise (or when
        the key has no alias pattern) the relative fallback is returned without
        looking at *variables*.
        """
        if use_aliases and key in self.patterns:
            return self.resolve(self.patterns[key], variables)
        if key in self.fallback:
            return self.fallback[key]
        logger.error("Unknown path key: %s", key)
        return ""

    @staticmethod
    def get_layer_name(layer: str, collection: str) -> str:
        """Virtual layer name, ``{layer}-{collection}`` with no case change."""
        return f"{layer}-{collection}"


PATH_CONFIG: PathConfig = PathConfig()


def get_import_path(
    key: str,
    variables: Optional[Mapping[str, str]] = None,
    use_aliases: bool = True,
) -> str:
    """Resolve *key* against the module-wide ``PATH_CONFIG``."""
    return PATH_CONFIG.get_import_path(key, variables, use_aliases)


def get_layer_name(layer: str, collection: str) -> str:
    return PATH_CONFIG.get_layer_name(layer, collection)


def nested(path: str, depth: int = 1) -> str:
    """Adjust a relative path for a file *depth* directories further down."""
    if not path or not path.startswith("."):
        return path
    return "../" * depth + path


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "DEFAULT_FALLBACKS",
    "DEFAULT_PATTERNS",
    "PATH_CONFIG",
    "PathConfig",
    "get_import_path",
    "get_layer_name",
    "nested",
]
