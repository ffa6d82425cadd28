"""
tests/conftest.py
Shared fixtures for the crouton_gen test suite.

No external mocking libraries are used; real file I/O is performed
inside temporary directories managed by pytest's tmp_path fixtures.
"""

from __future__ import annotations

import copy
import json
import logging
import pathlib
from typing import Any, Dict

import pytest
import yaml

from crouton_gen.models import CollectionSpec, FieldDefinition, GenerationConfig
from crouton_gen.generator import parse_fields


# ---------------------------------------------------------------------------
# Logging isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """Undo the CLI's handler/propagation setup so caplog sees every record."""
    yield
    root = logging.getLogger("crouton_gen")
    root.handlers.clear()
    root.setLevel(logging.NOTSET)
    root.propagate = True


# ---------------------------------------------------------------------------
# Raw field data
# ---------------------------------------------------------------------------

_PRODUCT_FIELDS: Dict[str, Any] = {
    "title": {"type": "string", "meta": {"required": True}},
    "description": {"type": "text"},
    "price": {"type": "decimal", "meta": {"precision": 10, "scale": 2}},
    "inStock": {"type": "boolean"},
    "publishedAt": {"type": "date"},
    "category": {"type": "string", "refTarget": "categories"},
}


@pytest.fixture()
def product_fields_dict() -> Dict[str, Any]:
    """Field mapping for a shop/products collection; safe to mutate."""
    return copy.deepcopy(_PRODUCT_FIELDS)


@pytest.fixture()
def fields_json_path(product_fields_dict: Dict[str, Any], tmp_path: pathlib.Path) -> pathlib.Path:
    path = tmp_path / "products.json"
    path.write_text(json.dumps(product_fields_dict, indent=2), encoding="utf-8")
    return path


@pytest.fixture()
def fields_yaml_path(product_fields_dict: Dict[str, Any], tmp_path: pathlib.Path) -> pathlib.Path:
    path = tmp_path / "products.yaml"
    with open(path, "w", encoding="utf-8") as fh:
        yaml.safe_dump(product_fields_dict, fh, sort_keys=False)
    return path


# ---------------------------------------------------------------------------
# Model fixtures
# ---------------------------------------------------------------------------


def make_collection(
    fields: Dict[str, Any], layer: str = "shop", collection: str = "products"
) -> CollectionSpec:
    return CollectionSpec(layer=layer, collection=collection, fields=parse_fields(fields))


@pytest.fixture()
def collection_factory():
    """Build a ``CollectionSpec`` from a raw field mapping."""
    return make_collection


@pytest.fixture()
def products(product_fields_dict: Dict[str, Any]) -> CollectionSpec:
    return make_collection(product_fields_dict)


@pytest.fixture()
def sqlite_config() -> GenerationConfig:
    return GenerationConfig(dialect="sqlite")


@pytest.fixture()
def pg_config() -> GenerationConfig:
    return GenerationConfig(dialect="pg")


@pytest.fixture()
def title_field() -> FieldDefinition:
    return FieldDefinition(name="title", type="string", meta={"required": True})


# ---------------------------------------------------------------------------
# Project config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def project_dir(product_fields_dict: Dict[str, Any], tmp_path: pathlib.Path) -> pathlib.Path:
    """A project with a YAML config and two fields files under schemas/."""
    schemas = tmp_path / "schemas"
    schemas.mkdir()
    (schemas / "products.json").write_text(json.dumps(product_fields_dict), encoding="utf-8")
    (schemas / "categories.yaml").write_text(
        yaml.safe_dump({"name": {"type": "string", "meta": {"required": True}}}),
        encoding="utf-8",
    )
    config = {
        "dialect": "sqlite",
        "collections": [
            {"name": "products", "fieldsFile": "./schemas/products.json", "sortable": True},
            {"name": "categories", "fieldsFile": "./schemas/categories.yaml", "hierarchy": True},
        ],
        "targets": [{"layer": "shop", "collections": ["products", "categories"]}],
        "translations": {"collections": {"products": ["title"]}},
        "seed": {"defaultCount": 12, "defaultTeamId": "team-1"},
    }
    (tmp_path / "crouton.config.yaml").write_text(yaml.safe_dump(config), encoding="utf-8")
    return tmp_path
