"""
tests/test_validators.py
Unit tests for crouton_gen.validators.

Tests cover:
- Layer / collection name rules
- Field list, identifier and duplicate checks
- Unknown type and reserved name warnings
- Decimal and translation checks
- Hierarchy / sortable column conflicts
- Project config cross-references
"""

from __future__ import annotations

from crouton_gen.models import CollectionSpec, GenerationConfig, ProjectConfig
from crouton_gen.validators import (
    ValidationResult,
    validate_field_constraints,
    validate_field_names,
    validate_field_types,
    validate_full,
    validate_generation_config,
    validate_names,
    validate_project_config,
    validate_reserved_fields,
    validate_translations,
)


class TestValidationResult:

    def test_accumulates_levels(self) -> None:
        result = ValidationResult()
        result.add_error("E", "bad")
        result.add_warning("W", "meh")
        result.add_info("I", "fyi")
        assert not result.is_valid
        assert result.error_count == 1
        assert result.warning_count == 1
        assert result.codes == ["E", "W", "I"]
        assert len(result) == 3

    def test_merge_and_bool(self) -> None:
        ok = ValidationResult()
        assert ok
        other = ValidationResult()
        other.add_error("E", "bad")
        ok.merge(other)
        assert not ok

    def test_format_report(self) -> None:
        result = ValidationResult()
        result.add_error("NO_FIELDS", "nothing here", {"collection": "x"})
        result.add_info("SELF_REFERENCE", "hidden")
        report = result.format_report()
        assert "[NO_FIELDS] nothing here" in report
        assert "collection: x" in report
        assert "SELF_REFERENCE" not in report
        assert "SELF_REFERENCE" in result.format_report(include_info=True)


class TestNames:

    def test_valid_names(self, products: CollectionSpec) -> None:
        assert validate_names(products).is_valid

    def test_kebab_layer_is_valid(self, collection_factory) -> None:
        assert validate_names(collection_factory({"a": "string"}, layer="knowledge-base")).is_valid

    def test_invalid_layer(self, collection_factory) -> None:
        result = validate_names(collection_factory({"a": "string"}, layer="Shop Layer"))
        assert "INVALID_LAYER_NAME" in result.codes

    def test_invalid_collection(self, collection_factory) -> None:
        result = validate_names(collection_factory({"a": "string"}, collection="1products"))
        assert "INVALID_COLLECTION_NAME" in result.codes


class TestFields:

    def test_no_fields(self, collection_factory) -> None:
        result = validate_field_names(collection_factory({}))
        assert result.codes == ["NO_FIELDS"]

    def test_invalid_identifier(self, collection_factory) -> None:
        result = validate_field_names(collection_factory({"my-field": "string"}))
        assert "INVALID_FIELD_NAME" in result.codes

    def test_duplicates(self, collection_factory) -> None:
        collection = collection_factory([
            {"name": "title", "type": "string"},
            {"name": "title", "type": "text"},
        ])
        assert "DUPLICATE_FIELD_NAME" in validate_field_names(collection).codes

    def test_unknown_type_warns(self, collection_factory) -> None:
        collection = collection_factory({"ref": {"type": "uuid"}})
        assert collection.fields[0].type == "string"
        result = validate_field_types(collection)
        assert result.is_valid
        assert result.codes == ["UNKNOWN_FIELD_TYPE"]

    def test_reserved_warns(self, collection_factory) -> None:
        collection = collection_factory({"owner": "string", "createdAt": "date"})
        result = validate_reserved_fields(collection, GenerationConfig())
        assert result.is_valid
        assert result.codes == ["RESERVED_FIELD_NAME", "RESERVED_FIELD_NAME"]
        assert validate_reserved_fields(
            collection_factory({"createdAt": "date"}), GenerationConfig(use_metadata=False)
        ).codes == []

    def test_decimal_scale(self, collection_factory) -> None:
        collection = collection_factory(
            {"price": {"type": "decimal", "meta": {"precision": 2, "scale": 4}}}
        )
        assert "INVALID_DECIMAL_SCALE" in validate_field_constraints(collection).codes

    def test_self_reference_is_info(self, collection_factory) -> None:
        collection = collection_factory({"parent": {"type": "string", "refTarget": "products"}})
        result = validate_field_constraints(collection)
        assert result.is_valid
        assert result.codes == ["SELF_REFERENCE"]


class TestTranslations:

    def test_unknown_translatable(self, products: CollectionSpec) -> None:
        result = validate_translations(products, GenerationConfig(translatable_fields=["subtitle"]))
        assert "UNKNOWN_TRANSLATABLE_FIELD" in result.codes
        assert not result.is_valid

    def test_non_text_translatable_warns(self, products: CollectionSpec) -> None:
        result = validate_translations(products, GenerationConfig(translatable_fields=["price"]))
        assert result.is_valid
        assert result.codes == ["NON_TEXT_TRANSLATABLE"]


class TestGenerationConfig:

    def test_hierarchy_duplicate_roles(self) -> None:
        config = GenerationConfig(hierarchy={"enabled": True, "depthField": "order"})
        assert "HIERARCHY_FIELD_CONFLICT" in validate_generation_config(config).codes

    def test_hierarchy_collides_with_fixed_column(self) -> None:
        config = GenerationConfig(hierarchy={"enabled": True, "pathField": "owner"})
        assert "HIERARCHY_FIELD_CONFLICT" in validate_generation_config(config).codes

    def test_sortable_conflict(self) -> None:
        config = GenerationConfig(sortable={"enabled": True, "orderField": "createdAt"})
        assert validate_generation_config(config).codes == ["SORTABLE_FIELD_CONFLICT"]

    def test_defaults_are_clean(self) -> None:
        assert validate_generation_config(GenerationConfig(hierarchy=True)).codes == []


class TestProjectConfig:

    def test_empty_project(self) -> None:
        result = validate_project_config(ProjectConfig())
        assert result.codes == ["NO_COLLECTIONS", "NO_TARGETS"]

    def test_cross_references(self) -> None:
        project = ProjectConfig.model_validate({
            "collections": [
                {"name": "products", "fieldsFile": "p.json"},
                {"name": "products", "fieldsFile": "p2.json"},
            ],
            "targets": [
                {"layer": "shop", "collections": ["products", "orders"]},
                {"layer": "Bad Layer", "collections": []},
            ],
        })
        codes = validate_project_config(project).codes
        assert "DUPLICATE_COLLECTION" in codes
        assert "UNKNOWN_TARGET_COLLECTION" in codes
        assert "INVALID_LAYER_NAME" in codes
        assert "EMPTY_TARGET" in codes


class TestValidateFull:

    def test_valid_collection(self, products: CollectionSpec, sqlite_config: GenerationConfig) -> None:
        result = validate_full(products, sqlite_config)
        assert result.is_valid, result.format_report()
        assert result.errors == []

    def test_collects_from_every_check(self, collection_factory) -> None:
        collection = collection_factory({"id": "string", "bad-name": "wat"}, layer="Bad!")
        result = validate_full(collection, GenerationConfig(translatable_fields=["nope"]))
        codes = set(result.codes)
        assert {
            "INVALID_LAYER_NAME",
            "INVALID_FIELD_NAME",
            "UNKNOWN_FIELD_TYPE",
            "RESERVED_FIELD_NAME",
            "UNKNOWN_TRANSLATABLE_FIELD",
        } <= codes
