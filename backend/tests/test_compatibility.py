"""Unit tests for the storage type compatibility table."""

from __future__ import annotations

import unittest

from schema_mapper.mapping.compatibility import (
    STORAGE_TYPE_COMPATIBILITY,
    compatible_types,
    explain,
    is_compatible,
    is_optimal,
    normalize_storage_type,
    resolve_value_mapping,
    storage_types_for,
)
from schema_mapper.mapping.types import SEMANTIC_TYPE_VALUES, ColumnDescriptor, ColumnSource, SchemaTarget


class CompatibilityTableTests(unittest.TestCase):
    def test_compatible_types_normalizes_case_and_whitespace(self) -> None:
        self.assertEqual(normalize_storage_type("  varchar "), "VARCHAR")
        self.assertEqual(
            compatible_types(" varchar"),
            ("string", "url", "external-id", "monolingualtext"),
        )
        self.assertEqual(compatible_types("Integer"), ("quantity",))

    def test_table_only_yields_known_semantic_types(self) -> None:
        for storage_type in STORAGE_TYPE_COMPATIBILITY:
            with self.subTest(storage_type=storage_type):
                self.assertTrue(set(compatible_types(storage_type)) <= set(SEMANTIC_TYPE_VALUES))

    def test_text_columns_share_the_full_text_family(self) -> None:
        self.assertEqual(compatible_types("TEXT"), compatible_types("VARCHAR"))
        self.assertTrue(is_compatible("TEXT", {"url"}))
        self.assertTrue(is_compatible("text", {"external-id"}))

    def test_unknown_and_boolean_storage_types_feed_nothing(self) -> None:
        self.assertEqual(compatible_types("GEOMETRY"), ())
        self.assertEqual(compatible_types("BOOLEAN"), ())
        self.assertEqual(compatible_types(None), ())
        self.assertFalse(is_compatible("BOOLEAN", ["string"]))

    def test_is_compatible_requires_overlap_with_accepted_types(self) -> None:
        self.assertTrue(is_compatible("INTEGER", ["quantity"]))
        self.assertTrue(is_compatible("TEXT", {"url", "monolingualtext"}))
        self.assertFalse(is_compatible("INTEGER", ["string"]))
        self.assertFalse(is_compatible("VARCHAR", []))

    def test_explain_lists_sorted_target_types(self) -> None:
        self.assertEqual(
            explain("INTEGER", {"url", "string"}),
            "Column type 'INTEGER' is not compatible with target types: string, url",
        )
        self.assertEqual(explain("INTEGER", []), "Target does not accept any data type")
        self.assertIn("cannot be mapped to any Wikibase data type", explain("BOOLEAN", ["string"]))

    def test_optimal_types_are_the_first_two_entries(self) -> None:
        self.assertTrue(is_optimal("VARCHAR", "string"))
        self.assertTrue(is_optimal("VARCHAR", "url"))
        self.assertFalse(is_optimal("VARCHAR", "external-id"))
        self.assertTrue(is_optimal("DATE", "time"))

    def test_storage_types_for_reverses_the_table(self) -> None:
        self.assertEqual(storage_types_for("time"), ["DATE", "DATETIME", "TIMESTAMP"])
        self.assertEqual(storage_types_for("globe-coordinate"), [])

    def test_resolve_value_mapping_picks_most_natural_accepted_type(self) -> None:
        column = ColumnDescriptor(name="homepage", storage_type="VARCHAR")
        target = SchemaTarget(
            kind="statement",
            path="item.statements[0].value",
            accepted_types=frozenset({"monolingualtext", "url"}),
            property_id="P856",
        )

        mapping = resolve_value_mapping(column, target)

        self.assertEqual(mapping.mapping_type, "column")
        self.assertEqual(mapping.resolved_type, "url")
        self.assertEqual(mapping.source, ColumnSource(column_name="homepage", storage_type="VARCHAR"))
        self.assertEqual(mapping.column_name, "homepage")

    def test_resolve_value_mapping_rejects_incompatible_pair(self) -> None:
        column = ColumnDescriptor(name="population", storage_type="INTEGER")
        target = SchemaTarget(
            kind="label",
            path="item.terms.labels.en",
            accepted_types=frozenset({"string"}),
            language_code="en",
        )

        with self.assertRaises(ValueError):
            resolve_value_mapping(column, target)


if __name__ == "__main__":
    unittest.main()
