"""Unit tests for schema path parsing."""

from __future__ import annotations

import unittest

from schema_mapper.mapping.paths import (
    InvalidPathError,
    PathSegment,
    ensure_path,
    is_under,
    is_valid_path,
    language_from_path,
    parse_path,
    statement_path,
    target_kind_from_path,
    term_path,
)


class PathGrammarTests(unittest.TestCase):
    def test_parse_path_splits_segments_and_indices(self) -> None:
        self.assertEqual(
            parse_path("item.statements[0].qualifiers[12].value"),
            (
                PathSegment("item"),
                PathSegment("statements", 0),
                PathSegment("qualifiers", 12),
                PathSegment("value"),
            ),
        )
        self.assertEqual(parse_path("item.terms.labels.en-gb")[-1], PathSegment("en-gb"))

    def test_malformed_paths_are_rejected(self) -> None:
        for path in ("", "item.", ".item", "item..terms", "item.[0]", "item.statements[01]", "item[0]x", "1item"):
            with self.subTest(path=path):
                self.assertFalse(is_valid_path(path))
                with self.assertRaises(InvalidPathError):
                    ensure_path(path)

    def test_ensure_path_returns_the_path_unchanged(self) -> None:
        self.assertEqual(ensure_path("schema.name"), "schema.name")

    def test_is_under_compares_structurally(self) -> None:
        self.assertTrue(is_under("item.statements[1].value", "item.statements[1]"))
        self.assertTrue(is_under("item.statements[1]", "item.statements[1]"))
        self.assertTrue(is_under("item.statements[1]", "item.statements"))
        self.assertFalse(is_under("item.statements[10].value", "item.statements[1]"))
        self.assertFalse(is_under("item.terms.labelsx", "item.terms.labels"))

    def test_target_kind_and_language_are_inferred_from_paths(self) -> None:
        self.assertEqual(target_kind_from_path("item.terms.labels.en"), "label")
        self.assertEqual(target_kind_from_path("item.terms.aliases.de[2]"), "alias")
        self.assertEqual(target_kind_from_path("item.statements[0].references[1].value"), "reference")
        self.assertEqual(target_kind_from_path("item.statements[0].value"), "statement")
        self.assertEqual(language_from_path("item.terms.aliases.de[2]"), "de")
        self.assertIsNone(language_from_path("item.statements[0].value"))

    def test_path_builders(self) -> None:
        self.assertEqual(statement_path(2), "item.statements[2]")
        self.assertEqual(statement_path(2, "qualifiers[0]", "value"), "item.statements[2].qualifiers[0].value")
        self.assertEqual(term_path("description", "fr"), "item.terms.descriptions.fr")


if __name__ == "__main__":
    unittest.main()
