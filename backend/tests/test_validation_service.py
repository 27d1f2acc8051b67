"""Service-level tests for schema evaluation and single mapping checks."""

from __future__ import annotations

import unittest

from schema_mapper.mapping.issues import create_error
from schema_mapper.mapping.ledger import ValidationLedger
from schema_mapper.mapping.types import ColumnDescriptor, SchemaTarget
from schema_mapper.mapping.validator import MappingValidator
from schema_mapper.schemas.schema_mapping import SchemaMappingTree
from schema_mapper.services.validation import (
    check_mapping,
    collect_mapping_infos,
    evaluate_schema,
)

POPULATION_STATEMENT = {
    "property": {"id": "P1082", "dataType": "quantity"},
    "value": {
        "type": "column",
        "source": {"columnName": "population", "dataType": "INTEGER"},
        "dataType": "quantity",
    },
}


def _complete_tree(**item_overrides) -> SchemaMappingTree:
    item = {
        "terms": {
            "labels": {"en": {"columnName": "city", "dataType": "VARCHAR"}},
            "aliases": {"en": [{"columnName": "nickname", "dataType": "VARCHAR"}]},
        },
        "statements": [POPULATION_STATEMENT],
    }
    item.update(item_overrides)
    return SchemaMappingTree.model_validate(
        {"id": "schema-1", "name": "Cities", "wikibase": "https://www.wikidata.org", "item": item}
    )


class EvaluateSchemaTests(unittest.TestCase):
    def setUp(self) -> None:
        self.validator = MappingValidator()

    def test_empty_schema_is_not_started_and_has_no_highlights(self) -> None:
        evaluation = evaluate_schema(SchemaMappingTree(), validator=self.validator)

        self.assertEqual(evaluation.status, "not_started")
        self.assertFalse(evaluation.completeness.is_complete)
        self.assertEqual(evaluation.highlights, [])
        self.assertEqual(evaluation.issues, [])

    def test_partially_filled_schema_is_incomplete(self) -> None:
        tree = SchemaMappingTree.model_validate({"name": "Cities"})

        evaluation = evaluate_schema(tree, validator=self.validator)

        self.assertEqual(evaluation.status, "incomplete")
        self.assertEqual(
            [issue.path for issue in evaluation.highlights],
            ["schema.wikibase", "item.terms.labels"],
        )

    def test_complete_schema_has_no_issues(self) -> None:
        evaluation = evaluate_schema(_complete_tree(), validator=self.validator)

        self.assertEqual(evaluation.status, "complete")
        self.assertTrue(evaluation.completeness.is_complete)
        self.assertEqual(evaluation.highlights, [])
        self.assertEqual(evaluation.issues, [])

    def test_reused_property_is_reported(self) -> None:
        tree = _complete_tree(statements=[POPULATION_STATEMENT, POPULATION_STATEMENT])

        evaluation = evaluate_schema(tree, validator=self.validator)

        codes = [(issue.code, issue.path) for issue in evaluation.issues]
        self.assertEqual(codes, [("DUPLICATE_PROPERTY_MAPPING", "item.statements[1].value")])

    def test_bad_language_code_and_incompatible_label_are_reported(self) -> None:
        tree = _complete_tree(
            terms={"labels": {"EN": {"columnName": "population", "dataType": "INTEGER"}}},
        )

        evaluation = evaluate_schema(tree, validator=self.validator)

        codes = {(issue.code, issue.path) for issue in evaluation.issues}
        self.assertIn(("INVALID_LANGUAGE_CODE", "item.terms.labels.EN"), codes)
        self.assertIn(("INCOMPATIBLE_DATA_TYPE", "item.terms.labels.EN"), codes)
        self.assertEqual(evaluation.status, "complete")

    def test_non_optimal_statement_type_is_a_warning(self) -> None:
        statement = {
            "property": {"id": "P214", "dataType": "external-id"},
            "value": {
                "type": "column",
                "source": {"columnName": "viaf", "dataType": "VARCHAR"},
                "dataType": "external-id",
            },
        }

        evaluation = evaluate_schema(_complete_tree(statements=[statement]), validator=self.validator)

        self.assertEqual([issue.severity for issue in evaluation.issues], ["warning"])

    def test_ledger_is_synchronized_with_each_evaluation(self) -> None:
        ledger = ValidationLedger()

        evaluate_schema(SchemaMappingTree.model_validate({"name": "Cities"}), validator=self.validator, ledger=ledger)
        self.assertTrue(ledger.has_errors_for_path("schema.wikibase"))
        self.assertTrue(ledger.has_errors_for_path("item.terms.labels"))

        evaluate_schema(_complete_tree(), validator=self.validator, ledger=ledger)
        self.assertFalse(ledger.has_errors)

    def test_fixed_mapping_issue_leaves_the_ledger(self) -> None:
        ledger = ValidationLedger()
        renamed = {**POPULATION_STATEMENT, "property": {"id": "P1083", "dataType": "quantity"}}

        evaluate_schema(
            _complete_tree(statements=[POPULATION_STATEMENT, POPULATION_STATEMENT]),
            validator=self.validator,
            ledger=ledger,
        )
        self.assertTrue(ledger.has_errors_for_path("item.statements[1].value"))

        evaluation = evaluate_schema(
            _complete_tree(statements=[POPULATION_STATEMENT, renamed]),
            validator=self.validator,
            ledger=ledger,
        )

        self.assertEqual(evaluation.issues, [])
        self.assertFalse(ledger.has_errors)

    def test_evaluation_keeps_issues_recorded_by_other_producers(self) -> None:
        ledger = ValidationLedger()
        rejected = create_error("INCOMPATIBLE_DATA_TYPE", "item.terms.labels", message="Rejected drop")
        ledger.add(rejected)

        evaluate_schema(SchemaMappingTree.model_validate({"name": "Cities"}), validator=self.validator, ledger=ledger)
        evaluate_schema(_complete_tree(), validator=self.validator, ledger=ledger)

        self.assertEqual(ledger.issues, [rejected])

    def test_collect_mapping_infos_flattens_terms_and_statements(self) -> None:
        tree = _complete_tree(
            statements=[
                {
                    **POPULATION_STATEMENT,
                    "qualifiers": [
                        {
                            "property": {"id": "P585"},
                            "value": {"type": "column", "source": {"columnName": "year", "dataType": "DATE"}, "dataType": "time"},
                        }
                    ],
                }
            ]
        )

        infos = collect_mapping_infos(tree)

        self.assertEqual(
            [(info.kind, info.path) for info in infos],
            [
                ("label", "item.terms.labels.en"),
                ("alias", "item.terms.aliases.en[0]"),
                ("statement", "item.statements[0].value"),
                ("qualifier", "item.statements[0].qualifiers[0].value"),
            ],
        )
        self.assertEqual(infos[3].property_id, "P585")
        self.assertEqual(infos[3].target_types, frozenset({"time"}))


class CheckMappingTests(unittest.TestCase):
    def test_compatible_mapping_resolves_semantic_type(self) -> None:
        column = ColumnDescriptor(name="city", storage_type="VARCHAR")
        target = SchemaTarget(
            kind="label",
            path="item.terms.labels.en",
            accepted_types=frozenset({"monolingualtext", "string"}),
            language_code="en",
        )

        result = check_mapping(column, target, validator=MappingValidator())

        self.assertTrue(result.is_valid)
        self.assertEqual(result.feedback_kind, "success")
        self.assertEqual(result.resolved_type, "string")
        self.assertEqual(result.suggestions, [])

    def test_incompatible_mapping_carries_issue_and_suggestions(self) -> None:
        column = ColumnDescriptor(name="founded", storage_type="DATE")
        target = SchemaTarget(
            kind="statement",
            path="item.statements[0].value",
            accepted_types=frozenset({"quantity"}),
            property_id="P1082",
        )

        result = check_mapping(column, target, validator=MappingValidator())

        self.assertFalse(result.is_valid)
        self.assertEqual(result.issue.code, "INCOMPATIBLE_DATA_TYPE")
        self.assertEqual(result.feedback_kind, "error")
        self.assertIsNone(result.resolved_type)
        self.assertIn("Consider using a column with data type: quantity", result.suggestions)


if __name__ == "__main__":
    unittest.main()
