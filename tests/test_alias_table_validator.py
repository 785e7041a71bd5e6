from __future__ import annotations

import unittest

from app.mappers.alias_resolver import normalize
from app.validators.alias_table_validator import AliasTableValidator, ConfigurationError
from industry.aliases import DEFAULT_ALIAS_TABLES


class TestAliasTableValidator(unittest.TestCase):
    def setUp(self) -> None:
        self.validator = AliasTableValidator(normalizer=normalize)

    def _codes(self, tables: object) -> set[str]:
        with self.assertRaises(ConfigurationError) as ctx:
            self.validator.validate(tables)
        return {error.code for error in ctx.exception.errors}

    def test_default_tables_are_valid(self) -> None:
        self.validator.validate(DEFAULT_ALIAS_TABLES)

    def test_rejects_non_mapping(self) -> None:
        self.assertEqual(self._codes(["retail"]), {"invalid_alias_tables"})
        self.assertEqual(self._codes({}), {"invalid_alias_tables"})

    def test_rejects_blank_industry_and_empty_table(self) -> None:
        codes = self._codes({" ": {"a": ["x"]}, "retail": {}})

        self.assertEqual(codes, {"invalid_industry_key", "empty_alias_table"})

    def test_rejects_empty_alias_list_and_blank_alias(self) -> None:
        codes = self._codes({"retail": {"quantity": [], "sales": ["sales", "  "], "profit": "profit"}})

        self.assertEqual(codes, {"empty_alias_list", "invalid_alias"})

    def test_alias_declared_twice_after_normalization_is_ambiguous(self) -> None:
        with self.assertRaises(ConfigurationError) as ctx:
            self.validator.validate({"healthcare": {"admissionCol": ["Number"], "bedCol": ["number"]}})

        error = ctx.exception.errors[0]
        self.assertEqual(error.code, "ambiguous_alias")
        self.assertEqual(error.industry, "healthcare")
        self.assertEqual(error.canonical_field, "bedCol")
        self.assertEqual(error.context, {"normalized": "number", "declared_for": "admissionCol"})

    def test_industry_keys_colliding_after_normalization_are_rejected(self) -> None:
        with self.assertRaises(ConfigurationError) as ctx:
            self.validator.validate({"retail": {"sales": ["sales"]}, " Retail ": {"sales": ["revenue"]}})

        [error] = ctx.exception.errors
        self.assertEqual(error.code, "duplicate_industry")
        self.assertEqual(error.industry, " Retail ")
        self.assertEqual(error.context, {"normalized": "retail", "declared_as": "retail"})

    def test_same_alias_in_different_industries_is_allowed(self) -> None:
        self.validator.validate({"retail": {"date": ["date"]}, "finance": {"dateCol": ["date"]}})

    def test_error_serializes_to_dict(self) -> None:
        with self.assertRaises(ConfigurationError) as ctx:
            self.validator.validate({"retail": {}})

        payload = ctx.exception.to_dict()
        self.assertIn("retail", payload["message"])
        self.assertEqual(payload["errors"][0]["code"], "empty_alias_table")


if __name__ == "__main__":
    unittest.main()
