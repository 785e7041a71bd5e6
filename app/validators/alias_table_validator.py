"""
app/validators/alias_table_validator.py

Validation for per-industry alias tables.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable


@dataclass(frozen=True)
class AliasTableErrorDetail:
    """
    Structured alias table error detail.
    """

    code: str
    message: str
    industry: str | None = None
    canonical_field: str | None = None
    alias: str | None = None
    context: dict[str, Any] | None = None


class ConfigurationError(ValueError):
    """
    Raised when alias configuration is missing or malformed.

    This is a programmer error: an unknown industry key or an inconsistent
    alias table. It is never used for bad user input.
    """

    def __init__(self, *, message: str, errors: list[AliasTableErrorDetail] | tuple[AliasTableErrorDetail, ...] = ()) -> None:
        super().__init__(message)
        self.message = message
        self.errors = tuple(errors)

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "errors": [
                {
                    "code": error.code,
                    "message": error.message,
                    "industry": error.industry,
                    "canonical_field": error.canonical_field,
                    "alias": error.alias,
                    "context": error.context,
                }
                for error in self.errors
            ],
        }


class AliasTableValidator:
    """
    Validates ``{industry: {canonical_field: [alias, ...]}}`` tables.

    Checks, per industry:

    * the table is a non-empty mapping of canonical field -> alias list
    * every alias is a non-blank string
    * no normalized alias is declared for two different canonical fields

    Industry keys must also stay distinct once trimmed and lower-cased.
    """

    def __init__(self, *, normalizer: Callable[[str], str]) -> None:
        self._normalize = normalizer

    def validate(self, tables: Any) -> None:
        """
        Validate alias tables and raise :class:`ConfigurationError` if invalid.
        """

        errors: list[AliasTableErrorDetail] = []

        if not isinstance(tables, Mapping) or not tables:
            raise ConfigurationError(
                message="Alias configuration must be a non-empty mapping of industries.",
                errors=[
                    AliasTableErrorDetail(
                        code="invalid_alias_tables",
                        message="Expected a mapping of industry -> alias table.",
                        context={"type": type(tables).__name__},
                    )
                ],
            )

        seen_industries: dict[str, str] = {}

        for industry, table in tables.items():
            if not isinstance(industry, str) or not industry.strip():
                errors.append(
                    AliasTableErrorDetail(
                        code="invalid_industry_key",
                        message="Industry key must be a non-blank string.",
                        industry=str(industry),
                    )
                )
                continue
            industry_key = industry.strip().lower()
            if industry_key in seen_industries:
                errors.append(
                    AliasTableErrorDetail(
                        code="duplicate_industry",
                        message="Industry key collides with another industry after normalization.",
                        industry=industry,
                        context={"normalized": industry_key, "declared_as": seen_industries[industry_key]},
                    )
                )
                continue
            seen_industries[industry_key] = industry
            if not isinstance(table, Mapping) or not table:
                errors.append(
                    AliasTableErrorDetail(
                        code="empty_alias_table",
                        message="Industry alias table must be a non-empty mapping.",
                        industry=industry,
                    )
                )
                continue
            errors.extend(self._validate_table(industry, table))

        if errors:
            industries = ", ".join(sorted({error.industry for error in errors if error.industry})) or "unknown"
            raise ConfigurationError(
                message=f"Alias table validation failed for: {industries}.",
                errors=errors,
            )

    def _validate_table(self, industry: str, table: Mapping[Any, Any]) -> list[AliasTableErrorDetail]:
        errors: list[AliasTableErrorDetail] = []
        owner_by_alias: dict[str, str] = {}

        for canonical_field, aliases in table.items():
            if not isinstance(canonical_field, str) or not canonical_field.strip():
                errors.append(
                    AliasTableErrorDetail(
                        code="invalid_canonical_field",
                        message="Canonical field name must be a non-blank string.",
                        industry=industry,
                        canonical_field=str(canonical_field),
                    )
                )
                continue
            if isinstance(aliases, str) or not isinstance(aliases, (list, tuple)) or not aliases:
                errors.append(
                    AliasTableErrorDetail(
                        code="empty_alias_list",
                        message="Canonical field must declare a non-empty list of aliases.",
                        industry=industry,
                        canonical_field=canonical_field,
                    )
                )
                continue

            for alias in aliases:
                if not isinstance(alias, str) or not self._normalize(alias):
                    errors.append(
                        AliasTableErrorDetail(
                            code="invalid_alias",
                            message="Alias must be a non-blank string.",
                            industry=industry,
                            canonical_field=canonical_field,
                            alias=repr(alias),
                        )
                    )
                    continue

                normalized = self._normalize(alias)
                owner = owner_by_alias.setdefault(normalized, canonical_field)
                if owner != canonical_field:
                    errors.append(
                        AliasTableErrorDetail(
                            code="ambiguous_alias",
                            message="Alias is declared for more than one canonical field.",
                            industry=industry,
                            canonical_field=canonical_field,
                            alias=alias,
                            context={"normalized": normalized, "declared_for": owner},
                        )
                    )

        return errors
