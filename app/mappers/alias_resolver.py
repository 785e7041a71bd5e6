"""
app/mappers/alias_resolver.py

Header-to-canonical-field resolution for uploaded data files.

Matching is exact after normalization. There is no fuzzy matching, so every
mapping decision can be traced back to one declared alias.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from app.failure_codes import UNRESOLVED_ALIAS
from app.validators.alias_table_validator import (
    AliasTableErrorDetail,
    AliasTableValidator,
    ConfigurationError,
)
from industry.aliases import DEFAULT_ALIAS_TABLES

logger = logging.getLogger(__name__)

_SEPARATOR_RUN = re.compile(r"[\s_]+")


def normalize(header: str) -> str:
    """
    Normalize a column header for alias comparison.

    Lower-cases, trims, and collapses runs of whitespace and underscores to a
    single space.
    """

    if not isinstance(header, str):
        return ""
    return _SEPARATOR_RUN.sub(" ", header.strip().lower()).strip()


def normalize_industry(industry: str) -> str:
    return industry.strip().lower() if isinstance(industry, str) else ""


@dataclass(frozen=True)
class AliasMatch:
    """
    Outcome of resolving one header.

    ``canonical_field`` is ``None`` when the header is unresolved; that is a
    normal result, not an error.
    """

    industry: str
    header: str
    normalized: str
    canonical_field: str | None = None

    @property
    def resolved(self) -> bool:
        return self.canonical_field is not None

    @property
    def reason(self) -> str | None:
        return None if self.resolved else UNRESOLVED_ALIAS


@dataclass(frozen=True)
class HeaderMappingReport:
    """
    Resolution of a full header row against one industry.
    """

    industry: str
    mapped: dict[str, str]
    unresolved: tuple[str, ...] = ()
    duplicates: dict[str, tuple[str, ...]] = field(default_factory=dict)
    missing_fields: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "industry": self.industry,
            "mapped": dict(self.mapped),
            "unresolved": list(self.unresolved),
            "duplicates": {key: list(value) for key, value in self.duplicates.items()},
            "missing_fields": list(self.missing_fields),
        }


class AliasResolver:
    """
    Resolves arbitrary uploaded column headers to per-industry canonical fields.

    Alias tables are validated once at construction; an inconsistent table
    raises :class:`ConfigurationError` immediately.
    """

    def __init__(
        self,
        *,
        alias_tables: Mapping[str, Mapping[str, Sequence[str]]] | None = None,
        validator: AliasTableValidator | None = None,
    ) -> None:
        tables = DEFAULT_ALIAS_TABLES if alias_tables is None else alias_tables
        (validator or AliasTableValidator(normalizer=normalize)).validate(tables)

        self._aliases: dict[str, dict[str, tuple[str, ...]]] = {}
        self._lookup: dict[str, dict[str, str]] = {}
        for industry, table in tables.items():
            industry_key = normalize_industry(industry)
            self._aliases[industry_key] = {
                canonical: tuple(values) for canonical, values in table.items()
            }
            self._lookup[industry_key] = {
                normalize(alias): canonical
                for canonical, values in table.items()
                for alias in values
            }

        logger.debug("AliasResolver ready industries=%s", sorted(self._lookup))

    def industries(self) -> tuple[str, ...]:
        return tuple(self._aliases)

    def aliases_for(self, industry: str) -> dict[str, tuple[str, ...]]:
        """
        Return the declared alias table for *industry*.
        """

        return dict(self._aliases[self._require_industry(industry)])

    def canonical_fields(self, industry: str) -> tuple[str, ...]:
        return tuple(self._aliases[self._require_industry(industry)])

    def resolve(self, industry: str, header: str) -> AliasMatch:
        """
        Resolve one header to a canonical field of *industry*.

        Raises
        ------
        ConfigurationError
            If *industry* has no alias table.
        """

        industry_key = self._require_industry(industry)
        normalized = normalize(header)
        canonical = self._lookup[industry_key].get(normalized) if normalized else None
        if canonical is None:
            logger.debug("Unresolved header industry=%s header=%r", industry_key, header)
        return AliasMatch(
            industry=industry_key,
            header=header,
            normalized=normalized,
            canonical_field=canonical,
        )

    def resolve_headers(self, industry: str, headers: Sequence[str]) -> HeaderMappingReport:
        """
        Resolve a header row, reporting mapped, unresolved and missing fields.

        When two headers resolve to the same canonical field, the first one
        wins and the later ones are listed under ``duplicates``.
        """

        industry_key = self._require_industry(industry)
        mapped: dict[str, str] = {}
        unresolved: list[str] = []
        duplicates: dict[str, list[str]] = {}

        for header in headers:
            canonical = self.resolve(industry_key, header).canonical_field
            if canonical is None:
                unresolved.append(header)
                continue
            if canonical in mapped:
                duplicates.setdefault(canonical, []).append(header)
                continue
            mapped[canonical] = header

        missing = tuple(
            canonical for canonical in self._aliases[industry_key] if canonical not in mapped
        )
        logger.info(
            "Resolved headers industry=%s mapped=%d unresolved=%d missing=%d",
            industry_key,
            len(mapped),
            len(unresolved),
            len(missing),
        )
        return HeaderMappingReport(
            industry=industry_key,
            mapped=mapped,
            unresolved=tuple(unresolved),
            duplicates={key: tuple(value) for key, value in duplicates.items()},
            missing_fields=missing,
        )

    def _require_industry(self, industry: str) -> str:
        industry_key = normalize_industry(industry)
        if industry_key not in self._lookup:
            raise ConfigurationError(
                message=f"No alias table configured for industry '{industry}'.",
                errors=[
                    AliasTableErrorDetail(
                        code="unknown_industry",
                        message="Industry has no alias table.",
                        industry=str(industry),
                        context={"known_industries": sorted(self._lookup)},
                    )
                ],
            )
        return industry_key
