"""
industry/profiles.py

Per-industry dashboard configuration.

One generic engine renders every industry. A profile only declares what
differs: which semantic role each insights section plays, preferred value
columns, panel titles, palette and currency, plus how percentages and
generated prose are cleaned up for display.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from app.validators.alias_table_validator import AliasTableErrorDetail, ConfigurationError
from dispatch.base import Role

BRAND_PALETTE: tuple[str, ...] = (
    "#7400B8", "#9B4DCA", "#C77DFF", "#E0AAFF", "#F8F4FF",
    "#8B5CF6", "#A855F7", "#C084FC", "#DDD6FE", "#F3E8FF",
    "#7C3AED", "#9333EA", "#A855F7", "#C084FC", "#DDD6FE",
)

HEALTHCARE_PALETTE: tuple[str, ...] = (
    "#7400B8", "#9B4DCA", "#C77DFF", "#E0AAFF", "#4e389f",
    "#8B5CF6", "#A855F7", "#C084FC", "#DDD6FE", "#4e389f",
    "#7C3AED", "#9333EA", "#A855F7", "#C084FC", "#4e389f",
)

DEFAULT_SECTION_ROLES: dict[str, Role] = {
    "kpis": Role.KPI_SET,
    "totals": Role.TOTALS,
    "trends": Role.TREND,
    "highPerformers": Role.RANKING,
    "lowPerformers": Role.RANKING,
    "hypothesis": Role.NARRATIVE_LIST,
    "recommendations": Role.NARRATIVE_LIST,
    "summary": Role.NARRATIVE_LIST,
    "forecast": Role.KPI_SET,
    "segments": Role.TOTALS,
    "variance": Role.TOTALS,
}

NARRATIVE_LEAD_INS: tuple[str, ...] = ("Sure, here is your summary:",)

PERCENT_KEY_MARKERS: tuple[str, ...] = ("rate", "percent", "pct")

DEFAULT_SECTION_TITLES: dict[str, str] = {
    "kpis": "Key Performance Indicators",
    "totals": "Totals",
    "trends": "Trends",
    "highPerformers": "Top Performers",
    "lowPerformers": "Low Performers",
    "hypothesis": "AI-Powered Insights",
    "recommendations": "Recommendations",
    "summary": "Summary",
    "forecast": "Forecast",
    "segments": "Segments",
    "variance": "Variance",
}


@dataclass(frozen=True)
class IndustryProfile:
    key: str
    title: str
    description: str = ""
    palette: tuple[str, ...] = BRAND_PALETTE
    currency_symbol: str | None = None
    section_roles: dict[str, Role] = field(default_factory=lambda: dict(DEFAULT_SECTION_ROLES))
    section_titles: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_SECTION_TITLES))
    value_keys: dict[str, str] = field(default_factory=dict)
    panel_titles: dict[str, str] = field(default_factory=dict)
    percent_markers: tuple[str, ...] = ()
    narrative_lead_ins: tuple[str, ...] = NARRATIVE_LEAD_INS

    def role_for(self, section: str) -> Role:
        return self.section_roles.get(section, Role.GENERIC)

    def section_title(self, section: str) -> str | None:
        return self.section_titles.get(section)


RETAIL_PROFILE = IndustryProfile(
    key="retail",
    title="Retail Analytics",
    description="Perfect for e-commerce, retail stores, and sales data analysis",
    currency_symbol="₹",
    value_keys={
        "sales_by_region": "Sales",
        "sales_by_category": "Sales",
        "sales_over_time": "Sales",
        "top_categories": "Sales",
    },
    panel_titles={
        "sales_by_region": "Sales by Region",
        "sales_by_category": "Sales by Category",
        "sales_over_time": "Sales Over Time",
    },
)

FINANCE_PROFILE = IndustryProfile(
    key="finance",
    title="Financial Analytics",
    description="Perfect for financial statements, transactions, and revenue analysis",
    currency_symbol="$",
    percent_markers=PERCENT_KEY_MARKERS,
    value_keys={
        "revenue_by_Division": "Total_Amount_Received",
        "top_Division": "Total_Amount_Received",
        "bottom_Division": "Total_Amount_Received",
    },
    panel_titles={"revenue_by_Division": "Revenue by Division"},
)

HEALTHCARE_PROFILE = IndustryProfile(
    key="healthcare",
    title="Healthcare Analytics",
    description="Perfect for patient data, medical records, and healthcare metrics",
    palette=HEALTHCARE_PALETTE,
    percent_markers=PERCENT_KEY_MARKERS,
    value_keys={
        "cases_by_regions": "Cases",
        "cases_by_conditions": "Cases",
        "trends": "total",
    },
    panel_titles={
        "cases_by_regions": "Cases by Region",
        "cases_by_conditions": "Cases by Condition",
        "trends": "Cases Trend Analysis",
        "top_regions": "Top Performing Regions",
        "bottom_regions": "Low Performing Regions",
    },
)

MANUFACTURING_PROFILE = IndustryProfile(
    key="manufacturing",
    title="Manufacturing Analytics",
    description="Ideal for production data, quality control, and operational efficiency",
    value_keys={
        "production_trends": "Production_Volume",
    },
    panel_titles={
        "production_volume": "Production Volume by Product",
        "defect_rate": "Defect Rate by Production Line",
        "production_trends": "Production Trends",
    },
)

EDUCATION_PROFILE = IndustryProfile(
    key="education",
    title="Education Analytics",
    description="Ideal for academic performance, student data, and institutional metrics",
    value_keys={
        "performance_by_subject": "Score",
        "performance_by_student": "Score",
        "top_students": "Score",
        "top_subjects": "Score",
    },
    panel_titles={
        "performance_by_subject": "Performance by Subject",
        "performance_by_student": "Student Performance",
    },
)

DEFAULT_PROFILES: dict[str, IndustryProfile] = {
    profile.key: profile
    for profile in (
        RETAIL_PROFILE,
        FINANCE_PROFILE,
        HEALTHCARE_PROFILE,
        MANUFACTURING_PROFILE,
        EDUCATION_PROFILE,
    )
}


def get_profile(industry: str, profiles: dict[str, IndustryProfile] | None = None) -> IndustryProfile:
    """
    Return the profile for *industry*.

    Raises
    ------
    ConfigurationError
        If no profile is configured for *industry*.
    """

    available = DEFAULT_PROFILES if profiles is None else profiles
    key = industry.strip().lower() if isinstance(industry, str) else ""
    profile = available.get(key)
    if profile is None:
        raise ConfigurationError(
            message=f"No dashboard profile configured for industry '{industry}'.",
            errors=[
                AliasTableErrorDetail(
                    code="unknown_industry",
                    message="Industry has no dashboard profile.",
                    industry=str(industry),
                    context={"known_industries": sorted(available)},
                )
            ],
        )
    return profile
