"""
industry/aliases.py

Default per-industry alias tables: canonical field -> accepted header aliases.

Aliases are compared after header normalization, so ``"sold_qty"`` and
``"Sold QTY"`` are the same alias. One alias may belong to only one canonical
field per industry; the table validator rejects anything else at startup.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Mapping, Sequence

logger = logging.getLogger(__name__)

AliasTable = dict[str, tuple[str, ...]]

RETAIL_ALIASES: AliasTable = {
    "quantity": (
        "qty", "quantity", "units sold", "unitsold", "sold quantity", "sold_qty",
        "order quantity", "order_qty", "qty sold",
    ),
    "unitPrice": (
        "unit price", "unitprice", "unit cost", "unitcost", "price", "price per unit",
        "rate", "cost per item", "item price",
    ),
    "sales": (
        "total", "amount", "sales", "sale", "revenue", "gross sale", "net sale",
        "invoice value", "total revenue", "totalamount", "total price", "total_price",
        "order value",
    ),
    "profit": (
        "profit", "gross profit", "net profit", "profit margin", "profit ($)",
        "profit amount", "margin",
    ),
    "cost": ("cost", "purchase cost", "total cost", "purchase price", "cost per unit"),
    "loss": ("loss", "net loss", "negative profit"),
    "category": (
        "category", "product", "item", "brand", "segment", "product category",
        "sub category", "subcategory",
    ),
    "region": ("region", "area", "zone", "territory", "location", "market"),
    "date": ("date", "order date", "timestamp", "sale date", "datetime", "transaction date"),
    "customer": (
        "customer", "customer id", "client", "user", "customer name", "client id", "user id",
    ),
    "returnFlag": (
        "return", "returned", "is return", "is_return", "returned (y/n)", "return status",
        "was returned", "isreturned",
    ),
    "promotionFlag": (
        "promo", "discount", "promotion", "promotion applied (y/n)", "is_discounted",
        "discount applied", "discountflag",
    ),
}

MANUFACTURING_ALIASES: AliasTable = {
    "prodCol": (
        "produce", "unit", "output", "volume", "production", "unitproduced",
        "unitsproduced", "product_id",
    ),
    "costCol": (
        "cost", "expense", "spend", "productioncost", "production cost", "unit cost",
        "repair_cost",
    ),
    "qualityCol": ("defect", "quality", "reject", "scrap", "defectrate", "defect_id"),
    "machineCol": (
        "machine", "downtime", "uptime", "maintenance", "machineuptime",
        "machinedowntime", "machinemaintenance",
    ),
    "leadTimeCol": ("leadtime", "delivery", "supply"),
    "materialCol": ("material", "raw", "input"),
    "energyCol": ("energy", "power", "electricity"),
    "laborCol": ("labor", "workforce", "staff", "manpower"),
    "dateCol": ("date", "period", "time", "timestamp", "month", "defect_date"),
}

FINANCE_ALIASES: AliasTable = {
    "revenueCol": ("revenue", "sales", "amount", "income", "checking", "transaction"),
    "expenseCol": ("expense", "cost", "spend", "debit", "withdrawal"),
    "dateCol": ("date", "timestamp", "period", "time", "month", "year"),
    "metricCol": ("metric", "type", "category", "label"),
    "customerCol": ("customer", "client", "user", "sme", "enterprise", "retail"),
}

EDUCATION_ALIASES: AliasTable = {
    "scoreCol": ("score", "marks", "grade", "result", "performance"),
    "studentCol": ("student", "name", "learner"),
    "subjectCol": ("subject", "course", "class"),
    "dateCol": ("year", "date", "month", "timestamp"),
    "attendanceCol": ("attendance", "present", "absent", "attendancerate"),
    "completionCol": ("completion", "status", "coursecompleted", "completionrate"),
    "resourceCol": ("resource", "usage", "time", "hour", "videos"),
    "teacherCol": ("teacher", "instructor", "faculty"),
    "budgetCol": ("budget", "cost", "expenditure"),
    "alumniCol": ("alumni", "employed", "career", "placement"),
    "infrastructureCol": ("lab", "library", "facility", "infrastructure"),
    "enrollmentCol": ("enrollment", "registered", "join"),
    "dropoutCol": ("dropout", "retention", "left"),
}

HEALTHCARE_ALIASES: AliasTable = {
    "admissionCol": ("admission", "visit", "encounter", "number"),
    "departmentCol": ("department", "unit", "ward"),
    "diseaseCol": ("disease", "diagnosis", "condition", "icd"),
    "treatmentCol": ("treatment", "therapy", "procedure"),
    "outcomeCol": ("outcome", "result", "status"),
    "bedCol": ("bed", "occupancy", "room", "bed number"),
    "staffCol": ("staff", "nurse", "doctor", "personnel"),
    "equipmentCol": ("equipment", "machine", "device"),
    "insuranceCol": ("insurance", "payer", "claim"),
    "medicationCol": ("medication", "drug", "prescription", "rx"),
    "dateCol": ("date", "admission date", "timestamp", "period"),
}

DEFAULT_ALIAS_TABLES: dict[str, AliasTable] = {
    "retail": RETAIL_ALIASES,
    "manufacturing": MANUFACTURING_ALIASES,
    "finance": FINANCE_ALIASES,
    "education": EDUCATION_ALIASES,
    "healthcare": HEALTHCARE_ALIASES,
}


def load_alias_tables(path: str | Path | None = None) -> Mapping[str, Mapping[str, Sequence[str]]]:
    """
    Return alias tables from a JSON file, or the built-in defaults.

    The file must hold ``{industry: {canonical_field: [alias, ...]}}``. Its
    contents are returned as parsed; structural checks belong to
    :class:`app.validators.alias_table_validator.AliasTableValidator`.
    """

    if path is None:
        return DEFAULT_ALIAS_TABLES

    alias_path = Path(path)
    raw = alias_path.read_text(encoding="utf-8")
    data = json.loads(raw)
    logger.info("Loaded alias tables from %s (%d industries)", alias_path, len(data) if isinstance(data, dict) else 0)
    return data
