"""
app/validators package marker.
"""

from app.validators.alias_table_validator import (
    AliasTableErrorDetail,
    AliasTableValidator,
    ConfigurationError,
)

__all__ = [
    "AliasTableErrorDetail",
    "AliasTableValidator",
    "ConfigurationError",
]
