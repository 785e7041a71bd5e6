"""
app/mappers package marker.
"""

from app.mappers.alias_resolver import AliasMatch, AliasResolver, HeaderMappingReport, normalize

__all__ = [
    "AliasMatch",
    "AliasResolver",
    "HeaderMappingReport",
    "normalize",
]
