"""Shared failure code constants for conditions reported as data."""

UNRESOLVED_ALIAS = "unresolved_alias"
DISPATCH_MISS = "dispatch_miss"
INVALID_DATE = "invalid_date"
NOT_ENOUGH_DATA = "not_enough_data"
NO_DATA = "no_data"
INVALID_DESCRIPTOR = "invalid_descriptor"
