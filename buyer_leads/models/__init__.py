"""Domain models for buyer leads."""

from buyer_leads.models.buyer import (
    ATTRIBUTE_COLUMNS,
    COLUMN_ATTRIBUTES,
    RECORD_COLUMNS,
    UNSET,
    Buyer,
    BuyerHistoryEntry,
    CanonicalRecord,
    PartialCanonicalRecord,
    PartialUpdate,
    UserFacingRecord,
)
from buyer_leads.models.enums import (
    BHK,
    BHK_REQUIRED_FOR,
    BuyerStatus,
    City,
    FormBHK,
    FormSource,
    FormTimeline,
    PropertyType,
    Purpose,
    Source,
    Timeline,
)

__all__ = [
    "ATTRIBUTE_COLUMNS",
    "BHK",
    "BHK_REQUIRED_FOR",
    "Buyer",
    "BuyerHistoryEntry",
    "BuyerStatus",
    "COLUMN_ATTRIBUTES",
    "CanonicalRecord",
    "City",
    "FormBHK",
    "FormSource",
    "FormTimeline",
    "PartialCanonicalRecord",
    "PartialUpdate",
    "PropertyType",
    "Purpose",
    "RECORD_COLUMNS",
    "Source",
    "Timeline",
    "UNSET",
    "UserFacingRecord",
]
