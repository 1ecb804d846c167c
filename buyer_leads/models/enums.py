"""Enumeration types for buyer lead fields.

Canonical enums hold the values that are persisted. The ``Form*`` enums
hold the user-facing tokens accepted by forms and CSV files; their member
names match the canonical member they encode to.
"""

from enum import Enum


class City(str, Enum):
    CHANDIGARH = "Chandigarh"
    MOHALI = "Mohali"
    ZIRAKPUR = "Zirakpur"
    PANCHKULA = "Panchkula"
    OTHER = "Other"


class PropertyType(str, Enum):
    APARTMENT = "Apartment"
    VILLA = "Villa"
    PLOT = "Plot"
    OFFICE = "Office"
    RETAIL = "Retail"


class Purpose(str, Enum):
    BUY = "Buy"
    RENT = "Rent"


class BHK(str, Enum):
    ONE = "ONE"
    TWO = "TWO"
    THREE = "THREE"
    FOUR = "FOUR"
    STUDIO = "Studio"


class Timeline(str, Enum):
    ZERO_TO_THREE_MONTHS = "ZERO_TO_THREE_MONTHS"
    THREE_TO_SIX_MONTHS = "THREE_TO_SIX_MONTHS"
    MORE_THAN_SIX_MONTHS = "MORE_THAN_SIX_MONTHS"
    EXPLORING = "Exploring"


class Source(str, Enum):
    WEBSITE = "Website"
    REFERRAL = "Referral"
    WALK_IN = "Walk_in"
    CALL = "Call"
    OTHER = "Other"


class BuyerStatus(str, Enum):
    NEW = "New"
    QUALIFIED = "Qualified"
    CONTACTED = "Contacted"
    VISITED = "Visited"
    NEGOTIATION = "Negotiation"
    CONVERTED = "Converted"
    DROPPED = "Dropped"


class FormBHK(str, Enum):
    ONE = "1"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    STUDIO = "Studio"


class FormTimeline(str, Enum):
    ZERO_TO_THREE_MONTHS = "0-3m"
    THREE_TO_SIX_MONTHS = "3-6m"
    MORE_THAN_SIX_MONTHS = ">6m"
    EXPLORING = "Exploring"


class FormSource(str, Enum):
    WEBSITE = "Website"
    REFERRAL = "Referral"
    WALK_IN = "Walk-in"
    CALL = "Call"
    OTHER = "Other"


# Property types for which a BHK configuration is mandatory
BHK_REQUIRED_FOR = frozenset({PropertyType.APARTMENT, PropertyType.VILLA})
