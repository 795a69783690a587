"""
Item type models.

Importing this package registers every model in ITEM_TYPES.
"""

from .approximate import ApproximateDate, ApproximateDateTime, ApproximateTime
from .base import ITEM_TYPES, ItemXml, parse_item, write_item
from .codable_value import CodableValue, CodedValue
from .group_membership import GroupMembership

__all__ = [
    "ITEM_TYPES",
    "ItemXml",
    "parse_item",
    "write_item",
    "ApproximateDate",
    "ApproximateDateTime",
    "ApproximateTime",
    "CodableValue",
    "CodedValue",
    "GroupMembership",
]
