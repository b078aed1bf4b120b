"""Enumerations used across the catalog platform."""

from enum import Enum


class EntryType(str, Enum):
    """Kind of a top-level repository entry."""

    FILE = "file"
    DIR = "dir"
    SYMLINK = "symlink"
    SUBMODULE = "submodule"


class PurchaseStatus(str, Enum):
    REQUESTED = "requested"
    CHARGING = "charging"
    RECORDED = "recorded"
    REJECTED = "rejected"


class EmailTemplateName(str, Enum):
    PURCHASE = "purchase"
    PREORDER = "preorder"


class MailingList(str, Enum):
    ORDERED = "ordered"
    PREORDERED = "preordered"
