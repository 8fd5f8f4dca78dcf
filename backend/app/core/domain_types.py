"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - AccountId, StoreId, PageId, CreatorId wrap UUIDs; service signatures and
      analytics records take them for owner, store, page and creator ids
    - All valid states encoded as Enums — no raw string matching
    - Integer-coded statuses (StoreStatus, SectionStatus, PageStatus) keep the
      numeric values persisted by the storefront tables

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums for wire-visible labels: serialize to JSON without custom encoders
    - IntEnum for SMALLINT status columns: ordering and storage stay numeric
"""

from enum import Enum, IntEnum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

AccountId = NewType("AccountId", UUID)
CreatorId = NewType("CreatorId", UUID)
StoreId = NewType("StoreId", UUID)
PageId = NewType("PageId", UUID)


# ─── Accounts & slugs ───────────────────────────────────────────

class AccountRole(str, Enum):
    """Account roles — USER is the plain (non-creator) role."""
    USER = "USER"
    CREATOR = "CREATOR"
    ADMIN = "ADMIN"


class SlugState(str, Enum):
    """Slug reservation lifecycle — maps to store_slugs.state."""
    RESERVED = "RESERVED"
    ACTIVE = "ACTIVE"
    RELEASED = "RELEASED"


# ─── Storefront ─────────────────────────────────────────────────

class StoreType(str, Enum):
    LINKSITE = "linksite"
    FUNNEL = "funnel"
    HYBRID = "hybrid"


class StoreStatus(IntEnum):
    DRAFT = 0
    ACTIVE = 1
    ARCHIVED = 2


class SectionType(str, Enum):
    """Link-in-bio section kinds."""
    TITLE = "title"
    PRODUCT_LINK = "product_link"
    EXTERNAL_LINK = "external_link"
    COURSE_CARD = "course_card"
    DIVIDER = "divider"
    IMAGE = "image"
    SOCIAL_LINKS = "social_links"
    EMAIL_CAPTURE = "email_capture"


class SectionStatus(IntEnum):
    DRAFT = 0
    PUBLISHED = 1
    HIDDEN = 2


class PageType(str, Enum):
    """Product landing page kinds."""
    DIGITAL_DOWNLOAD = "digital-download"
    COURSE = "course"
    SUBSCRIPTION = "subscription"
    CHECKOUT = "checkout"
    UPSELL = "upsell"
    THANK_YOU = "thank-you"


class PageStatus(IntEnum):
    DRAFT = 0
    PUBLISHED = 1
    ARCHIVED = 2


class BlockType(str, Enum):
    """Sales page building blocks."""
    HERO = "hero"
    TESTIMONIAL = "testimonial"
    FAQ = "faq"
    PRICING = "pricing"
    COUNTDOWN = "countdown"
    GUARANTEE = "guarantee"
    VIDEO = "video"
    CHECKOUT_BUTTON = "checkout_button"
    TEXT = "text"
    IMAGE = "image"
    DIVIDER = "divider"


# ─── Catalog ────────────────────────────────────────────────────

class ProductType(str, Enum):
    DIGITAL = "DIGITAL"
    COURSE = "COURSE"
    SUBSCRIPTION = "SUBSCRIPTION"


class ProductStatus(str, Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"


# ─── Analytics ──────────────────────────────────────────────────

class EventType(str, Enum):
    """Analytics event names emitted after successful commits."""
    USER_REGISTERED = "USER_REGISTERED"
    CREATOR_REGISTERED = "CREATOR_REGISTERED"
    LOGIN_SUCCESS = "LOGIN_SUCCESS"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"
    LOGOUT = "LOGOUT"
    PROFILE_UPDATED = "PROFILE_UPDATED"
    ACCOUNT_DELETED = "ACCOUNT_DELETED"
