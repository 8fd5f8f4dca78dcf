"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Store is the aggregate root of the storefront; Account of identity

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from app.models.account import Account  # noqa: F401
from app.models.creator_profile import CreatorProfile  # noqa: F401
from app.models.slug_reservation import SlugReservation  # noqa: F401
from app.models.refresh_token import RefreshToken  # noqa: F401
from app.models.store import Store  # noqa: F401
from app.models.store_theme import StoreTheme  # noqa: F401
from app.models.store_section import StoreSection  # noqa: F401
from app.models.store_page import StorePage  # noqa: F401
from app.models.page_block import PageBlock  # noqa: F401
from app.models.product import Product  # noqa: F401
from app.models.analytics_event import AnalyticsEvent  # noqa: F401
