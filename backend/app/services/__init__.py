"""Services Layer — transactional workflows over the storefront aggregate.

Invariants:
    - Services own commit/rollback; routes never touch the session directly
    - Ordering of sections, pages, blocks and products goes through OrderedCollection

Design Decisions:
    - One service per workflow (signup, auth session, builder, catalog, reader)
      for locality; shared position logic lives in one generic collection
"""
