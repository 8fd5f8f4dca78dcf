"""Infrastructure Layer — storage, credentials, analytics dispatch and logging.

Invariants:
    - Infrastructure may use core/ types and errors, never services/ or api/
    - Driver and library errors are mapped to StorefrontError before leaving this layer

Design Decisions:
    - Thin wrappers over SQLAlchemy, bcrypt and python-jose keep the services
      free of library specifics
"""
