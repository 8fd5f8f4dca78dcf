"""Database Infrastructure — SQLAlchemy declarative Base.

Invariants:
    - Engines and sessions are owned by DatabaseSessionManager (infrastructure/database.py)
    - All sessions are async (AsyncSession)

Design Decisions:
    - asyncpg driver for PostgreSQL: native async, no thread pool overhead
"""
