"""Database Metadata — SQLAlchemy declarative base.

Invariants:
    - Engine and session lifecycle live in infrastructure/database.py, not here

Design Decisions:
    - asyncpg driver for PostgreSQL (native async, no thread pool overhead)
"""
