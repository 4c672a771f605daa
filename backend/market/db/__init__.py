"""Database Metadata: the SQLAlchemy declarative Base shared by all models.

Design Decisions:
    - asyncpg driver for PostgreSQL (ADR: native async, no thread pool overhead)
"""
