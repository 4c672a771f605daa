"""Infrastructure Layer: database access, process-wide locks, logging setup.

Invariants:
    - SQLAlchemy exceptions never escape this layer unmapped
"""
