"""Services Layer: market operations and their SQLAlchemy-backed stores.

Invariants:
    - Services own transaction boundaries; stores never commit
    - Stores implement the protocols in core/repository_protocols.py
"""
