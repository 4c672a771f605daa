"""Tests for Settings: URL rewriting, isolation parsing, bounds."""

import pytest
from pydantic import ValidationError

from market.config import Settings
from market.core.domain_types import IsolationLevel


def test_postgres_url_rewritten_for_asyncpg(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@host:5432/db")
    assert Settings().database_url == "postgresql+asyncpg://u:p@host:5432/db"


def test_sqlite_url_left_alone(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///market.db")
    assert Settings().database_url == "sqlite+aiosqlite:///market.db"


def test_isolation_level_parsed_from_env(monkeypatch):
    monkeypatch.setenv("PURCHASE_ISOLATION_LEVEL", "REPEATABLE READ")
    assert Settings().purchase_isolation_level is IsolationLevel.REPEATABLE_READ


def test_unknown_isolation_level_rejected(monkeypatch):
    monkeypatch.setenv("PURCHASE_ISOLATION_LEVEL", "READ UNCOMMITTED")
    with pytest.raises(ValidationError):
        Settings()


def test_report_top_n_must_be_positive():
    with pytest.raises(ValidationError):
        Settings(report_top_n=0)
