from __future__ import annotations

import pytest

from realty_crm.core.config import _build_config
from realty_crm.core.exceptions import ConfigurationError


def test_defaults_for_development(monkeypatch):
    monkeypatch.delenv("DB_CONNECTIVITY_REQUIRED", raising=False)
    monkeypatch.delenv("FUNNEL_QUALIFICATION_FRAGMENT", raising=False)
    monkeypatch.delenv("FUNNEL_DEFAULT_MIN_ORDER", raising=False)
    monkeypatch.setenv("DATABASE_URL", "sqlite:///./test.db")

    config = _build_config("development")

    assert config.DB_CONNECTIVITY_REQUIRED is False
    assert config.FUNNEL_QUALIFICATION_FRAGMENT == "qualif"
    assert config.FUNNEL_DEFAULT_MIN_ORDER == 2


def test_production_requires_database_connectivity(monkeypatch):
    monkeypatch.delenv("DB_CONNECTIVITY_REQUIRED", raising=False)
    monkeypatch.setenv("DATABASE_URL", "postgresql://crm:secret@db:5432/crm")

    config = _build_config("production")

    assert config.DB_CONNECTIVITY_REQUIRED is True
    assert config.DEBUG is False


def test_rejects_unsupported_database_scheme(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "mysql://root@localhost/crm")
    with pytest.raises(ConfigurationError):
        _build_config("development")


def test_rejects_blank_qualification_fragment(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite:///./test.db")
    monkeypatch.setenv("FUNNEL_QUALIFICATION_FRAGMENT", "   ")
    with pytest.raises(ConfigurationError):
        _build_config("development")


def test_rejects_placeholder_credentials_in_production(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://crm:change_me@db:5432/crm")
    with pytest.raises(ConfigurationError):
        _build_config("production")


def test_rejects_non_numeric_default_min_order(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite:///./test.db")
    monkeypatch.setenv("FUNNEL_DEFAULT_MIN_ORDER", "two")
    with pytest.raises(ConfigurationError, match="FUNNEL_DEFAULT_MIN_ORDER"):
        _build_config("development")
