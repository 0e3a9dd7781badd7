from __future__ import annotations

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from realty_crm.database.db import enable_sqlite_foreign_keys
from realty_crm.database.models import Base, FunnelStage

DEFAULT_STAGES = (
    ("new", "Novo Lead", 0),
    ("contact", "Contato Inicial", 1),
    ("qualified", "Qualificação", 2),
    ("visit", "Visita Agendada", 3),
    ("proposal", "Proposta", 4),
    ("negotiation", "Negociação", 5),
)


def build_session():
    engine = create_engine("sqlite:///:memory:")
    enable_sqlite_foreign_keys(engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    return TestingSessionLocal()


def seed_stages(session) -> dict[str, FunnelStage]:
    stages = {}
    for key, name, order in DEFAULT_STAGES:
        stage = FunnelStage(name=name, order=order)
        session.add(stage)
        stages[key] = stage
    session.commit()
    return stages


@pytest.fixture
def db_session():
    session = build_session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def stages(db_session):
    return seed_stages(db_session)
