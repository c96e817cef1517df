"""Configurações comuns para Pytest (PYTHONPATH e banco em memória)"""

from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path

import pytest

BACKEND_DIR = Path(__file__).resolve().parents[1] / "backend"
if str(BACKEND_DIR) not in sys.path:  # pragma: no cover - inicialização
    sys.path.insert(0, str(BACKEND_DIR))

from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from core.db import Base  # noqa: E402
from ti.models.chamado import Chamado  # noqa: E402,F401


def relogio_fixo(instante: datetime):
    """Relógio injetável que sempre devolve o mesmo instante"""
    return lambda: instante


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = Session()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()
