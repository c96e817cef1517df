from __future__ import annotations
from datetime import date, datetime
from sqlalchemy import Integer, String, Date, DateTime, Text
from sqlalchemy.orm import Mapped, mapped_column
from core.db import Base


class Chamado(Base):
    """Chamado do sistema de helpdesk (hora de abertura no formato legado)"""
    __tablename__ = "chamado"

    cod_chamado: Mapped[int] = mapped_column(Integer, primary_key=True)
    data_chamado: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    # "HH:MM", "HH:MM:SS", "HHMM", "HMM" ou "HH"
    hora_chamado: Mapped[str | None] = mapped_column(String(8), nullable=True)
    prior_chamado: Mapped[int | None] = mapped_column(Integer, nullable=True, default=100)
    status_chamado: Mapped[str | None] = mapped_column(String(50), nullable=True, index=True)
    assunto_chamado: Mapped[str | None] = mapped_column(Text, nullable=True)
    email_chamado: Mapped[str | None] = mapped_column(String(200), nullable=True)

    cod_cliente: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    nome_cliente: Mapped[str | None] = mapped_column(String(200), nullable=True)
    nome_recurso: Mapped[str | None] = mapped_column(String(200), nullable=True)

    conclusao_chamado: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    inicio_atendimento: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
