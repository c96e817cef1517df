"""Utilidades de data/hora no fuso do Brasil"""
from datetime import datetime
from typing import Optional

from dateutil import tz

FUSO_BRASIL = tz.gettz("America/Sao_Paulo")


def now_brazil() -> datetime:
    return datetime.now(FUSO_BRASIL)


def now_brazil_naive() -> datetime:
    """Agora em America/Sao_Paulo, sem tzinfo (padrão dos datetimes do banco)"""
    return now_brazil().replace(tzinfo=None)


def to_brazil_naive(dt: Optional[datetime]) -> Optional[datetime]:
    """Converte datetime com fuso para horário de Brasília sem tzinfo; naive passa direto"""
    if dt is None or dt.tzinfo is None:
        return dt
    return dt.astimezone(FUSO_BRASIL).replace(tzinfo=None)
