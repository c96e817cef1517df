"""
Relógio de horário comercial
- Dias da semana no padrão 0=domingo ... 6=sábado
- Janela comercial [inicio, fim) em horas cheias
- Feriados opcionais via predicado eh_feriado(date) -> bool
"""
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Callable, FrozenSet, Optional

from .exceptions import DiasUteisInvalidosError, HorarioInvalidoError

# Limite de dias percorridos ao procurar o dia útil vizinho
_MAX_DIAS_BUSCA = 3660


@dataclass(frozen=True)
class HorarioComercial:
    """Horário comercial imutável usado em um cálculo"""

    inicio: int = 8
    fim: int = 18
    dias_uteis: FrozenSet[int] = field(default_factory=lambda: frozenset({1, 2, 3, 4, 5}))
    eh_feriado: Optional[Callable[[date], bool]] = field(default=None, compare=False)

    def __post_init__(self):
        if not (0 <= self.inicio < self.fim <= 23):
            raise HorarioInvalidoError(self.inicio, self.fim)
        if not self.dias_uteis or any(d not in range(7) for d in self.dias_uteis):
            raise DiasUteisInvalidosError(self.dias_uteis)
        # Aceita listas/sets vindos da configuração
        object.__setattr__(self, "dias_uteis", frozenset(self.dias_uteis))

    @property
    def hora_inicio(self) -> time:
        return time(self.inicio, 0)

    @property
    def hora_fim(self) -> time:
        return time(self.fim, 0)

    def abertura(self, dia: date) -> datetime:
        return datetime.combine(dia, self.hora_inicio)

    def fechamento(self, dia: date) -> datetime:
        return datetime.combine(dia, self.hora_fim)


HORARIO_COMERCIAL_PADRAO = HorarioComercial()


def dia_semana(dia: date) -> int:
    """Converte weekday() (0=segunda) para 0=domingo ... 6=sábado"""
    return (dia.weekday() + 1) % 7


def eh_dia_util(dia: date, horario: HorarioComercial = HORARIO_COMERCIAL_PADRAO) -> bool:
    """Dia da semana comercial e, se houver predicado, não feriado"""
    if dia_semana(dia) not in horario.dias_uteis:
        return False
    if horario.eh_feriado is not None and horario.eh_feriado(dia):
        return False
    return True


def eh_horario_comercial(instante: datetime, horario: HorarioComercial = HORARIO_COMERCIAL_PADRAO) -> bool:
    """
    Verifica se um instante está dentro do horário comercial

    Args:
        instante: Data/hora para verificar
        horario: Horário comercial

    Returns:
        True se o dia é útil e inicio <= hora < fim
    """
    return eh_dia_util(instante.date(), horario) and horario.inicio <= instante.hour < horario.fim


def dia_util_anterior(dia: date, horario: HorarioComercial = HORARIO_COMERCIAL_PADRAO) -> date:
    """Dia útil estritamente anterior a `dia`"""
    atual = dia - timedelta(days=1)
    for _ in range(_MAX_DIAS_BUSCA):
        if eh_dia_util(atual, horario):
            break
        atual -= timedelta(days=1)
    return atual


def proximo_dia_util(dia: date, horario: HorarioComercial = HORARIO_COMERCIAL_PADRAO) -> date:
    """Dia útil estritamente posterior a `dia`"""
    atual = dia + timedelta(days=1)
    for _ in range(_MAX_DIAS_BUSCA):
        if eh_dia_util(atual, horario):
            break
        atual += timedelta(days=1)
    return atual


def normalizar_fim(instante: datetime, horario: HorarioComercial = HORARIO_COMERCIAL_PADRAO) -> datetime:
    """
    Ajusta o instante final de uma janela para o último limite comercial válido.

    - fim:00:00 exato em dia útil é válido (fechamento inclusivo)
    - antes da abertura ou em dia não útil: fechamento do dia útil anterior
    - depois do fechamento em dia útil: fechamento do mesmo dia
    """
    dia = instante.date()

    if not eh_dia_util(dia, horario):
        return horario.fechamento(dia_util_anterior(dia, horario))

    if instante.time() < horario.hora_inicio:
        return horario.fechamento(dia_util_anterior(dia, horario))

    if instante > horario.fechamento(dia):
        return horario.fechamento(dia)

    return instante


def ajustar_inicio(instante: datetime, horario: HorarioComercial = HORARIO_COMERCIAL_PADRAO) -> datetime:
    """Avança o instante inicial para a próxima abertura comercial, se estiver fora da janela"""
    dia = instante.date()

    if not eh_dia_util(dia, horario):
        return horario.abertura(proximo_dia_util(dia, horario))

    if instante.time() < horario.hora_inicio:
        return horario.abertura(dia)

    if instante >= horario.fechamento(dia):
        return horario.abertura(proximo_dia_util(dia, horario))

    return instante
