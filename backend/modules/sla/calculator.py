"""
Sistema de cálculo de SLA
- Considera horas comerciais (08:00-18:00 por padrão)
- Considera dias úteis (seg-sex por padrão, feriados opcionais)
- Fim da janela fora do expediente é recuado para o último fechamento válido
- Status: OK (<75%), ALERTA (75-90%), CRITICO (90-100%), VENCIDO (>=100%)
"""
from datetime import date, datetime, time, timedelta
from typing import Callable, Dict, Optional
import logging

from core.utils import now_brazil_naive, to_brazil_naive

from .calendario import (
    HORARIO_COMERCIAL_PADRAO,
    HorarioComercial,
    ajustar_inicio,
    eh_dia_util,
    normalizar_fim,
)
from .parser import interpretar_hora
from .politicas import POLITICAS_ESCALONADAS, PoliticaSLA, obter_politica
from .schemas import EntradaSLA, StatusSLA, StatusSLAEnum, TipoSLA

logger = logging.getLogger("sla.calculator")

PERCENTUAL_ALERTA = 75.0
PERCENTUAL_CRITICO = 90.0
PERCENTUAL_VENCIDO = 100.0


def calcular_horas_uteis(
    data_inicio: datetime,
    data_fim: datetime,
    horario: HorarioComercial = HORARIO_COMERCIAL_PADRAO
) -> float:
    """
    Calcula horas úteis entre duas datas (considerando horário comercial e dias úteis)

    Args:
        data_inicio: Data/hora inicial
        data_fim: Data/hora final
        horario: Horário comercial

    Returns:
        Número de horas úteis, arredondado em 4 casas
    """
    if data_inicio >= data_fim:
        return 0.0

    fim = normalizar_fim(data_fim, horario)
    if data_inicio >= fim:
        return 0.0

    cursor = ajustar_inicio(data_inicio, horario)
    total = 0.0

    while cursor < fim:
        dia = cursor.date()
        if eh_dia_util(dia, horario):
            j_ini = max(horario.abertura(dia), cursor)
            j_fim = min(horario.fechamento(dia), fim)
            if j_ini < j_fim:
                total += (j_fim - j_ini).total_seconds() / 3600
        cursor = horario.abertura(dia + timedelta(days=1))

    return round(total, 4)


def classificar_status(percentual: float) -> StatusSLAEnum:
    """Faixas semiabertas: 75 já é ALERTA, 90 já é CRITICO, 100 é VENCIDO"""
    if percentual >= PERCENTUAL_VENCIDO:
        return StatusSLAEnum.VENCIDO
    if percentual >= PERCENTUAL_CRITICO:
        return StatusSLAEnum.CRITICO
    if percentual >= PERCENTUAL_ALERTA:
        return StatusSLAEnum.ALERTA
    return StatusSLAEnum.OK


def montar_abertura(data_chamado: date, hora_chamado: Optional[str]) -> datetime:
    """Data do chamado + hora legada; horas/minutos fora da faixa rolam para frente"""
    hora = interpretar_hora(hora_chamado)
    meia_noite = datetime.combine(data_chamado, time.min)
    try:
        return meia_noite + timedelta(hours=hora.horas, minutes=hora.minutos)
    except (OverflowError, ValueError):
        logger.warning(f"Hora do chamado fora de faixa: {hora_chamado!r}, usando 00:00")
        return meia_noite


class CalculadorSLA:
    """Avaliador de SLA por chamado; sem estado entre chamadas"""

    def __init__(
        self,
        horario: Optional[HorarioComercial] = None,
        politicas: Optional[Dict[int, PoliticaSLA]] = None,
        relogio: Optional[Callable[[], datetime]] = None,
    ):
        self.horario = horario or HORARIO_COMERCIAL_PADRAO
        self.politicas = politicas if politicas is not None else POLITICAS_ESCALONADAS
        self.relogio = relogio or now_brazil_naive

    @classmethod
    def from_settings(cls, settings=None, relogio: Optional[Callable[[], datetime]] = None) -> "CalculadorSLA":
        from .config import get_settings
        from .politicas import obter_tabela

        settings = settings or get_settings()
        return cls(
            horario=settings.horario_comercial(),
            politicas=obter_tabela(settings.TABELA_POLITICAS),
            relogio=relogio,
        )

    def obter_politica(self, prioridade) -> PoliticaSLA:
        return obter_politica(prioridade, self.politicas)

    def calcular_horas_uteis(self, data_inicio: datetime, data_fim: datetime) -> float:
        return calcular_horas_uteis(data_inicio, data_fim, self.horario)

    def calcular_status(self, entrada: EntradaSLA, tipo_sla: Optional[TipoSLA] = None) -> StatusSLA:
        """
        Calcula o status de SLA de um chamado

        Args:
            entrada: Dados do chamado
            tipo_sla: Sobrescreve entrada.tipo_sla quando informado

        Returns:
            StatusSLA novo a cada chamada
        """
        tipo = tipo_sla or entrada.tipo_sla
        politica = self.obter_politica(entrada.prioridade)
        prazo_total = politica.prazo(tipo)

        abertura = montar_abertura(entrada.data_chamado, entrada.hora_chamado)
        referencia = to_brazil_naive(entrada.data_referencia) or self.relogio()

        tempo_decorrido = calcular_horas_uteis(abertura, referencia, self.horario)
        tempo_restante = round(max(0.0, prazo_total - tempo_decorrido), 4)
        percentual = min(100.0, tempo_decorrido / prazo_total * 100) if prazo_total > 0 else 100.0

        status = classificar_status(percentual)
        logger.debug(
            f"SLA chamado {entrada.cod_chamado}: {tempo_decorrido}h de {prazo_total}h "
            f"({percentual:.1f}%) -> {status.value}"
        )

        return StatusSLA(
            tempo_decorrido=tempo_decorrido,
            tempo_restante=tempo_restante,
            percentual_usado=round(percentual, 1),
            prazo_total=prazo_total,
            dentro_prazo=percentual < PERCENTUAL_VENCIDO,
            status=status,
        )
