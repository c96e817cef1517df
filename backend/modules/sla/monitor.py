"""
MonitorSLA - atualização ao vivo do SLA de um chamado

Estados:
- OCIOSO: nada agendado (antes de montar / depois de desmontar)
- AGENDADO: chamado em aberto, reavaliado a cada tick
- CONGELADO: chamado com data de referência, avaliado uma única vez

Dentro do horário comercial o tick é rápido (60s); fora dele o monitor só
vigia (300s) até o expediente voltar.
"""
import asyncio
import enum
import logging
from datetime import datetime
from typing import Awaitable, Callable, Optional

from .calculator import CalculadorSLA
from .calendario import eh_horario_comercial
from .schemas import EntradaSLA, StatusSLA, TipoSLA

logger = logging.getLogger("sla.monitor")

TICK_PADRAO_SEGUNDOS = 60
VIGIA_PADRAO_SEGUNDOS = 300


class EstadoMonitor(str, enum.Enum):
    OCIOSO = "ocioso"
    AGENDADO = "agendado"
    CONGELADO = "congelado"


class ModoTick(str, enum.Enum):
    RAPIDO = "rapido"
    VIGIA = "vigia"


class MonitorSLA:
    """Dono da tarefa periódica de um chamado; desmontar() sempre cancela e aguarda a tarefa"""

    def __init__(
        self,
        entrada: EntradaSLA,
        calculador: Optional[CalculadorSLA] = None,
        ao_atualizar: Optional[Callable[[StatusSLA], None]] = None,
        intervalo_segundos: float = TICK_PADRAO_SEGUNDOS,
        intervalo_vigia_segundos: float = VIGIA_PADRAO_SEGUNDOS,
        dormir: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.entrada = entrada
        self.calculador = calculador or CalculadorSLA()
        self.ao_atualizar = ao_atualizar
        self.intervalo_segundos = intervalo_segundos
        self.intervalo_vigia_segundos = intervalo_vigia_segundos
        self._dormir = dormir

        self.estado = EstadoMonitor.OCIOSO
        self.modo: Optional[ModoTick] = None
        self.sla: Optional[StatusSLA] = None
        self.atualizacoes = 0
        self._tarefa: Optional[asyncio.Task] = None

    @classmethod
    def from_settings(cls, entrada: EntradaSLA, settings=None, **kwargs) -> "MonitorSLA":
        from .config import get_settings

        settings = settings or get_settings()
        kwargs.setdefault("calculador", CalculadorSLA.from_settings(settings))
        return cls(
            entrada,
            intervalo_segundos=settings.TICK_SEGUNDOS,
            intervalo_vigia_segundos=settings.VIGIA_SEGUNDOS,
            **kwargs,
        )

    @property
    def congelado(self) -> bool:
        return self.entrada.data_referencia is not None

    def _agora(self) -> datetime:
        return self.calculador.relogio()

    def _no_expediente(self) -> bool:
        return eh_horario_comercial(self._agora(), self.calculador.horario)

    def _atualizar(self) -> None:
        # Substitui o retrato inteiro; nunca altera campos do anterior
        try:
            sla = self.calculador.calcular_status(self.entrada, TipoSLA.RESOLUCAO)
        except Exception as e:
            # Mantém o último retrato válido; o próximo tick tenta de novo
            logger.error(f"Erro ao avaliar SLA do chamado {self.entrada.cod_chamado}: {e}", exc_info=True)
            return
        self.sla = sla
        self.atualizacoes += 1
        if self.ao_atualizar is not None:
            try:
                self.ao_atualizar(self.sla)
            except Exception as e:
                logger.error(f"Erro no callback do chamado {self.entrada.cod_chamado}: {e}", exc_info=True)

    async def montar(self) -> Optional[StatusSLA]:
        """Avalia imediatamente e agenda os ticks se o chamado ainda estiver correndo"""
        if self.estado != EstadoMonitor.OCIOSO:
            return self.sla

        self._atualizar()

        if self.congelado:
            self.estado = EstadoMonitor.CONGELADO
            logger.debug(f"SLA chamado {self.entrada.cod_chamado} congelado em {self.entrada.data_referencia}")
            return self.sla

        self.modo = ModoTick.RAPIDO if self._no_expediente() else ModoTick.VIGIA
        self._tarefa = asyncio.get_running_loop().create_task(self._executar())
        self.estado = EstadoMonitor.AGENDADO
        return self.sla

    async def _executar(self) -> None:
        while True:
            intervalo = self.intervalo_segundos if self.modo == ModoTick.RAPIDO else self.intervalo_vigia_segundos
            await self._dormir(intervalo)

            no_expediente = self._no_expediente()
            if self.modo == ModoTick.RAPIDO or no_expediente:
                self._atualizar()

            novo_modo = ModoTick.RAPIDO if no_expediente else ModoTick.VIGIA
            if novo_modo != self.modo:
                logger.debug(f"Monitor chamado {self.entrada.cod_chamado}: {self.modo.value} -> {novo_modo.value}")
                self.modo = novo_modo

    async def desmontar(self) -> None:
        """Cancela o tick pendente e volta a OCIOSO"""
        tarefa, self._tarefa = self._tarefa, None
        if tarefa is not None:
            tarefa.cancel()
            try:
                await tarefa
            except asyncio.CancelledError:
                pass
        self.estado = EstadoMonitor.OCIOSO
        self.modo = None

    async def __aenter__(self) -> "MonitorSLA":
        await self.montar()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.desmontar()
