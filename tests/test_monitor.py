"""Testes do monitor de atualização ao vivo"""

from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime, timedelta

from modules.sla.calculator import CalculadorSLA
from modules.sla.config import SlaSettings
from modules.sla.monitor import EstadoMonitor, ModoTick, MonitorSLA
from modules.sla.schemas import EntradaSLA, StatusSLAEnum


class Relogio:
    def __init__(self, inicio: datetime):
        self.agora = inicio

    def __call__(self) -> datetime:
        return self.agora

    def avancar(self, segundos: float) -> None:
        self.agora += timedelta(seconds=segundos)


class DormirControlado:
    """Avança o relógio a cada tick; depois de `limite` ticks fica parado até ser cancelado"""

    def __init__(self, relogio: Relogio, limite: int):
        self.relogio = relogio
        self.limite = limite
        self.intervalos: list = []

    async def __call__(self, segundos: float) -> None:
        if len(self.intervalos) >= self.limite:
            await asyncio.Event().wait()
        self.intervalos.append(segundos)
        self.relogio.avancar(segundos)


async def _drenar() -> None:
    for _ in range(10):
        await asyncio.sleep(0)


def _entrada(**kwargs) -> EntradaSLA:
    return EntradaSLA(cod_chamado=42, data_chamado=date(2025, 3, 3), hora_chamado="09:00", prioridade=1, **kwargs)


def _monitor(inicio: datetime, limite: int = 3, **kwargs):
    relogio = Relogio(inicio)
    dormir = DormirControlado(relogio, limite)
    monitor = MonitorSLA(_entrada(**kwargs), calculador=CalculadorSLA(relogio=relogio), dormir=dormir)
    return monitor, dormir


def test_chamado_congelado_avalia_uma_vez_sem_agendar() -> None:
    async def cenario():
        monitor, dormir = _monitor(datetime(2025, 3, 3, 13, 0), data_referencia=datetime(2025, 3, 3, 11, 0))
        sla = await monitor.montar()
        await _drenar()
        assert monitor.estado == EstadoMonitor.CONGELADO
        assert monitor._tarefa is None
        assert monitor.atualizacoes == 1
        assert dormir.intervalos == []
        assert sla.tempo_decorrido == 2.0
        await monitor.desmontar()
        assert monitor.estado == EstadoMonitor.OCIOSO

    asyncio.run(cenario())


def test_no_expediente_reavalia_a_cada_tick() -> None:
    async def cenario():
        monitor, dormir = _monitor(datetime(2025, 3, 3, 10, 0))
        primeiro = await monitor.montar()
        assert monitor.estado == EstadoMonitor.AGENDADO
        assert monitor.modo == ModoTick.RAPIDO
        await _drenar()
        assert dormir.intervalos == [60, 60, 60]
        assert monitor.atualizacoes == 4
        assert monitor.sla.tempo_decorrido == 1.05
        assert monitor.sla is not primeiro
        assert primeiro.tempo_decorrido == 1.0
        await monitor.desmontar()

    asyncio.run(cenario())


def test_fora_do_expediente_so_vigia() -> None:
    async def cenario():
        monitor, dormir = _monitor(datetime(2025, 3, 8, 10, 0))
        await monitor.montar()
        assert monitor.estado == EstadoMonitor.AGENDADO
        assert monitor.modo == ModoTick.VIGIA
        await _drenar()
        assert dormir.intervalos == [300, 300, 300]
        assert monitor.atualizacoes == 1
        await monitor.desmontar()

    asyncio.run(cenario())


def test_volta_ao_tick_rapido_quando_expediente_abre() -> None:
    async def cenario():
        monitor, dormir = _monitor(datetime(2025, 3, 4, 7, 50))
        await monitor.montar()
        assert monitor.modo == ModoTick.VIGIA
        await _drenar()
        assert dormir.intervalos == [300, 300, 60]
        assert monitor.modo == ModoTick.RAPIDO
        assert monitor.atualizacoes == 3
        await monitor.desmontar()

    asyncio.run(cenario())


def test_ultimo_tick_do_dia_atualiza_e_passa_a_vigiar() -> None:
    async def cenario():
        monitor, dormir = _monitor(datetime(2025, 3, 3, 17, 58))
        await monitor.montar()
        await _drenar()
        assert dormir.intervalos == [60, 60, 300]
        assert monitor.modo == ModoTick.VIGIA
        assert monitor.atualizacoes == 3
        assert monitor.sla.status == StatusSLAEnum.VENCIDO
        await monitor.desmontar()

    asyncio.run(cenario())


def test_desmontar_cancela_a_tarefa() -> None:
    async def cenario():
        monitor, _ = _monitor(datetime(2025, 3, 3, 10, 0))
        await monitor.montar()
        await _drenar()
        tarefa = monitor._tarefa
        await monitor.desmontar()
        assert tarefa.cancelled()
        assert monitor._tarefa is None
        assert monitor.estado == EstadoMonitor.OCIOSO
        assert monitor.modo is None

    asyncio.run(cenario())


def test_montar_duas_vezes_nao_duplica_tarefa() -> None:
    async def cenario():
        monitor, _ = _monitor(datetime(2025, 3, 3, 10, 0), limite=0)
        await monitor.montar()
        tarefa = monitor._tarefa
        await monitor.montar()
        assert monitor._tarefa is tarefa
        assert monitor.atualizacoes == 1
        await monitor.desmontar()

    asyncio.run(cenario())


def test_context_manager() -> None:
    async def cenario():
        monitor, _ = _monitor(datetime(2025, 3, 3, 10, 0), limite=0)
        async with monitor as m:
            assert m.estado == EstadoMonitor.AGENDADO
            tarefa = m._tarefa
        assert tarefa.done()
        assert monitor.estado == EstadoMonitor.OCIOSO

    asyncio.run(cenario())


def test_erro_no_callback_e_logado(caplog) -> None:
    def callback_quebrado(_sla):
        raise RuntimeError("falhou")

    async def cenario():
        relogio = Relogio(datetime(2025, 3, 3, 13, 0))
        monitor = MonitorSLA(
            _entrada(data_referencia=datetime(2025, 3, 3, 11, 0)),
            calculador=CalculadorSLA(relogio=relogio),
            ao_atualizar=callback_quebrado,
        )
        await monitor.montar()
        return monitor

    with caplog.at_level(logging.ERROR, logger="sla.monitor"):
        monitor = asyncio.run(cenario())

    assert monitor.estado == EstadoMonitor.CONGELADO
    assert monitor.sla is not None
    assert "Erro no callback do chamado 42" in caplog.text


class CalculadorQueFalha(CalculadorSLA):
    """Avalia normalmente na montagem e falha em todos os ticks seguintes"""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.chamadas = 0

    def calcular_status(self, entrada, tipo_sla=None):
        self.chamadas += 1
        if self.chamadas > 1:
            raise RuntimeError("avaliador indisponível")
        return super().calcular_status(entrada, tipo_sla)


def test_erro_na_avaliacao_nao_derruba_o_tick(caplog) -> None:
    async def cenario():
        relogio = Relogio(datetime(2025, 3, 3, 10, 0))
        calculador = CalculadorQueFalha(relogio=relogio)
        monitor = MonitorSLA(_entrada(), calculador=calculador, dormir=DormirControlado(relogio, 3))
        primeiro = await monitor.montar()
        await _drenar()
        tarefa = monitor._tarefa
        assert not tarefa.done()
        assert calculador.chamadas == 4
        assert monitor.atualizacoes == 1
        assert monitor.sla is primeiro
        await monitor.desmontar()
        assert tarefa.cancelled()
        assert monitor.estado == EstadoMonitor.OCIOSO

    with caplog.at_level(logging.ERROR, logger="sla.monitor"):
        asyncio.run(cenario())

    assert "Erro ao avaliar SLA do chamado 42" in caplog.text


def test_callback_recebe_cada_retrato() -> None:
    recebidos = []

    async def cenario():
        relogio = Relogio(datetime(2025, 3, 3, 10, 0))
        monitor = MonitorSLA(
            _entrada(),
            calculador=CalculadorSLA(relogio=relogio),
            ao_atualizar=recebidos.append,
            dormir=DormirControlado(relogio, 2),
        )
        await monitor.montar()
        await _drenar()
        await monitor.desmontar()

    asyncio.run(cenario())
    assert [s.tempo_decorrido for s in recebidos] == [1.0, 1.0167, 1.0333]


def test_from_settings_usa_intervalos_configurados() -> None:
    settings = SlaSettings(TICK_SEGUNDOS=30, VIGIA_SEGUNDOS=120)
    monitor = MonitorSLA.from_settings(_entrada(), settings=settings)
    assert monitor.intervalo_segundos == 30
    assert monitor.intervalo_vigia_segundos == 120
    assert monitor.estado == EstadoMonitor.OCIOSO
