"""Testes da camada de serviço: avaliação única por relatório e cache de métricas"""

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from modules.sla.cache_service import CacheManager
from modules.sla.calculator import CalculadorSLA
from modules.sla.config import SlaSettings
from modules.sla.schemas import TipoSLA
from modules.sla.service import SlaService
from ti.models.chamado import Chamado


class RelogioQueAnda:
    """Cada leitura devolve um minuto a mais que a anterior"""

    def __init__(self, inicio: datetime):
        self.agora = inicio

    def __call__(self) -> datetime:
        atual = self.agora
        self.agora += timedelta(minutes=1)
        return atual


class CalculadorContador(CalculadorSLA):
    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.chamadas = {TipoSLA.RESPOSTA: 0, TipoSLA.RESOLUCAO: 0}

    def calcular_status(self, entrada, tipo_sla=None):
        self.chamadas[tipo_sla or entrada.tipo_sla] += 1
        return super().calcular_status(entrada, tipo_sla)


def _chamado(cod: int, dia: date, hora: str, cliente: int = 10, **kwargs) -> Chamado:
    return Chamado(cod_chamado=cod, data_chamado=dia, hora_chamado=hora, prior_chamado=1,
                   status_chamado="Aberto", assunto_chamado="Teste", cod_cliente=cliente,
                   nome_cliente=f"Cliente {cliente}", **kwargs)


@pytest.fixture
def chamados(db_session):
    db_session.add_all([
        _chamado(1, date(2025, 3, 10), "09:00"),
        _chamado(2, date(2025, 3, 7), "17:00", cliente=20),
        _chamado(3, date(2025, 3, 10), "10:50"),
    ])
    db_session.commit()
    return db_session


@pytest.fixture
def calculador() -> CalculadorContador:
    # Chamado 1 cruza 90% do prazo (16:12) durante o relatório
    return CalculadorContador(relogio=RelogioQueAnda(datetime(2025, 3, 10, 16, 11)))


@pytest.fixture
def service(chamados, calculador) -> SlaService:
    return SlaService(chamados, calculador=calculador, settings=SlaSettings(), cache=CacheManager(ttl_seconds=60))


@pytest.mark.parametrize("tipo", ["resumo", "detalhado", "metricas"])
def test_relatorio_avalia_cada_chamado_uma_vez(service: SlaService, calculador: CalculadorContador, tipo) -> None:
    service.relatorio_periodo(3, 2025, tipo=tipo)
    assert calculador.chamadas[TipoSLA.RESOLUCAO] == 3
    assert calculador.chamadas[TipoSLA.RESPOSTA] == (0 if tipo == "metricas" else 3)


def test_resumo_coerente_com_metricas_e_criticos(service: SlaService) -> None:
    data = service.relatorio_periodo(3, 2025, tipo="resumo")
    resumo = data["resumoPorStatus"]
    assert sum(resumo.values()) == data["totalChamados"] == 3
    assert data["metricas"]["foraSLA"] == resumo.get("VENCIDO", 0)
    assert len(data["chamadosCriticos"]) == resumo.get("CRITICO", 0) + resumo.get("VENCIDO", 0)


def test_detalhado_coerente_com_metricas(service: SlaService) -> None:
    data = service.relatorio_periodo(3, 2025, tipo="detalhado")
    vencidos = [d for d in data["data"] if not d["sla"]["resolucao"]["dentroPrazo"]]
    assert data["metricas"]["foraSLA"] == len(vencidos)


def test_lista_avalia_cada_chamado_uma_vez(service: SlaService, calculador: CalculadorContador) -> None:
    data = service.listar_chamados_sla(3, 2025)
    assert calculador.chamadas[TipoSLA.RESOLUCAO] == 3
    fora = sum(1 for linha in data["data"] if not linha["SLA_DENTRO_PRAZO"])
    assert data["metricas"]["foraSLA"] == fora


def test_metricas_sao_cacheadas_por_periodo_e_cliente(service: SlaService, chamados) -> None:
    primeira = service.relatorio_periodo(3, 2025, tipo="metricas")
    assert primeira["metricas"]["totalChamados"] == 3

    chamados.add(_chamado(4, date(2025, 3, 10), "08:00"))
    chamados.commit()

    assert service.relatorio_periodo(3, 2025, tipo="metricas")["metricas"] == primeira["metricas"]
    assert service.relatorio_periodo(3, 2025, cod_cliente=10, tipo="metricas")["metricas"]["totalChamados"] == 3
    assert service.cache.get_metricas(3, 2025, 10)["totalChamados"] == 3


def test_metricas_com_filtro_de_status_nao_usam_cache(service: SlaService, chamados) -> None:
    service.relatorio_periodo(3, 2025, tipo="metricas")
    chamados.add(_chamado(4, date(2025, 3, 10), "08:00"))
    chamados.commit()

    filtrado = service.relatorio_periodo(3, 2025, status="aberto", tipo="metricas")
    assert filtrado["metricas"]["totalChamados"] == 4
    assert service.cache.get_metricas(3, 2025)["totalChamados"] == 3
