"""Endpoints da API de SLA"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import Optional
import logging

from core.db import get_db
from core.utils import now_brazil_naive
from .cache_service import get_cache_manager
from .exceptions import ChamadoNaoEncontradoError
from .scheduler import get_scheduler
from .schemas import BadgeSLAResponse, ChamadoSLAResponse, CriticosResponse
from .service import SlaService, TIPOS_RELATORIO

logger = logging.getLogger("sla.router")

router = APIRouter(prefix="/sla", tags=["SLA"])


def get_sla_service(db: Session = Depends(get_db)) -> SlaService:
    return SlaService(db)


def _validar_periodo(mes: Optional[int], ano: Optional[int]):
    if mes is None or ano is None:
        raise HTTPException(status_code=400, detail="Parâmetros mes e ano são obrigatórios")
    if not 1 <= mes <= 12:
        raise HTTPException(status_code=400, detail="Mês inválido. Use valores entre 1 e 12")
    if not 2000 <= ano <= 3000:
        raise HTTPException(status_code=400, detail="Ano inválido")


def _cliente_efetivo(is_admin: bool, cod_cliente: Optional[int]) -> Optional[int]:
    """Admin vê todos os clientes (ou filtra por um); demais precisam informar o cliente"""
    if not is_admin and cod_cliente is None:
        raise HTTPException(status_code=400, detail="Parâmetro codCliente é obrigatório para usuários não admin")
    return cod_cliente


@router.get("")
async def obter_sla(
    mes: Optional[int] = Query(None),
    ano: Optional[int] = Query(None),
    is_admin: bool = Query(False, alias="isAdmin"),
    cod_cliente: Optional[int] = Query(None, alias="codCliente"),
    status_filter: Optional[str] = Query(None, alias="statusFilter"),
    tipo: str = Query("resumo"),
    service: SlaService = Depends(get_sla_service),
):
    """
    Relatório de SLA do mês.
    - tipo=metricas: apenas métricas agregadas
    - tipo=resumo: métricas, contagem por status e até 10 chamados críticos/vencidos
    - tipo=detalhado: SLA de resposta e resolução de cada chamado
    """
    _validar_periodo(mes, ano)
    cod_cliente = _cliente_efetivo(is_admin, cod_cliente)
    if tipo not in TIPOS_RELATORIO:
        raise HTTPException(status_code=400, detail=f"Tipo inválido. Use: {', '.join(sorted(TIPOS_RELATORIO))}")

    try:
        return service.relatorio_periodo(mes, ano, cod_cliente, status_filter, tipo)
    except Exception as e:
        logger.error(f"Erro ao calcular SLA {mes:02d}/{ano}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Erro ao calcular SLA: {str(e)}")


@router.get("/chamados")
async def listar_chamados_sla(
    mes: Optional[int] = Query(None),
    ano: Optional[int] = Query(None),
    is_admin: bool = Query(False, alias="isAdmin"),
    cod_cliente: Optional[int] = Query(None, alias="codCliente"),
    status_filter: Optional[str] = Query(None, alias="statusFilter"),
    cod_chamado: Optional[int] = Query(None, alias="codChamado"),
    sla_status: Optional[str] = Query(None, alias="slaStatus"),
    incluir_sla: bool = Query(True, alias="includeSLA"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=500),
    service: SlaService = Depends(get_sla_service),
):
    """Lista paginada de chamados do mês com colunas SLA_*"""
    _validar_periodo(mes, ano)
    cod_cliente = _cliente_efetivo(is_admin, cod_cliente)

    try:
        return service.listar_chamados_sla(
            mes, ano, cod_cliente, status_filter, cod_chamado, sla_status, page, limit, incluir_sla
        )
    except Exception as e:
        logger.error(f"Erro ao listar chamados com SLA: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Erro ao listar chamados: {str(e)}")


@router.get("/chamado/{cod_chamado}", response_model=ChamadoSLAResponse)
async def obter_sla_chamado(cod_chamado: int, service: SlaService = Depends(get_sla_service)):
    """SLA de resposta e resolução de um chamado"""
    try:
        return service.calcular_sla_chamado(cod_chamado)
    except ChamadoNaoEncontradoError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Erro ao calcular SLA do chamado {cod_chamado}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Erro ao calcular SLA: {str(e)}")


@router.get("/chamado/{cod_chamado}/badge", response_model=BadgeSLAResponse)
async def obter_badge_chamado(cod_chamado: int, service: SlaService = Depends(get_sla_service)):
    """Cor, tooltip e visibilidade do badge de SLA na tabela de chamados"""
    try:
        return service.obter_badge(cod_chamado)
    except ChamadoNaoEncontradoError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Erro ao montar badge do chamado {cod_chamado}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Erro ao calcular SLA: {str(e)}")


@router.get("/config")
async def obter_config(service: SlaService = Depends(get_sla_service)):
    """Horário comercial e tabelas de prazos por prioridade"""
    return service.obter_config()


@router.get("/criticos", response_model=CriticosResponse)
async def obter_criticos(
    forcar: bool = Query(False),
    service: SlaService = Depends(get_sla_service),
):
    """Chamados em alerta, críticos e vencidos (últimos 30 dias, em aberto)"""
    cache = get_cache_manager()
    if not forcar:
        em_cache = cache.get_criticos()
        if em_cache is not None:
            return em_cache

    try:
        criticos = service.verificar_criticos()
    except Exception as e:
        logger.error(f"Erro ao verificar chamados críticos: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Erro ao verificar chamados críticos: {str(e)}")

    cache.set_criticos(criticos)
    return criticos


@router.get("/health")
async def sla_health():
    return {
        "status": "ok",
        "modulo": "sla",
        "timestamp": now_brazil_naive().isoformat(),
        "scheduler": get_scheduler().get_status(),
        "cache": get_cache_manager().get_stats(),
    }
