"""Constantes e funções auxiliares para normalização de status"""

import unicodedata
from typing import Dict, Set

from .schemas import StatusSLAEnum

# Status FINALIZADOS (chamado encerrado)
STATUS_FINALIZADOS: Set[str] = {
    "finalizado",
    "cancelado",
}

# Status ocultados pelo badge quando SLA_OCULTAR_FINALIZADOS está ativo
STATUS_OCULTA_BADGE: Set[str] = {
    "finalizado",
}

# Cores do badge por status (camada de apresentação)
CORES_STATUS_SLA: Dict[StatusSLAEnum, str] = {
    StatusSLAEnum.OK: "#22c55e",        # verde
    StatusSLAEnum.ALERTA: "#eab308",    # amarelo
    StatusSLAEnum.CRITICO: "#f97316",   # laranja
    StatusSLAEnum.VENCIDO: "#ef4444",   # vermelho
}

COR_INDEFINIDA = "#6b7280"


def normalizar_status(status: str) -> str:
    """
    Normaliza o status para comparação consistente.

    Exemplos:
        "Em Atendimento" -> "em_atendimento"
        "FINALIZADO" -> "finalizado"
        "Em análise" -> "em_analise"
    """
    if not status:
        return ""

    resultado = unicodedata.normalize("NFKD", status.strip().lower())
    resultado = "".join(c for c in resultado if not unicodedata.combining(c))
    return "_".join(resultado.split())


def deve_mostrar_sla(status: str, ocultar_finalizados: bool = False) -> bool:
    """Badge sempre visível, salvo se configurado para esconder chamados finalizados"""
    if not ocultar_finalizados:
        return True
    return normalizar_status(status) not in STATUS_OCULTA_BADGE


def cor_status(status: StatusSLAEnum) -> str:
    return CORES_STATUS_SLA.get(status, COR_INDEFINIDA)
