"""
Tabelas de política de SLA por prioridade.

Existem duas tabelas candidatas; a ativa é escolhida por SLA_TABELA_POLITICAS.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict

logger = logging.getLogger("sla.politicas")

PRIORIDADE_PADRAO = 100


@dataclass(frozen=True)
class PoliticaSLA:
    prioridade: int
    tempo_resposta_horas: float
    tempo_resolucao_horas: float

    def prazo(self, tipo_sla) -> float:
        """Prazo em horas para 'resposta' ou 'resolucao'"""
        valor = getattr(tipo_sla, "value", tipo_sla)
        if valor == "resposta":
            return self.tempo_resposta_horas
        return self.tempo_resolucao_horas


# Prazos escalonados por prioridade
POLITICAS_ESCALONADAS: Dict[int, PoliticaSLA] = {
    1: PoliticaSLA(1, 2, 8),        # Crítico
    2: PoliticaSLA(2, 4, 16),       # Alto
    3: PoliticaSLA(3, 8, 24),       # Médio
    4: PoliticaSLA(4, 16, 48),      # Baixo
    PRIORIDADE_PADRAO: PoliticaSLA(PRIORIDADE_PADRAO, 24, 72),  # Padrão
}

# Prazo único de 8h para qualquer prioridade
POLITICAS_PLANAS: Dict[int, PoliticaSLA] = {
    p: PoliticaSLA(p, 8, 8) for p in (1, 2, 3, 4, PRIORIDADE_PADRAO)
}

TABELAS_POLITICAS: Dict[str, Dict[int, PoliticaSLA]] = {
    "escalonada": POLITICAS_ESCALONADAS,
    "plana": POLITICAS_PLANAS,
}


def obter_tabela(nome: str) -> Dict[int, PoliticaSLA]:
    """Tabela pelo nome; nomes desconhecidos caem na escalonada"""
    tabela = TABELAS_POLITICAS.get((nome or "").strip().lower())
    if tabela is None:
        logger.warning(f"Tabela de políticas desconhecida: {nome!r}, usando 'escalonada'")
        return POLITICAS_ESCALONADAS
    return tabela


def obter_politica(prioridade: Any, tabela: Dict[int, PoliticaSLA] = POLITICAS_ESCALONADAS) -> PoliticaSLA:
    """Política da prioridade, ou a padrão (100) se ausente/desconhecida"""
    try:
        chave = int(prioridade)
    except (TypeError, ValueError):
        chave = PRIORIDADE_PADRAO

    politica = tabela.get(chave)
    if politica is None:
        logger.debug(f"Prioridade {prioridade!r} sem política, usando padrão {PRIORIDADE_PADRAO}")
        politica = tabela.get(PRIORIDADE_PADRAO) or POLITICAS_ESCALONADAS[PRIORIDADE_PADRAO]
    return politica
