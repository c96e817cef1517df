"""
ServicoMetricasSLA - Agregação de SLA sobre um conjunto de chamados
- Avalia cada chamado pelo prazo de resolução
- Percentuais e médias protegidos contra divisão por zero
- Classifica chamados abertos em alertas, críticos e vencidos
"""
from collections import Counter
from typing import Dict, Iterable, List, Optional, Tuple

from .calculator import CalculadorSLA
from .politicas import PRIORIDADE_PADRAO
from .schemas import EntradaSLA, MetricasPrioridade, MetricasSLA, StatusSLA, StatusSLAEnum, TipoSLA


def formatar_horas(horas: float) -> str:
    """1.5 -> '1h 30min', 2 -> '2h', 0.25 -> '15min'"""
    if horas < 1:
        return f"{round(max(horas, 0) * 60)}min"
    h = int(horas)
    m = round((horas - h) * 60)
    if m == 60:
        h, m = h + 1, 0
    if m == 0:
        return f"{h}h"
    return f"{h}h {m}min"


class ServicoMetricasSLA:

    def __init__(self, calculador: Optional[CalculadorSLA] = None):
        self.calculador = calculador or CalculadorSLA()

    def avaliar(self, entradas: Iterable[EntradaSLA]) -> List[Tuple[EntradaSLA, StatusSLA]]:
        return [
            (e, self.calculador.calcular_status(e, TipoSLA.RESOLUCAO))
            for e in entradas
        ]

    def reduzir(self, entradas: Iterable[EntradaSLA]) -> MetricasSLA:
        """Métricas agregadas de SLA de resolução"""
        return self.reduzir_avaliacoes(self.avaliar(entradas))

    @staticmethod
    def reduzir_avaliacoes(avaliacoes: List[Tuple[EntradaSLA, StatusSLA]]) -> MetricasSLA:
        """Mesma redução de reduzir(), sobre avaliações já feitas"""
        total = len(avaliacoes)
        dentro = 0
        soma_tempos = 0.0
        prio_map: Dict[int, MetricasPrioridade] = {}

        for entrada, sla in avaliacoes:
            if sla.dentro_prazo:
                dentro += 1
            soma_tempos += sla.tempo_decorrido

            prior = entrada.prioridade if entrada.prioridade is not None else PRIORIDADE_PADRAO
            p = prio_map.setdefault(prior, MetricasPrioridade())
            p.total += 1
            if sla.dentro_prazo:
                p.dentro_sla += 1

        for p in prio_map.values():
            p.percentual = p.dentro_sla / p.total * 100 if p.total > 0 else 0.0

        return MetricasSLA(
            total_chamados=total,
            dentro_sla=dentro,
            fora_sla=total - dentro,
            percentual_cumprimento=dentro / total * 100 if total > 0 else 0.0,
            tempo_medio_resolucao=soma_tempos / total if total > 0 else 0.0,
            por_prioridade=prio_map,
        )

    @staticmethod
    def resumo_por_status(slas: Iterable[StatusSLA]) -> Dict[str, int]:
        """Quantidade de chamados em cada status presente"""
        return dict(Counter(s.status.value for s in slas))

    def classificar_criticos(self, entradas: Iterable[EntradaSLA]) -> Dict[str, List[Tuple[EntradaSLA, StatusSLA]]]:
        """Agrupa chamados em alertas/criticos/vencidos; chamados OK ficam de fora"""
        grupos: Dict[str, List[Tuple[EntradaSLA, StatusSLA]]] = {
            "alertas": [],
            "criticos": [],
            "vencidos": [],
        }
        destino = {
            StatusSLAEnum.ALERTA: "alertas",
            StatusSLAEnum.CRITICO: "criticos",
            StatusSLAEnum.VENCIDO: "vencidos",
        }
        for entrada, sla in self.avaliar(entradas):
            chave = destino.get(sla.status)
            if chave:
                grupos[chave].append((entrada, sla))
        return grupos
