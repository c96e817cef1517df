"""
Cálculo de feriados brasileiros: fixos e móveis (baseados na Páscoa)
"""
from datetime import date, timedelta
from functools import lru_cache
from typing import Callable, Dict, FrozenSet, List

from dateutil.easter import easter

TIPO_NACIONAL = "nacional"
TIPO_PONTO_FACULTATIVO = "ponto_facultativo"


def calcular_feriados_fixos(ano: int) -> List[Dict]:
    """
    Retorna lista de feriados fixos (mesma data todo ano) para um ano específico

    Args:
        ano: Ano desejado

    Returns:
        Lista com dicts contendo data, nome e tipo
    """
    fixos = [
        (1, 1, "Confraternização Universal", TIPO_NACIONAL),
        (4, 21, "Tiradentes", TIPO_NACIONAL),
        (5, 1, "Dia do Trabalho", TIPO_NACIONAL),
        (9, 7, "Independência do Brasil", TIPO_NACIONAL),
        (10, 12, "Nossa Senhora Aparecida", TIPO_NACIONAL),
        (11, 2, "Finados", TIPO_NACIONAL),
        (11, 15, "Proclamação da República", TIPO_NACIONAL),
        (11, 20, "Dia da Consciência Negra", TIPO_NACIONAL),
        (12, 25, "Natal", TIPO_NACIONAL),
        (10, 28, "Dia do Servidor Público", TIPO_PONTO_FACULTATIVO),
    ]
    return [
        {"data": date(ano, mes, dia), "nome": nome, "tipo": tipo}
        for mes, dia, nome, tipo in fixos
    ]


def calcular_feriados_moveis(ano: int) -> List[Dict]:
    """
    Calcula feriados móveis (que mudam conforme Páscoa) para um ano específico

    Referência:
        - Carnaval (segunda e terça): 48 e 47 dias antes da Páscoa
        - Sexta-feira Santa: 2 dias antes da Páscoa
        - Corpus Christi: 60 dias depois da Páscoa
    """
    pascoa = easter(ano)
    return [
        {"data": pascoa - timedelta(days=48), "nome": "Segunda-feira de Carnaval", "tipo": TIPO_PONTO_FACULTATIVO},
        {"data": pascoa - timedelta(days=47), "nome": "Terça-feira de Carnaval", "tipo": TIPO_PONTO_FACULTATIVO},
        {"data": pascoa - timedelta(days=2), "nome": "Sexta-feira Santa", "tipo": TIPO_NACIONAL},
        {"data": pascoa, "nome": "Páscoa", "tipo": TIPO_NACIONAL},
        {"data": pascoa + timedelta(days=60), "nome": "Corpus Christi", "tipo": TIPO_PONTO_FACULTATIVO},
    ]


def gerar_todos_feriados(ano: int) -> List[Dict]:
    """Lista completa de feriados (fixos + móveis) de um ano, ordenada por data"""
    feriados = calcular_feriados_fixos(ano) + calcular_feriados_moveis(ano)
    feriados.sort(key=lambda x: x["data"])
    return feriados


@lru_cache(maxsize=64)
def datas_feriados(ano: int, incluir_pontos_facultativos: bool = False) -> FrozenSet[date]:
    return frozenset(
        f["data"] for f in gerar_todos_feriados(ano)
        if incluir_pontos_facultativos or f["tipo"] == TIPO_NACIONAL
    )


def criar_verificador_feriados(incluir_pontos_facultativos: bool = False) -> Callable[[date], bool]:
    """Predicado eh_feriado(date) para o HorarioComercial"""
    def eh_feriado(dia: date) -> bool:
        return dia in datas_feriados(dia.year, incluir_pontos_facultativos)
    return eh_feriado
