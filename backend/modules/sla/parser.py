"""Interpretação dos formatos legados de HORA_CHAMADO"""
from typing import Any, NamedTuple


class HoraDoDia(NamedTuple):
    horas: int
    minutos: int


HORA_ZERO = HoraDoDia(0, 0)


def _so_digitos(texto: str) -> bool:
    # isdigit() sozinho aceita "²" e outros dígitos que int() rejeita
    return texto.isascii() and texto.isdigit()


def _inteiro(parte: str) -> int:
    parte = parte.strip()
    return int(parte) if _so_digitos(parte) else 0


def interpretar_hora(bruto: Any) -> HoraDoDia:
    """
    Converte a hora do chamado em (horas, minutos).

    Exemplos:
        "14:05" / "14:05:30" -> (14, 5)
        "1405" -> (14, 5)
        "905" -> (9, 5)
        "14" -> (14, 0)
        "12345" -> (123, 45)
        "" / "abc" / None -> (0, 0)

    Não valida faixas: "2575" vira (25, 75) e quem combina com a data absorve o excesso.
    """
    if bruto is None:
        return HORA_ZERO

    texto = str(bruto).strip()
    if not texto:
        return HORA_ZERO

    if ":" in texto:
        partes = texto.split(":")
        minutos = _inteiro(partes[1]) if len(partes) > 1 else 0
        return HoraDoDia(_inteiro(partes[0]), minutos)

    if not _so_digitos(texto):
        return HORA_ZERO

    if len(texto) == 4:
        return HoraDoDia(int(texto[:2]), int(texto[2:]))
    if len(texto) == 3:
        return HoraDoDia(int(texto[0]), int(texto[1:]))
    if len(texto) == 2:
        return HoraDoDia(int(texto), 0)

    numero = int(texto)
    return HoraDoDia(numero // 100, numero % 100)
