"""Testes das configurações lidas do ambiente"""

from __future__ import annotations

from datetime import date

import pytest

from modules.sla.config import SlaSettings, recarregar_settings
from modules.sla.exceptions import HorarioInvalidoError


def test_padroes(monkeypatch) -> None:
    for nome in ("SLA_HORA_INICIO", "SLA_HORA_FIM", "SLA_DIAS_UTEIS", "SLA_TABELA_POLITICAS", "SLA_CONSIDERA_FERIADOS"):
        monkeypatch.delenv(nome, raising=False)
    settings = SlaSettings.from_env()
    assert settings.BUSINESS_HOUR_START == 8
    assert settings.BUSINESS_HOUR_END == 18
    assert settings.BUSINESS_DAYS == [1, 2, 3, 4, 5]
    assert settings.TABELA_POLITICAS == "escalonada"
    horario = settings.horario_comercial()
    assert horario.eh_feriado is None


def test_le_variaveis_de_ambiente(monkeypatch) -> None:
    monkeypatch.setenv("SLA_HORA_INICIO", "9")
    monkeypatch.setenv("SLA_HORA_FIM", "17")
    monkeypatch.setenv("SLA_DIAS_UTEIS", "1,2,3,4,5,6")
    monkeypatch.setenv("SLA_TABELA_POLITICAS", "Plana")
    monkeypatch.setenv("SLA_CONSIDERA_FERIADOS", "true")
    monkeypatch.setenv("SLA_OCULTAR_FINALIZADOS", "1")
    monkeypatch.setenv("SLA_SCHEDULER_ENABLED", "false")

    settings = recarregar_settings()

    assert settings.BUSINESS_HOUR_START == 9
    assert settings.BUSINESS_HOUR_END == 17
    assert settings.BUSINESS_DAYS == [1, 2, 3, 4, 5, 6]
    assert settings.TABELA_POLITICAS == "plana"
    assert settings.OCULTAR_FINALIZADOS is True
    assert settings.SCHEDULER_ENABLED is False

    horario = settings.horario_comercial()
    assert horario.inicio == 9
    assert horario.eh_feriado(date(2025, 12, 25))

    monkeypatch.undo()
    recarregar_settings()


def test_valor_invalido_usa_padrao(monkeypatch) -> None:
    monkeypatch.setenv("SLA_HORA_INICIO", "oito")
    monkeypatch.setenv("SLA_DIAS_UTEIS", "seg,ter")
    settings = SlaSettings.from_env()
    assert settings.BUSINESS_HOUR_START == 8
    assert settings.BUSINESS_DAYS == [1, 2, 3, 4, 5]


def test_horario_invertido_falha_ao_montar() -> None:
    with pytest.raises(HorarioInvalidoError):
        SlaSettings(BUSINESS_HOUR_START=18, BUSINESS_HOUR_END=8).horario_comercial()


def test_horario_invertido_no_ambiente_falha_na_carga(monkeypatch) -> None:
    monkeypatch.setenv("SLA_HORA_INICIO", "18")
    monkeypatch.setenv("SLA_HORA_FIM", "8")
    with pytest.raises(HorarioInvalidoError):
        recarregar_settings()

    monkeypatch.undo()
    recarregar_settings()
