"""Configurações do módulo SLA"""

import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional

logger = logging.getLogger("sla.config")


def _env_int(nome: str, padrao: int) -> int:
    valor = os.getenv(nome)
    if valor is None or not valor.strip():
        return padrao
    try:
        return int(valor)
    except ValueError:
        logger.warning(f"Valor inválido para {nome}: {valor!r}, usando {padrao}")
        return padrao


def _env_bool(nome: str, padrao: bool) -> bool:
    valor = os.getenv(nome)
    if valor is None or not valor.strip():
        return padrao
    return valor.strip().lower() in {"1", "true", "sim", "yes", "on"}


def _env_dias(nome: str, padrao: List[int]) -> List[int]:
    valor = os.getenv(nome)
    if valor is None or not valor.strip():
        return list(padrao)
    try:
        return [int(d) for d in valor.split(",") if d.strip()]
    except ValueError:
        logger.warning(f"Valor inválido para {nome}: {valor!r}, usando {padrao}")
        return list(padrao)


@dataclass
class SlaSettings:
    """Configurações gerais do SLA"""

    # Horário comercial
    BUSINESS_HOUR_START: int = 8          # Hora de início (08:00)
    BUSINESS_HOUR_END: int = 18           # Hora de término (18:00)
    BUSINESS_DAYS: List[int] = field(default_factory=lambda: [1, 2, 3, 4, 5])  # 0=domingo ... 6=sábado

    # Políticas
    TABELA_POLITICAS: str = "escalonada"  # "escalonada" ou "plana"
    CONSIDERA_FERIADOS: bool = False

    # Exibição
    OCULTAR_FINALIZADOS: bool = False

    # Atualização ao vivo
    TICK_SEGUNDOS: int = 60
    VIGIA_SEGUNDOS: int = 300

    # Cache
    CACHE_TTL_SECONDS: int = 600

    # Scheduler
    SCHEDULER_INTERVAL_MINUTES: int = 5   # Intervalo de recálculo
    SCHEDULER_ENABLED: bool = True        # Ativar scheduler

    @classmethod
    def from_env(cls) -> "SlaSettings":
        padrao = cls()
        settings = cls(
            BUSINESS_HOUR_START=_env_int("SLA_HORA_INICIO", padrao.BUSINESS_HOUR_START),
            BUSINESS_HOUR_END=_env_int("SLA_HORA_FIM", padrao.BUSINESS_HOUR_END),
            BUSINESS_DAYS=_env_dias("SLA_DIAS_UTEIS", padrao.BUSINESS_DAYS),
            TABELA_POLITICAS=os.getenv("SLA_TABELA_POLITICAS", padrao.TABELA_POLITICAS).strip().lower(),
            CONSIDERA_FERIADOS=_env_bool("SLA_CONSIDERA_FERIADOS", padrao.CONSIDERA_FERIADOS),
            OCULTAR_FINALIZADOS=_env_bool("SLA_OCULTAR_FINALIZADOS", padrao.OCULTAR_FINALIZADOS),
            TICK_SEGUNDOS=_env_int("SLA_TICK_SEGUNDOS", padrao.TICK_SEGUNDOS),
            VIGIA_SEGUNDOS=_env_int("SLA_VIGIA_SEGUNDOS", padrao.VIGIA_SEGUNDOS),
            CACHE_TTL_SECONDS=_env_int("SLA_CACHE_TTL_SECONDS", padrao.CACHE_TTL_SECONDS),
            SCHEDULER_INTERVAL_MINUTES=_env_int("SLA_SCHEDULER_INTERVAL_MINUTES", padrao.SCHEDULER_INTERVAL_MINUTES),
            SCHEDULER_ENABLED=_env_bool("SLA_SCHEDULER_ENABLED", padrao.SCHEDULER_ENABLED),
        )
        # Calendário inválido falha na carga, não na primeira requisição
        settings.horario_comercial()
        return settings

    def horario_comercial(self):
        """Monta o HorarioComercial a partir destas configurações"""
        from .calendario import HorarioComercial

        eh_feriado = None
        if self.CONSIDERA_FERIADOS:
            from .holidays import criar_verificador_feriados
            eh_feriado = criar_verificador_feriados()

        return HorarioComercial(
            inicio=self.BUSINESS_HOUR_START,
            fim=self.BUSINESS_HOUR_END,
            dias_uteis=frozenset(self.BUSINESS_DAYS),
            eh_feriado=eh_feriado,
        )


# Instância global
_settings: Optional[SlaSettings] = None


def get_settings() -> SlaSettings:
    """Obtém (ou carrega do ambiente) as configurações globais"""
    global _settings
    if _settings is None:
        _settings = SlaSettings.from_env()
    return _settings


def recarregar_settings() -> SlaSettings:
    """Descarta as configurações em memória e relê o ambiente"""
    global _settings
    _settings = None
    return get_settings()
