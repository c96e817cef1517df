"""
Módulo SLA
- Horário comercial: 08:00-18:00, seg-sex (configurável)
- Prazo conta apenas dentro do expediente
- Chamado concluído tem o SLA congelado na data de conclusão
- Status: OK, ALERTA (>=75%), CRITICO (>=90%), VENCIDO (100%)
"""
from .calculator import CalculadorSLA, calcular_horas_uteis
from .metrics import ServicoMetricasSLA, formatar_horas
from .monitor import MonitorSLA
from .router import router
from .service import SlaService

__all__ = [
    "router",
    "CalculadorSLA",
    "calcular_horas_uteis",
    "MonitorSLA",
    "ServicoMetricasSLA",
    "SlaService",
    "formatar_horas",
]
__version__ = "4.0.0"
