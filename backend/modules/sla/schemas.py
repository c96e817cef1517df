"""
Schemas Pydantic para validação de dados do módulo SLA
"""
import enum
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class StatusSLAEnum(str, enum.Enum):
    """Classificação do percentual de prazo consumido"""
    OK = "OK"               # < 75%
    ALERTA = "ALERTA"       # 75% a 90%
    CRITICO = "CRITICO"     # 90% a 100%
    VENCIDO = "VENCIDO"     # >= 100%


class TipoSLA(str, enum.Enum):
    RESPOSTA = "resposta"
    RESOLUCAO = "resolucao"


# ==================== Entrada ====================
class EntradaSLA(BaseModel):
    """Dados de um chamado necessários para avaliar o SLA"""
    model_config = ConfigDict(frozen=True)

    cod_chamado: Optional[int] = None
    data_chamado: date
    hora_chamado: Optional[str] = ""
    prioridade: Optional[int] = None
    status: Optional[str] = ""
    data_referencia: Optional[datetime] = None
    tipo_sla: TipoSLA = TipoSLA.RESOLUCAO

    @field_validator("data_chamado", mode="before")
    @classmethod
    def validar_data(cls, v: Any) -> Any:
        """Aceita datetime vindo do banco, mantendo só a data"""
        if isinstance(v, datetime):
            return v.date()
        return v

    @field_validator("hora_chamado", mode="before")
    @classmethod
    def validar_hora(cls, v: Any) -> Optional[str]:
        if v is None:
            return ""
        return str(v)

    @field_validator("prioridade", mode="before")
    @classmethod
    def validar_prioridade(cls, v: Any) -> Optional[int]:
        """Prioridade ilegível vira None (política padrão)"""
        if v is None or isinstance(v, bool):
            return None
        try:
            return int(str(v).strip())
        except (TypeError, ValueError):
            return None


# ==================== Resultado ====================
class StatusSLA(BaseModel):
    """Retrato do SLA de um chamado em um instante"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    tempo_decorrido: float = Field(..., alias="tempoDecorrido")
    tempo_restante: float = Field(..., alias="tempoRestante")
    percentual_usado: float = Field(..., alias="percentualUsado")
    prazo_total: float = Field(..., alias="prazoTotal")
    dentro_prazo: bool = Field(..., alias="dentroPrazo")
    status: StatusSLAEnum


# ==================== Métricas ====================
class MetricasPrioridade(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total: int = 0
    dentro_sla: int = Field(0, alias="dentroSLA")
    percentual: float = 0.0


class MetricasSLA(BaseModel):
    """Métricas agregadas de SLA"""
    model_config = ConfigDict(populate_by_name=True)

    total_chamados: int = Field(0, alias="totalChamados")
    dentro_sla: int = Field(0, alias="dentroSLA")
    fora_sla: int = Field(0, alias="foraSLA")
    percentual_cumprimento: float = Field(0.0, alias="percentualCumprimento")
    tempo_medio_resolucao: float = Field(0.0, alias="tempoMedioResolucao")
    por_prioridade: Dict[int, MetricasPrioridade] = Field(default_factory=dict, alias="porPrioridade")


# ==================== Respostas da API ====================
class ConfigPrazos(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    tempo_resposta: float = Field(..., alias="tempoResposta")
    tempo_resolucao: float = Field(..., alias="tempoResolucao")


class SLAChamado(BaseModel):
    config: ConfigPrazos
    resposta: StatusSLA
    resolucao: StatusSLA


class ChamadoSLAResponse(BaseModel):
    """Chamado com SLA de resposta e resolução"""
    model_config = ConfigDict(populate_by_name=True)

    cod_chamado: int = Field(..., alias="codChamado")
    data_chamado: date = Field(..., alias="dataChamado")
    hora_chamado: Optional[str] = Field(None, alias="horaChamado")
    prioridade: Optional[int] = None
    status: Optional[str] = None
    assunto: Optional[str] = None
    cliente: Optional[str] = None
    conclusao: Optional[datetime] = None
    sla: SLAChamado


class BadgeSLAResponse(BaseModel):
    """Dados para o badge colorido da tabela de chamados"""
    model_config = ConfigDict(populate_by_name=True)

    cod_chamado: int = Field(..., alias="codChamado")
    exibir: bool
    congelado: bool
    cor: str
    tooltip: str
    sla: StatusSLA


class CriticosResponse(BaseModel):
    alertas: List[Dict[str, Any]] = Field(default_factory=list)
    criticos: List[Dict[str, Any]] = Field(default_factory=list)
    vencidos: List[Dict[str, Any]] = Field(default_factory=list)
    atualizado_em: Optional[datetime] = Field(None, alias="atualizadoEm")

    model_config = ConfigDict(populate_by_name=True)
