"""Camada de negócio para SLA"""
import logging
import math
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from core.utils import now_brazil_naive

from .cache_service import CacheManager, get_cache_manager
from .calculator import CalculadorSLA
from .config import SlaSettings, get_settings
from .constants import cor_status, deve_mostrar_sla
from .exceptions import ChamadoNaoEncontradoError
from .metrics import ServicoMetricasSLA, formatar_horas
from .politicas import TABELAS_POLITICAS
from .repository import SlaRepository
from .schemas import EntradaSLA, StatusSLA, StatusSLAEnum, TipoSLA

logger = logging.getLogger("sla.service")

TIPOS_RELATORIO = {"resumo", "detalhado", "metricas"}
LIMITE_CRITICOS_RESUMO = 10
DIAS_VERIFICACAO_CRITICOS = 30


def _sla_json(sla: StatusSLA) -> Dict[str, Any]:
    return sla.model_dump(by_alias=True, mode="json")


def para_entrada(chamado, tipo_sla: TipoSLA = TipoSLA.RESOLUCAO, data_referencia: Optional[datetime] = None) -> EntradaSLA:
    """Converte a linha do chamado na entrada do avaliador"""
    return EntradaSLA(
        cod_chamado=chamado.cod_chamado,
        data_chamado=chamado.data_chamado,
        hora_chamado=chamado.hora_chamado,
        prioridade=chamado.prior_chamado,
        status=chamado.status_chamado,
        data_referencia=data_referencia,
        tipo_sla=tipo_sla,
    )


class SlaService:
    def __init__(
        self,
        db: Session,
        calculador: Optional[CalculadorSLA] = None,
        settings: Optional[SlaSettings] = None,
        cache: Optional[CacheManager] = None,
    ):
        self.db = db
        self.settings = settings or get_settings()
        self.calculador = calculador or CalculadorSLA.from_settings(self.settings)
        self.repo = SlaRepository(db)
        self.metricas = ServicoMetricasSLA(self.calculador)
        self.cache = cache or get_cache_manager()

    # ==================== Chamado ====================

    def _avaliar_chamado(self, chamado, resolucao: Optional[StatusSLA] = None) -> Dict[str, Any]:
        """SLA de resposta (até o início do atendimento) e de resolução (até a conclusão)"""
        politica = self.calculador.obter_politica(chamado.prior_chamado)
        resposta = self.calculador.calcular_status(
            para_entrada(chamado, TipoSLA.RESPOSTA, chamado.inicio_atendimento or chamado.conclusao_chamado)
        )
        if resolucao is None:
            resolucao = self.calculador.calcular_status(
                para_entrada(chamado, TipoSLA.RESOLUCAO, chamado.conclusao_chamado)
            )
        return {
            "codChamado": chamado.cod_chamado,
            "dataChamado": chamado.data_chamado.isoformat(),
            "horaChamado": chamado.hora_chamado,
            "prioridade": chamado.prior_chamado,
            "status": chamado.status_chamado,
            "assunto": chamado.assunto_chamado,
            "cliente": chamado.nome_cliente,
            "conclusao": chamado.conclusao_chamado.isoformat() if chamado.conclusao_chamado else None,
            "sla": {
                "config": {
                    "tempoResposta": politica.tempo_resposta_horas,
                    "tempoResolucao": politica.tempo_resolucao_horas,
                },
                "resposta": _sla_json(resposta),
                "resolucao": _sla_json(resolucao),
            },
        }

    def calcular_sla_chamado(self, cod_chamado: int) -> Dict[str, Any]:
        chamado = self.repo.obter_chamado(cod_chamado)
        if not chamado:
            raise ChamadoNaoEncontradoError(cod_chamado)
        return self._avaliar_chamado(chamado)

    def obter_badge(self, cod_chamado: int) -> Dict[str, Any]:
        """Badge da tabela: prazo de resolução congelado no início do atendimento"""
        chamado = self.repo.obter_chamado(cod_chamado)
        if not chamado:
            raise ChamadoNaoEncontradoError(cod_chamado)

        referencia = chamado.inicio_atendimento or chamado.conclusao_chamado
        sla = self.calculador.calcular_status(para_entrada(chamado, TipoSLA.RESOLUCAO, referencia))
        tooltip = (
            f"Decorrido: {formatar_horas(sla.tempo_decorrido)} | "
            f"Restante: {formatar_horas(sla.tempo_restante)} | "
            f"Total: {formatar_horas(sla.prazo_total)}"
        )
        return {
            "codChamado": chamado.cod_chamado,
            "exibir": deve_mostrar_sla(chamado.status_chamado, self.settings.OCULTAR_FINALIZADOS),
            "congelado": referencia is not None,
            "cor": cor_status(sla.status),
            "tooltip": tooltip,
            "sla": _sla_json(sla),
        }

    # ==================== Relatórios ====================

    def relatorio_periodo(
        self,
        mes: int,
        ano: int,
        cod_cliente: Optional[int] = None,
        status: Optional[str] = None,
        tipo: str = "resumo",
    ) -> Dict[str, Any]:
        """Relatório mensal: 'metricas', 'resumo' (padrão) ou 'detalhado'"""
        # A chave do cache não leva o filtro de status
        usa_cache = tipo == "metricas" and not status
        if usa_cache:
            em_cache = self.cache.get_metricas(mes, ano, cod_cliente)
            if em_cache is not None:
                return {"success": True, "mes": mes, "ano": ano, "metricas": em_cache}

        chamados = self.repo.listar_chamados_periodo(mes, ano, cod_cliente, status)

        if not chamados:
            return {"success": True, "mes": mes, "ano": ano, "totalChamados": 0, "metricas": None, "data": []}

        # Uma avaliação por chamado alimenta métricas, resumo e detalhes
        avaliacoes = self.metricas.avaliar(para_entrada(c, TipoSLA.RESOLUCAO, c.conclusao_chamado) for c in chamados)
        metricas = self.metricas.reduzir_avaliacoes(avaliacoes).model_dump(by_alias=True, mode="json")

        if tipo == "metricas":
            if usa_cache:
                self.cache.set_metricas(mes, ano, metricas, cod_cliente)
            return {"success": True, "mes": mes, "ano": ano, "metricas": metricas}

        detalhados = [self._avaliar_chamado(c, sla) for c, (_, sla) in zip(chamados, avaliacoes)]

        if tipo == "resumo":
            resumo = self.metricas.resumo_por_status(sla for _, sla in avaliacoes)
            criticos = [
                d for d, (_, sla) in zip(detalhados, avaliacoes)
                if sla.status in (StatusSLAEnum.CRITICO, StatusSLAEnum.VENCIDO)
            ]
            return {
                "success": True,
                "mes": mes,
                "ano": ano,
                "totalChamados": len(chamados),
                "metricas": metricas,
                "resumoPorStatus": resumo,
                "chamadosCriticos": criticos[:LIMITE_CRITICOS_RESUMO],
            }

        return {
            "success": True,
            "mes": mes,
            "ano": ano,
            "totalChamados": len(chamados),
            "metricas": metricas,
            "data": detalhados,
        }

    def listar_chamados_sla(
        self,
        mes: int,
        ano: int,
        cod_cliente: Optional[int] = None,
        status: Optional[str] = None,
        cod_chamado: Optional[int] = None,
        sla_status: Optional[str] = None,
        page: int = 1,
        limit: int = 50,
        incluir_sla: bool = True,
    ) -> Dict[str, Any]:
        """Lista paginada de chamados com colunas SLA_* e métricas do período"""
        chamados = self.repo.listar_chamados_periodo(mes, ano, cod_cliente, status, cod_chamado)

        linhas: List[Dict[str, Any]] = []
        avaliacoes = []
        for c in chamados:
            linha = {
                "COD_CHAMADO": c.cod_chamado,
                "DATA_CHAMADO": c.data_chamado.isoformat(),
                "HORA_CHAMADO": c.hora_chamado or "",
                "CONCLUSAO_CHAMADO": c.conclusao_chamado.isoformat() if c.conclusao_chamado else None,
                "STATUS_CHAMADO": c.status_chamado,
                "ASSUNTO_CHAMADO": c.assunto_chamado,
                "PRIOR_CHAMADO": c.prior_chamado if c.prior_chamado is not None else 100,
                "NOME_CLIENTE": c.nome_cliente,
                "NOME_RECURSO": c.nome_recurso,
            }
            if incluir_sla:
                entrada = para_entrada(c, TipoSLA.RESOLUCAO, c.conclusao_chamado)
                sla = self.calculador.calcular_status(entrada)
                avaliacoes.append((entrada, sla))
                linha.update({
                    "SLA_STATUS": sla.status.value,
                    "SLA_PERCENTUAL": sla.percentual_usado,
                    "SLA_TEMPO_DECORRIDO": sla.tempo_decorrido,
                    "SLA_TEMPO_RESTANTE": sla.tempo_restante,
                    "SLA_PRAZO_TOTAL": sla.prazo_total,
                    "SLA_DENTRO_PRAZO": sla.dentro_prazo,
                })
            linhas.append(linha)

        if sla_status and incluir_sla:
            linhas = [linha for linha in linhas if linha["SLA_STATUS"] == sla_status.upper()]

        total = len(linhas)
        total_pages = math.ceil(total / limit) if limit > 0 else 0
        offset = (page - 1) * limit

        metricas = None
        if incluir_sla:
            metricas = self.metricas.reduzir_avaliacoes(avaliacoes).model_dump(by_alias=True, mode="json")

        return {
            "success": True,
            "mes": mes,
            "ano": ano,
            "totalChamados": total,
            "metricas": metricas,
            "pagination": {
                "page": page,
                "limit": limit,
                "totalPages": total_pages,
                "hasNextPage": page < total_pages,
                "hasPreviousPage": page > 1,
            },
            "data": linhas[offset:offset + limit],
        }

    # ==================== Críticos ====================

    def verificar_criticos(self, dias: int = DIAS_VERIFICACAO_CRITICOS) -> Dict[str, Any]:
        """Chamados em aberto dos últimos `dias` agrupados em alertas, críticos e vencidos"""
        agora = self.calculador.relogio()
        desde = (agora - timedelta(days=dias)).date()
        chamados = {c.cod_chamado: c for c in self.repo.listar_chamados_abertos(desde)}

        grupos = self.metricas.classificar_criticos(para_entrada(c) for c in chamados.values())

        resultado: Dict[str, Any] = {}
        for chave, itens in grupos.items():
            resultado[chave] = [
                {
                    "codChamado": entrada.cod_chamado,
                    "prioridade": entrada.prioridade,
                    "status": entrada.status,
                    "assunto": chamados[entrada.cod_chamado].assunto_chamado,
                    "cliente": chamados[entrada.cod_chamado].nome_cliente,
                    "emails": [e for e in [chamados[entrada.cod_chamado].email_chamado] if e],
                    "sla": _sla_json(sla),
                }
                for entrada, sla in itens
            ]
        resultado["atualizadoEm"] = agora.isoformat()

        logger.info(
            f"Verificação de SLA: {len(resultado['alertas'])} alertas, "
            f"{len(resultado['criticos'])} críticos, {len(resultado['vencidos'])} vencidos"
        )
        return resultado

    # ==================== Configuração ====================

    def obter_config(self) -> Dict[str, Any]:
        """Horário comercial e as duas tabelas de política, com a ativa indicada"""
        horario = self.calculador.horario
        return {
            "horarioComercial": {
                "inicio": horario.inicio,
                "fim": horario.fim,
                "diasUteis": sorted(horario.dias_uteis),
                "consideraFeriados": horario.eh_feriado is not None,
            },
            "tabelaAtiva": self.settings.TABELA_POLITICAS if self.settings.TABELA_POLITICAS in TABELAS_POLITICAS else "escalonada",
            "tabelas": {
                nome: {
                    str(p.prioridade): {"tempoResposta": p.tempo_resposta_horas, "tempoResolucao": p.tempo_resolucao_horas}
                    for p in tabela.values()
                }
                for nome, tabela in TABELAS_POLITICAS.items()
            },
            "ocultarFinalizados": self.settings.OCULTAR_FINALIZADOS,
            "atualizadoEm": now_brazil_naive().isoformat(),
        }
