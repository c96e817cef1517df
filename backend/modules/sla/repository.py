"""Repositório para acesso a dados de chamados usados no SLA"""

from datetime import date
from typing import List, Optional, Tuple

from sqlalchemy import and_, func
from sqlalchemy.orm import Session

from ti.models.chamado import Chamado

from .constants import STATUS_FINALIZADOS


def intervalo_mes(mes: int, ano: int) -> Tuple[date, date]:
    """[primeiro dia do mês, primeiro dia do mês seguinte)"""
    inicio = date(ano, mes, 1)
    fim = date(ano + 1, 1, 1) if mes == 12 else date(ano, mes + 1, 1)
    return inicio, fim


class SlaRepository:
    """Repositório para operações de SLA"""

    def __init__(self, db: Session):
        self.db = db

    def listar_chamados_periodo(
        self,
        mes: int,
        ano: int,
        cod_cliente: Optional[int] = None,
        status: Optional[str] = None,
        cod_chamado: Optional[int] = None,
    ) -> List[Chamado]:
        """Chamados abertos no mês, mais recentes primeiro"""
        inicio, fim = intervalo_mes(mes, ano)
        filtros = [Chamado.data_chamado >= inicio, Chamado.data_chamado < fim]

        if cod_cliente is not None:
            filtros.append(Chamado.cod_cliente == cod_cliente)
        if status:
            filtros.append(func.upper(Chamado.status_chamado).like(f"%{status.upper()}%"))
        if cod_chamado is not None:
            filtros.append(Chamado.cod_chamado == cod_chamado)

        return self.db.query(Chamado).filter(and_(*filtros)).order_by(
            Chamado.data_chamado.desc(),
            Chamado.hora_chamado.desc(),
        ).all()

    def obter_chamado(self, cod_chamado: int) -> Optional[Chamado]:
        return self.db.query(Chamado).filter(Chamado.cod_chamado == cod_chamado).first()

    def listar_chamados_abertos(self, desde: date) -> List[Chamado]:
        """Chamados não finalizados abertos a partir de `desde`, por prioridade"""
        return self.db.query(Chamado).filter(
            and_(
                Chamado.data_chamado >= desde,
                func.lower(func.coalesce(Chamado.status_chamado, "")).notin_(list(STATUS_FINALIZADOS)),
            )
        ).order_by(Chamado.prior_chamado, Chamado.data_chamado).all()
