"""
Scheduler automático para verificar chamados em risco de SLA
Usa APScheduler para executar em background
"""
import logging
from datetime import datetime
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .cache_service import get_cache_manager
from .service import SlaService

logger = logging.getLogger("sla.scheduler")


class SchedulerSLA:
    """Gerenciador de scheduler para verificações automáticas de SLA"""

    def __init__(self):
        self.scheduler: Optional[BackgroundScheduler] = None
        self.is_running = False
        self.job_id = "sla_criticos_job"
        self.update_interval_minutes = 5
        self.ultima_execucao: Optional[datetime] = None

    def iniciar(self, db_session_factory, update_interval: int = 5):
        """
        Inicia o scheduler

        Args:
            db_session_factory: Factory para criar sessões de banco
            update_interval: Intervalo em minutos (padrão 5)
        """
        if self.is_running:
            logger.warning("Scheduler SLA já está em execução")
            return

        try:
            self.scheduler = BackgroundScheduler()
            self.update_interval_minutes = update_interval

            self.scheduler.add_job(
                func=self._verificar_criticos,
                trigger=IntervalTrigger(minutes=update_interval),
                id=self.job_id,
                name="Verificação de chamados críticos",
                replace_existing=True,
                kwargs={"db_session_factory": db_session_factory},
            )

            self.scheduler.start()
            self.is_running = True

            logger.info(f"✅ Scheduler SLA iniciado (intervalo: {update_interval}m)")

            # Primeira verificação imediata
            self._verificar_criticos(db_session_factory)

        except Exception as e:
            logger.error(f"❌ Erro ao iniciar scheduler: {e}", exc_info=True)
            self.is_running = False

    def parar(self):
        """Para o scheduler"""
        if self.scheduler and self.is_running:
            self.scheduler.shutdown(wait=False)
            self.is_running = False
            logger.info("⏹️ Scheduler SLA parado")

    def _verificar_criticos(self, db_session_factory):
        """Executada periodicamente: recalcula os críticos e atualiza o cache"""
        inicio = datetime.now()
        db = db_session_factory()
        try:
            criticos = SlaService(db).verificar_criticos()
            get_cache_manager().set_criticos(criticos)
            self.ultima_execucao = datetime.now()
            tempo_total = (self.ultima_execucao - inicio).total_seconds() * 1000
            logger.info(f"✅ Verificação de SLA concluída em {tempo_total:.0f}ms")
        except Exception as e:
            logger.error(f"❌ Erro ao verificar SLA: {e}", exc_info=True)
        finally:
            db.close()

    def get_status(self) -> dict:
        """Retorna status do scheduler"""
        if not self.scheduler:
            return {"running": False, "message": "Scheduler não iniciado"}

        job = self.scheduler.get_job(self.job_id)
        if not job:
            return {"running": False, "message": "Job não encontrado"}

        return {
            "running": self.is_running,
            "job_id": self.job_id,
            "interval_minutes": self.update_interval_minutes,
            "next_run": job.next_run_time.isoformat() if job.next_run_time else None,
            "last_execution": self.ultima_execucao.isoformat() if self.ultima_execucao else None,
        }


# Instância global
_scheduler: Optional[SchedulerSLA] = None


def get_scheduler() -> SchedulerSLA:
    """Obtém ou cria scheduler global"""
    global _scheduler
    if _scheduler is None:
        _scheduler = SchedulerSLA()
    return _scheduler


def iniciar_scheduler(db_session_factory, update_interval: int = 5):
    """Inicia scheduler global"""
    scheduler = get_scheduler()
    scheduler.iniciar(db_session_factory, update_interval)
    return scheduler


def parar_scheduler():
    """Para scheduler global"""
    get_scheduler().parar()
