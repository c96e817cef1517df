from __future__ import annotations
import logging
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.db import Base, SessionLocal, engine
from modules.sla import router as sla_router
from modules.sla.config import get_settings
from modules.sla.scheduler import iniciar_scheduler, parar_scheduler
from ti.models.chamado import Chamado  # noqa: F401  registra a tabela no metadata

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("app")

# Create the FastAPI application (HTTP)
app = FastAPI(title="Painel de Chamados - SLA", version="1.0.0")

_allowed_origins = [
    "http://localhost:3005",
    "http://127.0.0.1:3005",
    "http://localhost:5173",  # Vite default dev port
    "http://127.0.0.1:5173",
]

# Adicionar domínio de produção se disponível nas env vars
_prod_frontend_url = os.getenv("FRONTEND_URL", "").strip()
if _prod_frontend_url:
    _allowed_origins.append(_prod_frontend_url)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(sla_router, prefix="/api")


@app.get("/api/health")
def health():
    return {"status": "ok"}


@app.on_event("startup")
async def startup_event():
    """Cria as tabelas e inicia o scheduler de SLA"""
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("✅ Tabelas verificadas/criadas")
    except Exception as e:
        logger.error(f"⚠️ Erro ao criar tabelas: {e}", exc_info=True)

    settings = get_settings()
    if settings.SCHEDULER_ENABLED:
        iniciar_scheduler(SessionLocal, settings.SCHEDULER_INTERVAL_MINUTES)
    else:
        logger.info("Scheduler SLA desativado (SLA_SCHEDULER_ENABLED)")


@app.on_event("shutdown")
async def shutdown_event():
    parar_scheduler()
