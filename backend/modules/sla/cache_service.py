"""
Serviço de cache em memória para SLA
Guarda listas de chamados críticos e métricas calculadas, com TTL configurável
"""
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

logger = logging.getLogger("sla.cache")


class CacheBackend(ABC):
    """Interface abstrata para backends de cache"""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        pass

    @abstractmethod
    def set(self, key: str, value: Any, ttl_seconds: int):
        pass


class MemoryCache(CacheBackend):
    """Cache em memória com TTL"""

    def __init__(self):
        self._storage: Dict[str, Dict[str, Any]] = {}
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> Optional[Any]:
        """Obtém valor do cache se não expirou"""
        entry = self._storage.get(key)
        if entry is None:
            self._misses += 1
            return None

        if entry["expires_at"] <= datetime.now():
            del self._storage[key]
            self._misses += 1
            return None

        self._hits += 1
        return entry["value"]

    def set(self, key: str, value: Any, ttl_seconds: int = 600):
        """Armazena valor com TTL (padrão 10 minutos)"""
        self._storage[key] = {
            "value": value,
            "expires_at": datetime.now() + timedelta(seconds=ttl_seconds),
        }
        logger.debug(f"Cache set: {key} (TTL: {ttl_seconds}s)")

    def get_stats(self) -> Dict[str, Any]:
        """Retorna estatísticas do cache"""
        total = self._hits + self._misses
        hit_rate = (self._hits / total * 100) if total > 0 else 0

        return {
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": f"{hit_rate:.1f}%",
            "size": len(self._storage),
        }


class CacheManager:
    """Gerenciador de cache para SLA"""

    def __init__(self, backend: Optional[CacheBackend] = None, ttl_seconds: int = 600):
        self.backend = backend or MemoryCache()
        self.ttl_seconds = ttl_seconds
        self._prefix = "sla"

    def _make_key(self, *parts) -> str:
        return f"{self._prefix}:{':'.join(str(p) for p in parts)}"

    # ==================== Chamados Críticos ====================

    def get_criticos(self) -> Optional[Dict]:
        return self.backend.get(self._make_key("criticos"))

    def set_criticos(self, criticos: Dict):
        self.backend.set(self._make_key("criticos"), criticos, self.ttl_seconds)
        logger.info(
            f"Chamados críticos cacheados: {len(criticos.get('alertas', []))} alertas, "
            f"{len(criticos.get('criticos', []))} críticos, {len(criticos.get('vencidos', []))} vencidos"
        )

    # ==================== Métricas ====================

    def get_metricas(self, mes: int, ano: int, cod_cliente: Optional[int] = None) -> Optional[Dict]:
        return self.backend.get(self._make_key("metricas", ano, mes, cod_cliente or "todos"))

    def set_metricas(self, mes: int, ano: int, metricas: Dict, cod_cliente: Optional[int] = None):
        self.backend.set(self._make_key("metricas", ano, mes, cod_cliente or "todos"), metricas, self.ttl_seconds)
        logger.debug(f"Métricas cacheadas: {mes:02d}/{ano} cliente={cod_cliente or 'todos'}")

    # ==================== Operações Gerais ====================

    def get_stats(self) -> Dict[str, Any]:
        if hasattr(self.backend, "get_stats"):
            return self.backend.get_stats()
        return {}


# Instância global
_cache_manager: Optional[CacheManager] = None


def get_cache_manager() -> CacheManager:
    """Obtém ou cria gerenciador de cache global"""
    global _cache_manager
    if _cache_manager is None:
        from .config import get_settings
        _cache_manager = CacheManager(ttl_seconds=get_settings().CACHE_TTL_SECONDS)
    return _cache_manager


def init_cache_manager(backend: Optional[CacheBackend] = None, ttl_seconds: int = 600) -> CacheManager:
    """Inicializa gerenciador de cache com backend customizado"""
    global _cache_manager
    _cache_manager = CacheManager(backend, ttl_seconds)
    return _cache_manager
