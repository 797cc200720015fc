"""
Readiness checks for the event processor.
"""
from datetime import datetime, timezone
from typing import Dict, Any
import time
import psutil
from . import SERVICE_NAME, __version__
from .adapters.base import BusAdapter
from .logging import get_logger

logger = get_logger()


class HealthChecker:
    """
    Readiness checker: can the service handle traffic?

    Checks the message bus, disk space and available memory.
    """

    def __init__(self, bus: BusAdapter, service_name: str = SERVICE_NAME, version: str = __version__):
        self.bus = bus
        self.service_name = service_name
        self.version = version

    async def readiness(self) -> Dict[str, Any]:
        """
        Run all readiness checks.

        Returns:
            dict: Readiness status with detailed check results
        """
        checks = {
            "bus": await self._check_bus(),
            "disk_space": self._check_disk_space(),
            "memory": self._check_memory(),
        }
        ready = all(check["status"] != "error" for check in checks.values())

        return {
            "status": "ready" if ready else "not_ready",
            "service": self.service_name,
            "version": self.version,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "checks": checks,
        }

    async def _check_bus(self) -> Dict[str, Any]:
        start = time.time()
        healthy = await self.bus.health_check()
        latency_ms = round((time.time() - start) * 1000, 2)

        if not healthy:
            logger.warning("bus_health_check_failed", adapter=type(self.bus).__name__)
            return {"status": "error", "adapter": type(self.bus).__name__}
        return {"status": "ok", "adapter": type(self.bus).__name__, "latency_ms": latency_ms}

    def _check_disk_space(self, threshold_gb: float = 1.0) -> Dict[str, Any]:
        """
        Check available disk space.

        Args:
            threshold_gb: Minimum available disk space in GB (default: 1.0)
        """
        try:
            disk = psutil.disk_usage("/")
        except OSError as e:
            logger.warning("disk_health_check_failed", error=str(e))
            return {"status": "error", "error": str(e)}

        available_gb = disk.free / (1024**3)
        if available_gb < threshold_gb:
            status = "error"
        elif available_gb < threshold_gb * 2:
            status = "warning"
        else:
            status = "ok"

        return {
            "status": status,
            "available_gb": round(available_gb, 2),
            "total_gb": round(disk.total / (1024**3), 2),
            "used_percent": disk.percent,
        }

    def _check_memory(self, threshold_mb: float = 50.0) -> Dict[str, Any]:
        """
        Check available memory.

        Args:
            threshold_mb: Minimum available memory in MB (default: 50.0)
        """
        memory = psutil.virtual_memory()
        available_mb = memory.available / (1024**2)

        if available_mb < threshold_mb:
            status = "error"
        elif available_mb < threshold_mb * 2:
            status = "warning"
        else:
            status = "ok"

        return {
            "status": status,
            "available_mb": round(available_mb, 2),
            "total_mb": round(memory.total / (1024**2), 2),
            "used_percent": memory.percent,
        }
