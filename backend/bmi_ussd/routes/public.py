# /bmi_ussd/routes/public.py

from datetime import datetime, timezone
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import PlainTextResponse
from prometheus_client import generate_latest

from bmi_ussd.config.settings import settings
from bmi_ussd.models.api import APIResponse
from bmi_ussd.services.result_log import ResultLog
from bmi_ussd.services.session_store import SessionStore
from bmi_ussd.utils.dependencies import get_result_log, get_session_store, verify_metrics_access

# Public endpoints that need no authentication: root, health checks and the
# (optionally key-protected) Prometheus metrics.

router = APIRouter()

@router.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": "USSD BMI Calculator",
        "version": "1.0.0",
        "status": "operational",
        "environment": settings.environment,
        "endpoints": {"ussd": "/ussd"}
    }

@router.get("/health", summary="Basic Health Check")
async def health_check():
    """Basic health check for load balancers."""
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc)}

@router.get("/health/live", summary="Liveness Check")
async def liveness_check():
    """Kubernetes/Docker liveness check."""
    return {"status": "alive"}

@router.get("/health/ready", summary="Readiness Check")
async def readiness_check(
    store: SessionStore = Depends(get_session_store),
    result_log: Optional[ResultLog] = Depends(get_result_log)
):
    """Readiness check covering the session store and the result log."""
    try:
        await store.ping()
        if result_log is not None:
            await result_log.ping()
        return {"status": "ready"}
    except Exception as e:
        raise HTTPException(status_code=503, detail=f"Service not ready: {e}")

@router.get("/health/detailed", response_model=APIResponse)
async def detailed_health_check(
    store: SessionStore = Depends(get_session_store),
    result_log: Optional[ResultLog] = Depends(get_result_log)
):
    """Detailed status of each collaborator."""
    health_status = {"status": "healthy", "services": {}}

    circuit_breaker = getattr(store, "circuit_breaker", None)
    if circuit_breaker is not None:
        health_status["circuit_breaker"] = circuit_breaker.state.value

    try:
        await store.ping()
        health_status["services"]["session_store"] = settings.session_backend
    except Exception:
        health_status["services"]["session_store"] = "error"
        health_status["status"] = "degraded"

    if result_log is None:
        health_status["services"]["result_log"] = "disabled"
    else:
        try:
            await result_log.ping()
            health_status["services"]["result_log"] = settings.result_log_backend
        except Exception:
            health_status["services"]["result_log"] = "error"
            health_status["status"] = "degraded"

    return APIResponse(
        success=True,
        message="Health status retrieved.",
        data=health_status,
        version=settings.api_version
    )

@router.get("/metrics", tags=["Monitoring"])
async def metrics(request: Request, _: bool = Depends(verify_metrics_access)):
    """Prometheus metrics endpoint."""
    return PlainTextResponse(generate_latest(), media_type="text/plain")
