"""
Health check endpoint for deployment monitoring.
"""
from datetime import datetime, timezone
from fastapi import APIRouter, Request

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("")
def health_check(request: Request):
    """
    Health check endpoint for deployment monitoring.

    Returns 200 while the process is up; `status` is "degraded" when the
    database is unreachable. AI availability is informational only since
    interviews keep working on fallback content.
    """
    status = "healthy"

    if request.app.state.database.ping():
        db_status = "connected"
    else:
        db_status = "unreachable"
        status = "degraded"

    engine = request.app.state.interview_engine
    return {
        "status": status,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": db_status,
        "ai": "configured" if engine.llm.available else "fallback-only",
        "speech": "configured" if engine.speech is not None and engine.speech.available else "disabled",
        "version": "1.0.0",
    }
