# rentalhub/api/v1/routers/health.py
import time
import subprocess
from fastapi import APIRouter, Request
from rentalhub.core.config import get_settings
from rentalhub.db import mongo

router = APIRouter(tags=["health"])
START_TIME = time.time()


def _git_sha(short: bool = True) -> str:
    try:
        cmd = ["git", "rev-parse", "--short" if short else "HEAD"]
        return subprocess.check_output(cmd, stderr=subprocess.DEVNULL).decode().strip()
    except Exception:
        return "unknown"


@router.get("/health")
async def health(request: Request):
    """
    Tolerant health check:
    - ping Mongo via Motor (async)
    - report whether the session gate has received its first auth notification
    - expose basic app info + overall status
    """
    settings = get_settings()
    checks: dict[str, object] = {
        "app_name": settings.APP_NAME,
        "env": settings.APP_ENV,
        "debug": settings.DEBUG,
        "version": settings.GIT_SHA if settings.GIT_SHA != "unknown" else _git_sha(),
        "uptime_seconds": int(time.time() - START_TIME),
    }

    # --- Mongo ---
    try:
        await mongo.get_client().admin.command("ping")
        checks["mongodb"] = "ok"
    except Exception as e:
        checks["mongodb"] = f"error: {e}"

    # --- Session gate (still "checking" is healthy, just not ready) ---
    gate = getattr(request.app.state, "session_gate", None)
    checks["session_gate"] = gate.state.value if gate else "missing"

    def _is_ok(v):
        return v in ("ok", "ready", "checking")

    health_keys = ("mongodb", "session_gate")
    status = "ok" if all(_is_ok(checks.get(k)) for k in health_keys) else "error"

    return {"status": status, "checks": checks, "timestamp": int(time.time())}
