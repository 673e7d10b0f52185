# rentalhub/api/v1/routers/auth.py
from fastapi import APIRouter, Depends
import logging

from rentalhub.api.deps import auth_service, session_gate
from rentalhub.api.v1.schemas.session import SessionOut, SignInIn
from rentalhub.domain.services.auth_service import LocalAuthService
from rentalhub.domain.services.session_gate import SessionGate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _session(gate: SessionGate) -> SessionOut:
    return SessionOut(auth_checked=gate.auth_checked, state=gate.state.value, user=gate.current_user)


@router.get("/session", response_model=SessionOut)
async def get_session(gate: SessionGate = Depends(session_gate)):
    return _session(gate)


@router.post("/sign-in", response_model=SessionOut)
async def sign_in(
    body: SignInIn,
    auth: LocalAuthService = Depends(auth_service),
    gate: SessionGate = Depends(session_gate),
):
    """Publish a provider-verified identity; the session gate picks it up."""
    logger.info("Request: sign_in uid=%s", body.uid)
    auth.sign_in(body.to_handle())
    return _session(gate)


@router.post("/sign-out", response_model=SessionOut)
async def sign_out(
    auth: LocalAuthService = Depends(auth_service),
    gate: SessionGate = Depends(session_gate),
):
    logger.info("Request: sign_out")
    auth.sign_out()
    return _session(gate)
