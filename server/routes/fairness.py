"""Provably fair verification endpoints."""

from fastapi import APIRouter, Header, HTTPException
from typing import Annotated

from fairjack.cards import replay_deck
from fairjack.exceptions import SeedNotRevealed
from fairjack.verification import verify
from server.schemas import AuditResponse, VerifyRequest, VerifyResponse
from server.service import SessionNotFound, get_game_service
from server.session import extract_session_id

router = APIRouter()


@router.post("/verify")
async def verify_seed(request: VerifyRequest) -> VerifyResponse:
    """Check a revealed server seed against its published hash."""
    valid = verify(request.server_seed, request.hashed_server_seed)

    dealing_order = None
    if request.client_seed:
        dealing_order = [str(c) for c in replay_deck(request.server_seed, request.client_seed)]

    return VerifyResponse(valid=valid, dealing_order=dealing_order)


@router.get("/session")
async def audit_session(
    session_id: Annotated[str | None, Header(alias="X-Session-ID")] = None,
) -> AuditResponse:
    """Replay the caller's last finished round from its revealed seeds."""
    service = await get_game_service()
    try:
        session, report = await service.audit(extract_session_id(session_id))
    except SessionNotFound:
        raise HTTPException(status_code=404, detail="Session not found")
    except SeedNotRevealed as exc:
        raise HTTPException(status_code=409, detail=str(exc))

    commitment = session.commitment
    return AuditResponse(
        game_id=report.game_id,
        valid=report.valid,
        hash_valid=report.hash_valid,
        deck_matches=report.deck_matches,
        server_seed=commitment.server_seed,
        hashed_server_seed=commitment.hashed_server_seed,
        client_seed=commitment.client_seed,
        nonce=commitment.nonce,
        dealt_cards=[str(c) for c in report.dealt_cards],
    )
