"""Game API endpoints."""

from fastapi import APIRouter, Header
from typing import Annotated

from server.schemas import BetRequest, GameStateResponse, InitRequest
from server.service import get_game_service
from server.session import extract_session_id

router = APIRouter()

SessionHeader = Annotated[str | None, Header(alias="X-Session-ID")]


@router.post("/init")
async def initialize(request: InitRequest | None = None) -> GameStateResponse:
    """Create a new game session."""
    service = await get_game_service()
    balance = request.initial_balance if request is not None else None
    return await service.initialize(balance)


@router.get("/state")
async def get_state(session_id: SessionHeader = None) -> GameStateResponse:
    """Get current game state."""
    service = await get_game_service()
    return await service.get_state(extract_session_id(session_id))


@router.post("/bet")
async def place_bet(
    request: BetRequest,
    session_id: SessionHeader = None,
) -> GameStateResponse:
    """Place a bet and deal cards."""
    service = await get_game_service()
    return await service.place_bet(
        request.amount,
        session_id=extract_session_id(session_id),
        client_seed=request.client_seed,
    )


@router.post("/hit")
async def hit(session_id: SessionHeader = None) -> GameStateResponse:
    """Player takes another card."""
    service = await get_game_service()
    return await service.hit(extract_session_id(session_id))


@router.post("/stand")
async def stand(session_id: SessionHeader = None) -> GameStateResponse:
    """Player stands; the dealer plays out the round."""
    service = await get_game_service()
    return await service.stand(extract_session_id(session_id))


@router.post("/new-round")
async def new_round(session_id: SessionHeader = None) -> GameStateResponse:
    """Start the next round."""
    service = await get_game_service()
    return await service.new_round(extract_session_id(session_id))
