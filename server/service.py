"""Action surface: loads a session, runs one engine action, saves it back."""

import asyncio
import logging
import weakref
from decimal import Decimal
from typing import Callable

from config import config
from fairjack.cards import Card
from fairjack.commitment import Commitment, generate_commitment
from fairjack.exceptions import GameError
from fairjack.game import BlackjackGame, GameEvent, GameSession
from fairjack.hand import Hand
from fairjack.verification import AuditReport, audit_round
from server.schemas import (
    CardResponse,
    GameStateResponse,
    HandResponse,
    ProvablyFairResponse,
)
from server.session import (
    SessionSigner,
    SessionStore,
    get_session_signer,
    get_session_store,
)

logger = logging.getLogger(__name__)

SESSION_EXPIRED_MESSAGE = "Session expired. Please start a new game."


class SessionNotFound(LookupError):
    """No stored session for the given id."""


def _card_to_response(card: Card) -> CardResponse:
    """Project a card; hidden cards keep only the marker."""
    if card.hidden:
        return CardResponse(hidden=True)
    return CardResponse(
        hidden=False,
        rank=card.rank.value,
        suit=card.suit.value,
        value=card.value,
    )


def _hand_to_response(hand: Hand) -> HandResponse:
    """Convert a Hand to HandResponse."""
    return HandResponse(
        cards=[_card_to_response(c) for c in hand.cards],
        value=hand.value,
        is_blackjack=hand.is_blackjack and not hand.has_hidden,
        is_busted=hand.is_busted,
    )


def _commitment_factory() -> Callable[[str | None], Commitment]:
    """Commitment factory using the configured seed sizes."""

    def factory(client_seed: str | None) -> Commitment:
        return generate_commitment(
            client_seed,
            server_seed_bytes=config.fairness.server_seed_bytes,
            client_seed_bytes=config.fairness.client_seed_bytes,
        )

    return factory


class GameService:
    """
    Runs game actions against an injected session store.

    Actions on the same session id are serialized with a per-session lock.
    Player mistakes come back in the response message, never as errors.
    """

    def __init__(
        self,
        store: SessionStore,
        signer: SessionSigner,
        initial_balance: Decimal | None = None,
    ) -> None:
        self.store = store
        self._signer = signer
        self._initial_balance = (
            initial_balance if initial_balance is not None else config.game.initial_balance
        )
        self._commitment_factory = _commitment_factory()
        # Entries vanish once no task holds or waits on the lock
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def _new_session(self, session_id: str, balance: Decimal | None = None) -> GameSession:
        return GameSession.new(
            session_id=session_id,
            balance=balance if balance is not None else self._initial_balance,
            commitment=self._commitment_factory(None),
        )

    def _lock_for(self, session_id: str) -> asyncio.Lock:
        lock = self._locks.get(session_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[session_id] = lock
        return lock

    def _game(self, session: GameSession) -> BlackjackGame:
        game = BlackjackGame(session, commitment_factory=self._commitment_factory)
        game.subscribe(lambda event: _log_event(session.id, event))
        return game

    def client_state(self, session: GameSession, message: str = "") -> GameStateResponse:
        """Project a session into the client-safe response."""
        game = self._game(session)
        return GameStateResponse(
            session_id=self._signer.sign(session.id),
            state=session.state.value,
            dealer_hand=_hand_to_response(session.dealer_hand),
            player_hand=_hand_to_response(session.player_hand),
            dealer_score=session.dealer_hand.value,
            player_score=session.player_hand.value,
            balance=float(session.balance),
            bet=float(session.current_bet),
            result=session.result.value if session.result else None,
            message=message,
            provably_fair=ProvablyFairResponse(**session.commitment.public_view()),
            can_hit=game.can_hit,
            can_stand=game.can_stand,
            can_bet=game.can_bet,
        )

    async def initialize(self, initial_balance: Decimal | None = None) -> GameStateResponse:
        """Start a brand new session."""
        session = self._new_session(self.store.create_session_id(), initial_balance)
        await self.store.set(session.id, session.to_dict())
        logger.info("Created session %s with balance %s", session.id, session.balance)
        return self.client_state(session)

    async def get_state(self, session_id: str | None) -> GameStateResponse:
        """Current state, creating a session when none exists."""
        return await self._run(session_id, "state", None)

    async def place_bet(
        self,
        amount: Decimal,
        session_id: str | None = None,
        client_seed: str | None = None,
    ) -> GameStateResponse:
        """Place a bet and deal."""
        return await self._run(
            session_id,
            "bet",
            lambda game: game.place_bet(amount, client_seed=client_seed),
            expired_message=None,
        )

    async def hit(self, session_id: str | None = None) -> GameStateResponse:
        """Player takes a card."""
        return await self._run(session_id, "hit", lambda game: game.hit())

    async def stand(self, session_id: str | None = None) -> GameStateResponse:
        """Player stands; dealer plays out."""
        return await self._run(session_id, "stand", lambda game: game.stand())

    async def new_round(self, session_id: str | None = None) -> GameStateResponse:
        """Back to betting with a fresh commitment."""
        return await self._run(
            session_id, "new_round", lambda game: game.new_round(), expired_message=None
        )

    async def audit(self, session_id: str | None) -> tuple[GameSession, AuditReport]:
        """
        Replay the session's finished round.

        Raises:
            SessionNotFound: Unknown session
            SeedNotRevealed: The round is still open
            CommitmentIntegrityError: Stored commitment is corrupt
        """
        data = await self.store.get(session_id) if session_id else None
        if data is None:
            raise SessionNotFound(session_id)

        session = GameSession.from_dict(data)
        return session, audit_round(session.commitment, session.deck.cards)

    async def _run(
        self,
        session_id: str | None,
        action: str,
        operation: Callable[[BlackjackGame], object] | None,
        expired_message: str | None = SESSION_EXPIRED_MESSAGE,
    ) -> GameStateResponse:
        """Load, act and save under the session's lock."""
        session_id = session_id or self.store.create_session_id()

        async with self._lock_for(session_id):
            data, created = await self.store.get_or_create(
                session_id, lambda: self._new_session(session_id).to_dict()
            )
            session = GameSession.from_dict(data)

            if created:
                logger.info("Session %s not found; created a fresh one for %s", session_id, action)
                if operation is not None and expired_message:
                    return self.client_state(session, expired_message)

            if operation is None:
                return self.client_state(session)

            message = ""
            try:
                operation(self._game(session))
            except GameError as exc:
                message = str(exc)
                logger.info("Session %s: %s rejected: %s", session_id, action, message)

            await self.store.set(session_id, session.to_dict())
            return self.client_state(session, message)


def _log_event(session_id: str, event: GameEvent) -> None:
    logger.debug("Session %s event %s", session_id, event)


# Global service instance
_game_service: GameService | None = None


async def get_game_service() -> GameService:
    """Get or create the game service on top of the configured store."""
    global _game_service
    if _game_service is None:
        _game_service = GameService(await get_session_store(), get_session_signer())
    return _game_service


def reset_game_service() -> None:
    """Drop the global service so the next call rebuilds it."""
    global _game_service
    _game_service = None
