"""Blackjack game engine with state machine."""

import logging
from decimal import Decimal
from typing import Callable

from transitions import Machine

from fairjack.cards import Card, Deck, build_deck
from fairjack.commitment import Commitment, generate_commitment
from fairjack.exceptions import InsufficientBalance, InvalidBet, InvalidState
from fairjack.game.events import EventEmitter, EventType, GameEvent
from fairjack.game.session import GameSession
from fairjack.game.state import GameState, is_valid_transition
from fairjack.hand import BLACKJACK, Hand, determine_outcome
from fairjack.payout import net_result, payout

logger = logging.getLogger(__name__)

# House rule: dealer stands on every 17, soft or hard
DEALER_STANDS_ON = 17

CommitmentFactory = Callable[[str | None], Commitment]


class BlackjackGame:
    """
    Blackjack game engine using a state machine.

    Wraps one GameSession and mutates it in place. Callers must not run
    two actions on the same session concurrently. User errors raise
    GameError subclasses before the session is modified.
    """

    # State machine states
    STATES = [s.value for s in GameState]

    # State machine transitions
    TRANSITIONS = [
        {"trigger": "start_deal", "source": "betting", "dest": "dealing"},
        {"trigger": "finish_deal", "source": "dealing", "dest": "playing"},
        {"trigger": "deal_natural", "source": "dealing", "dest": "gameOver"},
        {"trigger": "take_card", "source": "playing", "dest": "playing"},
        {"trigger": "player_busts", "source": "playing", "dest": "gameOver"},
        {"trigger": "player_stands", "source": "playing", "dest": "dealerTurn"},
        {"trigger": "dealer_finishes", "source": "dealerTurn", "dest": "gameOver"},
        {"trigger": "reset_round", "source": ["gameOver", "betting"], "dest": "betting"},
        # Re-entry when hand data shows a round in progress
        {
            "trigger": "recover_play",
            "source": ["betting", "dealing", "dealerTurn", "gameOver"],
            "dest": "playing",
        },
    ]

    def __init__(
        self,
        session: GameSession,
        commitment_factory: CommitmentFactory | None = None,
    ) -> None:
        """
        Attach the engine to a session.

        Args:
            session: Session to play; mutated in place by every action
            commitment_factory: Builds a commitment from an optional client seed
        """
        self.session = session
        self.events = EventEmitter()
        self._commitment_factory = commitment_factory or (
            lambda client_seed: generate_commitment(client_seed)
        )

        # Initialize state machine from the persisted state
        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial=session.state.value,
            auto_transitions=False,
            model_attribute="_machine_state",
            after_state_change="_sync_state",
        )

    @property
    def state(self) -> GameState:
        """Get current game state as enum."""
        return GameState(self._machine_state)  # type: ignore[attr-defined]

    def subscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to game events."""
        self.events.subscribe(handler, event_type)

    def _sync_state(self) -> None:
        """Copy the machine state onto the session after every transition."""
        previous = self.session.state
        self.session.state = self.state
        if is_valid_transition(previous, self.state):
            logger.debug("Session %s: %s -> %s", self.session.id, previous, self.state)
        else:
            logger.warning(
                "Session %s: coerced %s -> %s", self.session.id, previous, self.state
            )

    def place_bet(self, amount: Decimal | int | str, client_seed: str | None = None) -> None:
        """
        Place a bet and deal the opening cards.

        Args:
            amount: Stake, deducted from the balance immediately
            client_seed: Optional player-chosen seed mixed into the shuffle

        Raises:
            InvalidBet: Amount is not positive
            InsufficientBalance: Amount exceeds the balance
            InvalidState: A round is still in progress
        """
        session = self.session
        amount = Decimal(str(amount))

        if self.state not in (GameState.BETTING, GameState.GAME_OVER):
            raise InvalidState("A round is already in progress. Hit or stand first.")
        if amount <= 0:
            raise InvalidBet("Please place a bet")
        if amount > session.balance:
            raise InsufficientBalance("You don't have enough balance for this bet")

        if self.state == GameState.GAME_OVER:
            self.new_round()

        session.balance -= amount
        session.current_bet = amount
        session.result = None
        self.events.emit_new(EventType.BET_PLACED, amount=str(amount))

        session.commitment = self._commitment_factory(client_seed)
        session.deck = build_deck(session.commitment.server_seed, session.commitment.client_seed)
        session.dealer_hand = Hand()
        session.player_hand = Hand()
        self.events.emit_new(
            EventType.COMMITMENT_CREATED,
            game_id=session.commitment.game_id,
            hashed_server_seed=session.commitment.hashed_server_seed,
        )

        self.start_deal()  # type: ignore[attr-defined]

        # Deal: dealer, player, dealer (face down), player
        self._deal_card_to_hand(session.dealer_hand)
        self._deal_card_to_hand(session.player_hand)
        self._deal_card_to_hand(session.dealer_hand, face_up=False)
        self._deal_card_to_hand(session.player_hand)

        self.events.emit_new(EventType.ROUND_STARTED, game_id=session.commitment.game_id)

        if session.player_hand.value == BLACKJACK:
            self.events.emit_new(EventType.PLAYER_BLACKJACK)
            self._reveal_hole_card()
            self.deal_natural()  # type: ignore[attr-defined]
            self._resolve_round()
            return

        self.finish_deal()  # type: ignore[attr-defined]

    def hit(self) -> Card:
        """
        Player takes another card.

        Returns:
            The card drawn

        Raises:
            InvalidState: No round is in progress
        """
        self._ensure_playing("hit")
        hand = self.session.player_hand

        card = self._deal_card_to_hand(hand)
        self.events.emit_new(EventType.PLAYER_HIT, hand_value=hand.value)

        if hand.is_busted:
            self.events.emit_new(EventType.PLAYER_BUSTS, hand_value=hand.value)
            self._reveal_hole_card()
            self.player_busts()  # type: ignore[attr-defined]
            self._resolve_round()
        else:
            self.take_card()  # type: ignore[attr-defined]

        return card

    def stand(self) -> None:
        """
        Player stands; the dealer plays out and the round is resolved.

        The dealer loop runs to completion before returning.

        Raises:
            InvalidState: No round is in progress
        """
        self._ensure_playing("stand")
        self.events.emit_new(EventType.PLAYER_STAND, hand_value=self.session.player_hand.value)

        self._reveal_hole_card()
        self.player_stands()  # type: ignore[attr-defined]
        self._play_dealer()
        self.dealer_finishes()  # type: ignore[attr-defined]
        self._resolve_round()

    def new_round(self) -> None:
        """
        Return to betting with a fresh commitment.

        Balance and session id carry over. Calling it again while already
        betting is harmless.

        Raises:
            InvalidState: A round is still in progress
        """
        if self.state not in (GameState.GAME_OVER, GameState.BETTING):
            raise InvalidState("Finish the current round before starting a new one.")

        session = self.session
        session.dealer_hand = Hand()
        session.player_hand = Hand()
        session.deck = Deck()
        session.result = None
        session.current_bet = Decimal("0")
        session.commitment = self._commitment_factory(None)

        self.reset_round()  # type: ignore[attr-defined]
        self.events.emit_new(
            EventType.NEW_ROUND,
            game_id=session.commitment.game_id,
            hashed_server_seed=session.commitment.hashed_server_seed,
        )

    def _ensure_playing(self, action: str) -> None:
        """Coerce into PLAYING when the hands show an unfinished round."""
        if self.state == GameState.PLAYING:
            return

        session = self.session
        if session.player_hand.cards and session.dealer_hand.cards and session.result is None:
            self.events.emit_new(EventType.STATE_RECOVERED, previous=self.state.value, action=action)
            self.recover_play()  # type: ignore[attr-defined]
            return

        raise InvalidState(f"Invalid game state for {action} action. Please start a new game.")

    def _deal_card_to_hand(self, hand: Hand, face_up: bool = True) -> Card:
        """Deal a card to a hand."""
        card = self.session.deck.draw()
        if not face_up:
            card = card.conceal()
        hand.add_card(card)
        self.events.emit_new(
            EventType.CARD_DEALT,
            card=str(card),
            hand="dealer" if hand is self.session.dealer_hand else "player",
            hand_value=hand.value,
        )
        return card

    def _reveal_hole_card(self) -> None:
        """Turn the dealer's hidden card face up."""
        dealer_hand = self.session.dealer_hand
        if not dealer_hand.has_hidden:
            return
        dealer_hand.reveal()
        self.events.emit_new(
            EventType.DEALER_REVEALS,
            card=str(dealer_hand.cards[1]) if len(dealer_hand) > 1 else None,
            hand_value=dealer_hand.value,
        )

    def _play_dealer(self) -> None:
        """Dealer hits until reaching 17 or more."""
        dealer_hand = self.session.dealer_hand
        while dealer_hand.value < DEALER_STANDS_ON:
            self._deal_card_to_hand(dealer_hand)
            self.events.emit_new(EventType.DEALER_HITS, hand_value=dealer_hand.value)

        if dealer_hand.is_busted:
            self.events.emit_new(EventType.DEALER_BUSTS, hand_value=dealer_hand.value)
        else:
            self.events.emit_new(EventType.DEALER_STANDS, hand_value=dealer_hand.value)

    def _resolve_round(self) -> None:
        """Settle the bet and reveal the server seed."""
        session = self.session
        outcome = determine_outcome(session.player_hand, session.dealer_hand)

        session.result = outcome
        session.balance += payout(session.current_bet, outcome)
        session.commitment.complete()

        logger.info(
            "Session %s round %s: %s (player %d, dealer %d, bet %s, balance %s)",
            session.id,
            session.commitment.game_id,
            outcome,
            session.player_hand.value,
            session.dealer_hand.value,
            session.current_bet,
            session.balance,
        )
        self.events.emit_new(
            EventType.ROUND_ENDED,
            outcome=outcome.value,
            result=str(net_result(session.current_bet, outcome)),
            balance=str(session.balance),
        )
        self.events.emit_new(
            EventType.SEED_REVEALED,
            game_id=session.commitment.game_id,
            server_seed=session.commitment.server_seed,
        )

    @property
    def can_hit(self) -> bool:
        """Check if hitting is allowed."""
        return self.state == GameState.PLAYING and not self.session.player_hand.is_busted

    @property
    def can_stand(self) -> bool:
        """Check if standing is allowed."""
        return self.state == GameState.PLAYING

    @property
    def can_bet(self) -> bool:
        """Check if a new bet can be placed."""
        return (
            self.state in (GameState.BETTING, GameState.GAME_OVER)
            and self.session.balance > 0
        )
