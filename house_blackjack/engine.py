from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from . import rules
from .bankroll import Bankroll
from .cards import Deck
from .constants import MINIMUM_BET
from .hand import Hand
from .types import Action, HandResult, InsuranceResult, Observation, Outcome, RoundResult


@dataclass
class Session:
    """State carried from round to round: the deck and the chip balance."""

    deck: Deck = field(default_factory=Deck)
    bankroll: Bankroll = field(default_factory=Bankroll)
    rounds_played: int = 0

    @classmethod
    def new(cls, seed: Optional[int] = None, chips: Optional[float] = None) -> "Session":
        bankroll = Bankroll() if chips is None else Bankroll(chips)
        return cls(deck=Deck(seed), bankroll=bankroll)


@dataclass
class HandState:
    player: Hand
    dealer: Hand
    bet: int
    allow_blackjack: bool = True
    is_split_aces: bool = False
    is_doubled: bool = False


class RoundEngine:
    """Plays one betting round at a time against a fixed-rule dealer.

    The agent supplies decisions through `insure(obs, info) -> bool` and
    `act(obs, info) -> Action`. Every step is reported to `log_fn` as a plain
    event dict, which is how narration and JSONL logging hook in.
    """

    def __init__(self, log_fn: Optional[Callable[[Dict], None]] = None):
        self.log_fn = log_fn

    def emit(self, event: Dict) -> None:
        if self.log_fn is not None:
            self.log_fn(event)

    # API: one call = one betting round (including a possible split)
    def play_round(self, session: Session, agent: Any, bet: int) -> RoundResult:
        bankroll = session.bankroll
        deck = session.deck
        if isinstance(bet, bool) or not isinstance(bet, int):
            raise ValueError(f"Bet must be a whole number of chips, got {bet!r}")
        if bet < MINIMUM_BET or bet > bankroll.balance:
            raise ValueError(f"Bet of {bet} is outside {MINIMUM_BET}..{bankroll.max_bet}")

        deck.shuffle()
        dealer = Hand()
        player = Hand()
        # player receives each card first
        for _ in range(2):
            player.add_card(deck.deal_next_card())
            dealer.add_card(deck.deal_next_card())

        trace: Dict = {"decisions": []}
        self.emit({
            "event": "deal",
            "round": session.rounds_played,
            "bet": bet,
            "balance": bankroll.balance,
            "dealer": dealer.show_up_card(),
            "player": player.show_hand(),
        })

        state = HandState(player=player, dealer=dealer, bet=bet)

        insurance: Optional[InsuranceResult] = None
        if rules.insurance_offered(dealer, bet, bankroll.balance):
            obs = self._observation(bankroll, state, 0, 1, [], phase="insurance")
            meta: Dict = {}
            take = bool(agent.insure(obs, meta))
            trace["decisions"].append({
                "hand_index": 0,
                "obs": obs,
                "insurance": take,
                "meta": meta,
            })
            if take:
                insurance = self._settle_insurance(bankroll, dealer, bet)
            else:
                self.emit({"event": "insurance", "taken": False, "balance": bankroll.balance})

        hands: List[HandResult] = []
        split = False
        first_action: Optional[Action] = None
        if rules.split_offered(dealer, player, bet, bankroll.balance):
            obs = self._observation(bankroll, state, 0, 1, rules.starting_actions(split_allowed=True))
            first_action = self._ask(agent, obs, trace, 0)
            if first_action == Action.SPLIT:
                split = True
                hands = self._play_split(session, agent, state, trace)
        if not split:
            # a non-split choice made at the split prompt is the hand's first decision
            hands = [self._play_hand(session, agent, state, trace, 0, 1, first_action=first_action)]

        session.rounds_played += 1
        result = RoundResult(
            bet=bet,
            hands=hands,
            insurance=insurance,
            split=split,
            balance=bankroll.balance,
            trace=trace,
        )
        self.emit({"event": "round_end", **result.summary()})
        return result

    def _play_split(self, session: Session, agent: Any, state: HandState, trace: Dict) -> List[HandResult]:
        deck = session.deck
        c1 = state.player.first_card
        c2 = state.player.second_card
        split_aces = c1.is_ace and c2.is_ace
        # each sub-hand faces its own copy of the dealer hand, drawn out separately
        dealer_copy = state.dealer.clone()
        first = Hand([c1])
        second = Hand([c2])
        first.add_card(deck.deal_next_card())
        second.add_card(deck.deal_next_card())
        states = [
            HandState(first, state.dealer, state.bet, allow_blackjack=False, is_split_aces=split_aces),
            HandState(second, dealer_copy, state.bet, allow_blackjack=False, is_split_aces=split_aces),
        ]
        self.emit({
            "event": "split",
            "split_aces": split_aces,
            "hands": [s.player.show_hand() for s in states],
        })

        results: List[HandResult] = []
        for i, hs in enumerate(states):
            self.emit({"event": "split_hand", "hand_index": i, "num_hands": len(states)})
            # stakes of sub-hands still waiting stay off limits for a double-down
            reserved = sum(s.bet for s in states[i + 1:])
            results.append(self._play_hand(session, agent, hs, trace, i, len(states), reserved=reserved))
        return results

    def _play_hand(
        self,
        session: Session,
        agent: Any,
        hs: HandState,
        trace: Dict,
        hand_index: int,
        num_hands: int,
        *,
        first_action: Optional[Action] = None,
        reserved: float = 0,
    ) -> HandResult:
        bankroll = session.bankroll
        if hs.dealer.is_blackjack or (hs.allow_blackjack and hs.player.is_blackjack):
            return self._settle_blackjack(bankroll, hs, hand_index)

        if not hs.is_split_aces:
            self._play_player_hand(session, agent, hs, trace, hand_index, num_hands, first_action, reserved)

        if hs.player.is_busted:
            return self._settle(bankroll, hs, Outcome.PLAYER_BUST, hand_index)

        self._play_dealer_hand(session.deck, hs.dealer, hand_index)
        return self._settle(bankroll, hs, rules.compare_hands(hs.dealer, hs.player), hand_index)

    def _play_player_hand(
        self,
        session: Session,
        agent: Any,
        hs: HandState,
        trace: Dict,
        hand_index: int,
        num_hands: int,
        first_action: Optional[Action],
        reserved: float,
    ) -> None:
        bankroll = session.bankroll
        action = first_action
        while True:
            if action is None:
                if hs.player.is_starting_hand:
                    allowed = rules.starting_actions()
                else:
                    allowed = rules.drawing_actions()
                obs = self._observation(bankroll, hs, hand_index, num_hands, allowed)
                action = self._ask(agent, obs, trace, hand_index)

            if action == Action.STAY:
                self.emit({"event": "action", "action": "STAY", "hand_index": hand_index, "player": hs.player.show_hand()})
                return
            if action == Action.DOUBLE:
                hs.bet = rules.double_down_bet(hs.bet, bankroll.balance - reserved)
                hs.is_doubled = True
                card = session.deck.deal_next_card()
                hs.player.add_card(card)
                self.emit({
                    "event": "action",
                    "action": "DOUBLE",
                    "hand_index": hand_index,
                    "card": card.label(),
                    "bet": hs.bet,
                    "player": hs.player.show_hand(),
                })
                return
            if action == Action.HIT:
                card = session.deck.deal_next_card()
                hs.player.add_card(card)
                self.emit({
                    "event": "action",
                    "action": "HIT",
                    "hand_index": hand_index,
                    "card": card.label(),
                    "player": hs.player.show_hand(),
                })
                if hs.player.is_busted:
                    return
                action = None
                continue
            raise ValueError(f"Unexpected action {action!r} during play")

    def _play_dealer_hand(self, deck: Deck, dealer: Hand, hand_index: int) -> None:
        drawn: List[str] = []
        while rules.dealer_should_draw(dealer):
            card = deck.deal_next_card()
            dealer.add_card(card)
            drawn.append(card.label())
        self.emit({
            "event": "dealer_play",
            "hand_index": hand_index,
            "drawn": drawn,
            "dealer": dealer.show_hand(),
            "total": dealer.soft_value,
            "busted": dealer.is_busted,
        })

    def _ask(self, agent: Any, obs: Observation, trace: Dict, hand_index: int) -> Action:
        self.emit({
            "event": "turn",
            "hand_index": hand_index,
            "dealer": obs.dealer.display,
            "player": obs.player.display,
            "allowed_actions": [a.name for a in obs.allowed_actions],
        })
        meta: Dict = {}
        action = agent.act(obs, meta)
        if action not in obs.allowed_actions:
            raise ValueError(
                f"Illegal {getattr(action, 'name', action)} attempted; "
                f"allowed: {', '.join(a.name for a in obs.allowed_actions)}"
            )
        trace["decisions"].append({
            "hand_index": hand_index,
            "obs": obs,
            "action": action,
            "meta": meta,
        })
        return action

    def _observation(
        self,
        bankroll: Bankroll,
        hs: HandState,
        hand_index: int,
        num_hands: int,
        allowed: List[Action],
        phase: str = "play",
    ) -> Observation:
        return Observation(
            player=hs.player.view(),
            dealer=hs.dealer.view(conceal_hole=True),
            dealer_upcard=hs.dealer.first_card.label(),
            hand_index=hand_index,
            num_hands=num_hands,
            allowed_actions=list(allowed),
            bet=hs.bet,
            balance=bankroll.balance,
            phase=phase,
        )

    def _settle_insurance(self, bankroll: Bankroll, dealer: Hand, bet: int) -> InsuranceResult:
        stake = bet / 2
        if dealer.is_blackjack:
            delta = stake * rules.INSURANCE_PAYOUT
            bankroll.increase(delta)
        else:
            delta = -stake
            bankroll.decrease(stake)
        self.emit({
            "event": "insurance",
            "taken": True,
            "stake": stake,
            "dealer_blackjack": dealer.is_blackjack,
            "delta": delta,
            "balance": bankroll.balance,
        })
        return InsuranceResult(stake=stake, dealer_blackjack=dealer.is_blackjack, delta=delta)

    def _settle_blackjack(self, bankroll: Bankroll, hs: HandState, hand_index: int) -> HandResult:
        dealer_bj = hs.dealer.is_blackjack
        player_bj = hs.player.is_blackjack
        if dealer_bj and player_bj:
            outcome = Outcome.BLACKJACK_PUSH if hs.allow_blackjack else Outcome.PUSH
        elif dealer_bj:
            outcome = Outcome.DEALER_BLACKJACK
        else:
            outcome = Outcome.PLAYER_BLACKJACK
        return self._settle(bankroll, hs, outcome, hand_index)

    def _settle(self, bankroll: Bankroll, hs: HandState, outcome: Outcome, hand_index: int) -> HandResult:
        if outcome == Outcome.PLAYER_BLACKJACK:
            delta = rules.BLACKJACK_PAYOUT * hs.bet
        elif outcome in (Outcome.PLAYER_WIN, Outcome.DEALER_BUST):
            delta = float(hs.bet)
        elif outcome in (Outcome.DEALER_BLACKJACK, Outcome.PLAYER_BUST, Outcome.DEALER_WIN):
            delta = -float(hs.bet)
        else:
            delta = 0.0

        if delta > 0:
            bankroll.increase(delta)
        elif delta < 0:
            bankroll.decrease(-delta)

        # a busted player never sees the dealer's hole card turned
        if outcome == Outcome.PLAYER_BUST:
            dealer_display = hs.dealer.show_up_card()
        else:
            dealer_display = hs.dealer.show_hand()
        self.emit({
            "event": "settle",
            "hand_index": hand_index,
            "outcome": outcome.value,
            "bet": hs.bet,
            "delta": delta,
            "balance": bankroll.balance,
            "dealer": dealer_display,
            "player": hs.player.show_hand(),
            "dealer_total": hs.dealer.soft_value,
            "player_total": hs.player.soft_value,
        })
        return HandResult(
            outcome=outcome,
            bet=hs.bet,
            delta=delta,
            player_cards=hs.player.labels(),
            dealer_cards=hs.dealer.labels(),
            doubled=hs.is_doubled,
            split_aces=hs.is_split_aces,
        )
