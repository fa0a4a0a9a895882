from __future__ import annotations

import pytest

from house_blackjack.agent_utils import FlatBettor, parse_dealer_upcard, validate_agent_parameters
from house_blackjack.agents.basic import BasicStrategyAgent
from house_blackjack.agents.console import ConsoleAgent
from house_blackjack.agents.guarded import GuardedAgent
from house_blackjack.agents.llm_agent import LLMAgent
from house_blackjack.agents.random_agent import RandomAgent
from house_blackjack.types import Action, GameOption, Observation
from tests.conftest import hand


def make_obs(player, dealer, allowed=None, bet=10, balance=100.0, phase="play") -> Observation:
    d = hand(*dealer)
    return Observation(
        player=hand(*player).view(),
        dealer=d.view(conceal_hole=True),
        dealer_upcard=dealer[0],
        hand_index=0,
        num_hands=1,
        allowed_actions=allowed if allowed is not None else [Action.STAY, Action.HIT, Action.DOUBLE],
        bet=bet,
        balance=balance,
        phase=phase,
    )


def scripted_input(*answers):
    it = iter(answers)
    prompts = []

    def _input(prompt: str) -> str:
        prompts.append(prompt)
        return next(it)

    return _input, prompts


class TestConsoleAgent:
    def test_reprompts_until_valid_action(self) -> None:
        input_fn, prompts = scripted_input("x", "p", " H ")
        agent = ConsoleAgent(input_fn=input_fn, pacing=False)
        assert agent.act(make_obs(["TS", "6D"], ["9C", "7H"]), {}) == Action.HIT
        assert len(prompts) == 3
        assert prompts[0] == "[s-stay  h-hit  d-double]: "

    def test_split_prompt_offers_split(self) -> None:
        input_fn, prompts = scripted_input("p")
        agent = ConsoleAgent(input_fn=input_fn, pacing=False)
        allowed = [Action.STAY, Action.HIT, Action.DOUBLE, Action.SPLIT]
        assert agent.act(make_obs(["8S", "8D"], ["9C", "7H"], allowed), {}) == Action.SPLIT
        assert prompts[0] == "[s-stay  h-hit  d-double  p-split]: "

    def test_bet_must_be_whole_and_in_range(self) -> None:
        input_fn, prompts = scripted_input("ten", "0", "51", "25")
        agent = ConsoleAgent(input_fn=input_fn, pacing=False)
        assert agent.choose_bet(50.5) == 25
        assert prompts[0] == "[Enter bet amount (1-50)]: "

    def test_game_option_and_insurance(self) -> None:
        input_fn, _ = scripted_input("z", "Q", "maybe", "y")
        agent = ConsoleAgent(input_fn=input_fn, pacing=False)
        assert agent.choose_game_option(100) == GameOption.QUIT
        assert agent.insure(make_obs(["9C", "7D"], ["AS", "KH"], phase="insurance"), {}) is True

    def test_pauses_only_when_pacing(self) -> None:
        slept = []
        input_fn, _ = scripted_input("d", "d")
        ConsoleAgent(input_fn=input_fn, pause=slept.append, pacing=False).choose_game_option(100)
        assert slept == []
        ConsoleAgent(input_fn=input_fn, pause=slept.append, pacing=True).choose_game_option(100)
        assert len(slept) == 1


class TestBasicStrategy:
    def test_splits_eights(self) -> None:
        allowed = [Action.STAY, Action.HIT, Action.DOUBLE, Action.SPLIT]
        assert BasicStrategyAgent().act(make_obs(["8S", "8D"], ["TC", "7H"], allowed), {}) == Action.SPLIT

    def test_doubles_eleven(self) -> None:
        assert BasicStrategyAgent().act(make_obs(["6S", "5D"], ["TC", "7H"]), {}) == Action.DOUBLE

    def test_hits_instead_of_double_after_first_card(self) -> None:
        obs = make_obs(["4S", "2D", "5C"], ["6C", "7H"], [Action.STAY, Action.HIT])
        assert BasicStrategyAgent().act(obs, {}) == Action.HIT

    def test_stays_on_stiff_against_weak_dealer(self) -> None:
        assert BasicStrategyAgent().act(make_obs(["TS", "3D"], ["5C", "7H"]), {}) == Action.STAY

    def test_hits_soft_twelve_when_aces_cannot_split(self) -> None:
        assert BasicStrategyAgent().act(make_obs(["AS", "AD"], ["6C", "7H"]), {}) == Action.HIT

    def test_declines_insurance(self) -> None:
        assert BasicStrategyAgent().insure(make_obs(["9C", "7D"], ["AS", "KH"]), {}) is False


def test_flat_bettor_caps_bet_at_whole_chips() -> None:
    bettor = FlatBettor()
    bettor.bet_size = 10
    assert bettor.choose_bet(100) == 10
    assert bettor.choose_bet(7.5) == 7
    assert bettor.choose_game_option(7.5) == GameOption.DEAL


def test_parse_dealer_upcard() -> None:
    assert parse_dealer_upcard(make_obs(["9C", "7D"], ["AS", "KH"])) == 11
    assert parse_dealer_upcard(make_obs(["9C", "7D"], ["QS", "KH"])) == 10
    assert parse_dealer_upcard(make_obs(["9C", "7D"], ["4S", "KH"])) == 4


def test_validate_agent_parameters() -> None:
    validate_agent_parameters(temperature=0.5, prompt_mode="verbose")
    with pytest.raises(ValueError):
        validate_agent_parameters(temperature=3.0)
    with pytest.raises(ValueError):
        validate_agent_parameters(prompt_mode="chatty")


def test_random_agent_is_seeded_and_legal() -> None:
    obs = make_obs(["TS", "6D"], ["9C", "7H"])
    a = [RandomAgent(seed=5).act(obs, {}) for _ in range(3)]
    b = [RandomAgent(seed=5).act(obs, {}) for _ in range(3)]
    assert a == b
    assert all(x in obs.allowed_actions for x in a)


class _Stubborn:
    bet = 500

    def choose_game_option(self, balance):
        return GameOption.DEAL

    def choose_bet(self, balance):
        return self.bet

    def insure(self, observation, info):
        return True

    def act(self, observation, info):
        return Action.SPLIT


class TestGuardedAgent:
    def test_illegal_action_falls_back_to_first_allowed(self) -> None:
        guarded = GuardedAgent(_Stubborn())
        info = {}
        assert guarded.act(make_obs(["TS", "6D"], ["9C", "7H"]), info) == Action.STAY
        assert guarded.illegal_count == 1
        assert info == {"illegal_attempt": "SPLIT", "fallback_action": "STAY"}
        assert guarded.illegal_rate(4) == 0.25

    def test_legal_action_passes_through(self) -> None:
        guarded = GuardedAgent(_Stubborn())
        allowed = [Action.STAY, Action.HIT, Action.DOUBLE, Action.SPLIT]
        assert guarded.act(make_obs(["8S", "8D"], ["9C", "7H"], allowed), {}) == Action.SPLIT
        assert guarded.illegal_count == 0

    def test_oversized_bet_replaced_with_minimum(self) -> None:
        guarded = GuardedAgent(_Stubborn())
        assert guarded.choose_bet(100) == 1
        assert guarded.illegal_log == [{"attempted_bet": 500, "balance": 100}]
        guarded.reset_illegals()
        assert guarded.illegal_count == 0


class TestLLMAgent:
    def test_requires_ask_fn_or_provider(self) -> None:
        with pytest.raises(ValueError):
            LLMAgent()

    def test_parses_action_from_reply(self) -> None:
        agent = LLMAgent(ask_fn=lambda prompt: "Action: hit")
        info = {}
        assert agent.act(make_obs(["TS", "6D"], ["9C", "7H"]), info) == Action.HIT
        assert info["llm_status"] == "ok"
        assert info["llm_provider"] == "custom"

    def test_stand_means_stay(self) -> None:
        agent = LLMAgent(ask_fn=lambda prompt: "STAND")
        assert agent.act(make_obs(["TS", "7D"], ["9C", "7H"]), {}) == Action.STAY

    def test_insurance_answer(self) -> None:
        prompts = []

        def ask(prompt: str) -> str:
            prompts.append(prompt)
            return "YES"

        agent = LLMAgent(ask_fn=ask, prompt_mode="minimal")
        assert agent.insure(make_obs(["9C", "7D"], ["AS", "KH"], bet=20), {}) is True
        assert "Insurance costs 10" in prompts[0]

    def test_errors_are_retried_then_fall_back(self) -> None:
        calls = []
        slept = []

        def broken(prompt: str) -> str:
            calls.append(prompt)
            raise ConnectionError("offline")

        agent = LLMAgent(ask_fn=broken, retries=2, sleep=slept.append)
        info = {}
        assert agent.act(make_obs(["TS", "6D"], ["9C", "7H"]), info) == Action.STAY
        assert len(calls) == 3
        assert len(slept) == 2
        assert info["llm_status"] == "error"
        assert info["llm_error"] == "ConnectionError: offline"
        assert info["llm_attempts"] == 3

    def test_empty_reply_is_recorded(self) -> None:
        agent = LLMAgent(ask_fn=lambda prompt: "  ", retries=0, debug_log=True)
        info = {}
        agent.act(make_obs(["TS", "6D"], ["9C", "7H"]), info)
        assert info["llm_status"] == "empty"
        assert "Dealer upcard: 9" in info["llm_prompt"]

    def test_verbose_prompt_names_split_hand(self) -> None:
        agent = LLMAgent(ask_fn=lambda prompt: "STAY", prompt_mode="verbose")
        obs = make_obs(["8S", "3D"], ["9C", "7H"])
        obs.hand_index = 1
        obs.num_hands = 2
        prompt = agent._build_prompt(obs)
        assert "(hand 2 of 2)" in prompt
        assert "Allowed actions: STAY, HIT, DOUBLE" in prompt
