from __future__ import annotations

import os
import time
from typing import Any, Callable, Dict, List

from ..agent_utils import FlatBettor, extract_ranks_from_cards, format_allowed_actions, validate_agent_parameters
from ..constants import (
    DEFAULT_BET,
    DEFAULT_GEMINI_MODEL,
    DEFAULT_OLLAMA_MODEL,
    DEFAULT_OPENAI_MODEL,
    DEFAULT_OPENROUTER_MODEL,
    DEFAULT_RETRIES,
    DEFAULT_RETRY_BACKOFF,
    DEFAULT_TIMEOUT_SECONDS,
)
from ..types import Action, Observation

GEMINI_PROVIDERS = {"gemini", "google", "googleai", "google-genai"}

TABLE_RULES = (
    "Rules: single 52-card deck reshuffled every round, dealer stands on all 17s, blackjack pays 3:2, "
    "insurance pays 2:1, double or split only on the first two cards, split hands never count as "
    "blackjack, split aces get one card each."
)


class LLMAgent(FlatBettor):
    """Agent that asks an LLM to choose each decision.

    By default, uses an injected `ask_fn(prompt: str) -> str` callable. Provider
    shortcuts build one for OpenAI (`openai`), a local Ollama server or
    OpenRouter (`requests`), and Gemini (`google-genai`).
    """

    def __init__(
        self,
        ask_fn: Callable[[str], str] | None = None,
        *,
        provider: str | None = None,
        model: str | None = None,
        temperature: float = 0.0,
        prompt_mode: str = "rules_lite",  # one of: minimal, rules_lite, verbose
        debug_log: bool = False,
        retries: int = DEFAULT_RETRIES,
        retry_backoff: float = DEFAULT_RETRY_BACKOFF,
        bet_size: int = DEFAULT_BET,
        sleep: Callable[[float], None] = time.sleep,
    ):
        validate_agent_parameters(temperature=temperature, prompt_mode=prompt_mode)
        if ask_fn is None and provider == "openai":
            ask_fn = self.openai_ask(model=model or DEFAULT_OPENAI_MODEL, temperature=temperature)
        if ask_fn is None and provider == "ollama":
            ask_fn = self.ollama_ask(model=model or DEFAULT_OLLAMA_MODEL, temperature=temperature)
        if ask_fn is None and provider in GEMINI_PROVIDERS:
            ask_fn = self.gemini_api_ask(model=model or DEFAULT_GEMINI_MODEL, temperature=temperature)
        if ask_fn is None and provider in {"openrouter", "openrouter.ai"}:
            ask_fn = self.openrouter_ask(model=model or DEFAULT_OPENROUTER_MODEL, temperature=temperature)
        if ask_fn is None:
            raise ValueError("LLMAgent requires ask_fn or one of provider='openai', 'ollama', 'gemini', 'openrouter'.")
        self.ask_fn = ask_fn
        # Persist settings for downstream logging/meta
        self.provider = provider or "custom"
        self.model = model or "unknown"
        self.prompt_mode = prompt_mode
        self.debug_log = debug_log
        self.retries = max(0, int(retries))
        self.retry_backoff = max(1.0, float(retry_backoff))
        self.bet_size = bet_size
        self.sleep = sleep

    def act(self, observation: Observation, info: Any) -> Action:
        prompt = self._build_prompt(observation)
        out = self._ask(prompt, info).strip().upper()
        # Allow variants like "HIT", "Action: HIT", or JSON-like outputs
        for a in observation.allowed_actions:
            if a.name in out:
                return a
        # STAND is the usual word for STAY
        if "STAND" in out and Action.STAY in observation.allowed_actions:
            return Action.STAY
        # If still invalid, pick a conservative legal default
        return observation.allowed_actions[0]

    def insure(self, observation: Observation, info: Any) -> bool:
        prompt = self._build_insurance_prompt(observation)
        out = self._ask(prompt, info).strip().upper()
        return out.startswith("Y")

    def _ask(self, prompt: str, info: Any) -> str:
        text = ""
        err_msg = None
        attempts = 0
        for attempt in range(self.retries + 1):
            attempts = attempt + 1
            try:
                raw = self.ask_fn(prompt)
                text = raw if isinstance(raw, str) else ("" if raw is None else str(raw))
                if text.strip():
                    err_msg = None
                    break
            except Exception as e:  # noqa: BLE001
                err_msg = f"{type(e).__name__}: {e}"
            # backoff if we have more attempts
            if attempt < self.retries:
                self.sleep(self.retry_backoff ** attempt * 0.5)
        # Always record the raw LLM output and status in meta if possible
        if isinstance(info, dict):
            info["llm_raw"] = text
            info["llm_attempts"] = attempts
            info["llm_provider"] = self.provider
            info["llm_model"] = self.model
            if err_msg is not None:
                info["llm_status"] = "error"
                info["llm_error"] = err_msg
            elif not text.strip():
                info["llm_status"] = "empty"
            else:
                info["llm_status"] = "ok"
            if self.debug_log:
                info["llm_prompt_mode"] = self.prompt_mode
                info["llm_prompt"] = prompt
        return text

    def _ranks(self, cards: List[str]) -> str:
        return extract_ranks_from_cards(cards)

    def _build_prompt(self, obs: Observation) -> str:
        p = obs.player
        up = obs.dealer_upcard[:-1]
        words = ", ".join(a.name for a in obs.allowed_actions)
        if self.prompt_mode == "minimal":
            return (
                "Blackjack.\n"
                f"Dealer upcard: {up}.\n"
                f"Your hand: {self._ranks(p.cards)}.\n"
                f"Reply with exactly one word: {words}. No explanations."
            )
        if self.prompt_mode == "rules_lite":
            return (
                f"Blackjack. {TABLE_RULES}\n"
                f"Dealer upcard: {up}.\n"
                f"Your hand: {self._ranks(p.cards)}.\n"
                f"Reply with exactly one word: {words}. No explanations."
            )
        # verbose
        options = format_allowed_actions(obs.allowed_actions)
        hand_note = f" (hand {obs.hand_index + 1} of {obs.num_hands})" if obs.num_hands > 1 else ""
        return (
            f"You are playing Blackjack. {TABLE_RULES} Return one word: a legal action.\n"
            f"Dealer upcard: {up}.\n"
            f"Player cards{hand_note}: {self._ranks(p.cards)} (total={p.total}, soft={p.is_soft}).\n"
            f"Bet: {obs.bet}. Chips: {obs.balance:g}.\n"
            f"Allowed actions: {options}.\n"
            f"Respond with exactly one of: {options}."
        )

    def _build_insurance_prompt(self, obs: Observation) -> str:
        rules = "" if self.prompt_mode == "minimal" else f" {TABLE_RULES}"
        return (
            f"Blackjack.{rules}\n"
            f"Dealer upcard: {obs.dealer_upcard[:-1]}.\n"
            f"Your hand: {self._ranks(obs.player.cards)}.\n"
            f"Insurance costs {obs.bet / 2:g} and pays 2:1 if the dealer has blackjack.\n"
            "Reply with exactly one word: YES or NO."
        )

    @staticmethod
    def openai_ask(*, model: str, temperature: float = 0.0) -> Callable[[str], str]:
        """Create an ask_fn that queries OpenAI's Chat Completions API.

        Requires the `openai` package and OPENAI_API_KEY.
        """
        try:
            from openai import OpenAI  # type: ignore
        except ImportError as e:
            raise RuntimeError("OpenAI client not available. Install 'openai' and set OPENAI_API_KEY.") from e

        client = OpenAI()

        def _ask(prompt: str) -> str:
            resp = client.chat.completions.create(
                model=model,
                messages=[
                    {"role": "system", "content": "You are a concise assistant."},
                    {"role": "user", "content": prompt},
                ],
                temperature=temperature,
                max_tokens=4,
            )
            return resp.choices[0].message.content or ""

        return _ask

    @staticmethod
    def ollama_ask(*, model: str, temperature: float = 0.0, host: str = "http://127.0.0.1:11434") -> Callable[[str], str]:
        """Create an ask_fn that queries a local Ollama server via /api/generate."""
        import requests  # type: ignore

        def _ask(prompt: str) -> str:
            r = requests.post(
                f"{host}/api/generate",
                json={
                    "model": model,
                    "prompt": prompt,
                    "stream": False,
                    "options": {"temperature": temperature},
                },
                timeout=DEFAULT_TIMEOUT_SECONDS,
            )
            r.raise_for_status()
            data = r.json()
            return data.get("response", "")

        return _ask

    @staticmethod
    def gemini_api_ask(*, model: str, temperature: float = 0.0, max_output_tokens: int = 12) -> Callable[[str], str]:
        """Create an ask_fn using Google's Gemini API via google-genai.

        Requires an API key in either GOOGLE_API_KEY or GEMINI_API_KEY.
        """
        try:
            import google.genai as genai
            from google.genai.types import GenerateContentConfig, ThinkingConfig
        except ImportError as e:
            raise RuntimeError("Install 'google-genai' to use --llm-provider gemini/google") from e

        if not (os.environ.get("GOOGLE_API_KEY") or os.environ.get("GEMINI_API_KEY")):
            raise RuntimeError("Set GOOGLE_API_KEY or GEMINI_API_KEY for --llm-provider gemini/google")

        client = genai.Client()

        def _ask(prompt: str) -> str:
            cfg = GenerateContentConfig(
                temperature=temperature,
                max_output_tokens=int(max_output_tokens),
                thinking_config=ThinkingConfig(thinking_budget=0),
            )
            resp = client.models.generate_content(model=model, contents=prompt, config=cfg)
            return getattr(resp, "text", "") or ""

        return _ask

    @staticmethod
    def openrouter_ask(*, model: str, temperature: float = 0.0, base_url: str = "https://openrouter.ai/api/v1") -> Callable[[str], str]:
        """Create an ask_fn that queries OpenRouter's chat completions API.

        Requires the env var OPENROUTER_API_KEY. Honors temperature and limits output tokens.
        """
        import requests  # type: ignore

        api_key = os.environ.get("OPENROUTER_API_KEY")
        if not api_key:
            raise RuntimeError("Set OPENROUTER_API_KEY for --llm-provider openrouter")

        url = f"{base_url}/chat/completions"
        headers: Dict[str, str] = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }
        # Optional headers recommended by OpenRouter
        if os.environ.get("OPENROUTER_HTTP_REFERER"):
            headers["HTTP-Referer"] = os.environ["OPENROUTER_HTTP_REFERER"]
        if os.environ.get("OPENROUTER_X_TITLE"):
            headers["X-Title"] = os.environ["OPENROUTER_X_TITLE"]

        def _ask(prompt: str) -> str:
            payload = {
                "model": model,
                "messages": [
                    {"role": "system", "content": "You are a concise assistant."},
                    {"role": "user", "content": prompt},
                ],
                "temperature": temperature,
                "max_tokens": 4,
            }
            r = requests.post(url, headers=headers, json=payload, timeout=DEFAULT_TIMEOUT_SECONDS)
            r.raise_for_status()
            choices = r.json().get("choices") or []
            if choices:
                return choices[0].get("message", {}).get("content", "") or ""
            return ""

        return _ask
