"""Constants and configuration values for house_blackjack."""

from __future__ import annotations

# Table
STARTING_CHIPS = 100.0
MINIMUM_BET = 1
DEFAULT_BET = 10

# Pacing (seconds) for console narration
DEALING_PAUSE = 2.0
RESULT_PAUSE = 1.5
PROMPT_PAUSE = 2.0
BET_PROMPT_PAUSE = 1.0

# CLI Error Handling
MAX_CONSECUTIVE_ERRORS = 10

# Heartbeat and Timing
DEFAULT_HEARTBEAT_SECONDS = 60
DEFAULT_TIMEOUT_SECONDS = 120

# LLM Configuration
DEFAULT_TEMPERATURE = 0.0
DEFAULT_RETRIES = 2
DEFAULT_RETRY_BACKOFF = 1.5

# Model defaults
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
DEFAULT_OLLAMA_MODEL = "llama3.1"
DEFAULT_OPENROUTER_MODEL = "openrouter/auto"

# Prompt modes
VALID_PROMPT_MODES = {"minimal", "rules_lite", "verbose"}
DEFAULT_PROMPT_MODE = "rules_lite"

# File extensions
JSONL_EXTENSION = ".jsonl"

# Agents
AVAILABLE_AGENTS = {"basic", "random", "llm"}

# Default run parameters
DEFAULT_ROUNDS = 1000
DEFAULT_SEED = 42
