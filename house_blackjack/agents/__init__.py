from .basic import BasicStrategyAgent
from .console import ConsoleAgent
from .random_agent import RandomAgent
from .guarded import GuardedAgent
from .llm_agent import LLMAgent

__all__ = ["BasicStrategyAgent", "ConsoleAgent", "RandomAgent", "GuardedAgent", "LLMAgent"]
