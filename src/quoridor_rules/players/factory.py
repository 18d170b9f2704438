from __future__ import annotations
from typing import Callable, Dict, List
from ..config import Settings
from .agents.base import Agent
from .agents.human_agent import HumanAgent
from .agents.random_agent import RandomAgent
from .agents.runner_agent import RunnerAgent
from .agents.llm_agent import LLMAgent


def _build_human(args: List[str]) -> Agent:
    return HumanAgent(name=args[0] if args else "Human")


def _build_random(args: List[str]) -> Agent:
    return RandomAgent(seed=int(args[0]) if args else None)


def _build_runner(args: List[str]) -> Agent:
    return RunnerAgent()


def _build_llm(args: List[str]) -> Agent:
    settings = Settings.from_env()
    model = args[0] if len(args) > 0 and args[0] else settings.llm_model
    max_attempts = int(args[1]) if len(args) > 1 else settings.llm_max_attempts
    return LLMAgent(model=model, max_attempts=max_attempts)


class AgentFactory:
    _registry: Dict[str, Callable[[List[str]], Agent]] = {}

    @classmethod
    def register(cls, name: str, builder: Callable[[List[str]], Agent]) -> None:
        cls._registry[name] = builder

    @classmethod
    def available(cls) -> List[str]:
        return sorted(cls._registry)

    @classmethod
    def create(cls, config_str: str) -> Agent:
        """
        Create an agent from a configuration string.
        Format: "type:arg1,arg2" or just "type"
        Examples:
            - "human" / "human:Alice"
            - "random" / "random:42" (seed)
            - "runner"
            - "llm:gpt-4o" / "llm:gpt-4o-mini,5" (model, max_attempts)
        """
        parts = config_str.split(":", 1)
        agent_type = parts[0].strip().lower()
        args_str = parts[1] if len(parts) > 1 else ""

        if agent_type not in cls._registry:
            raise ValueError(f"Unknown agent type: {agent_type}. Available: {cls.available()}")

        args = [a.strip() for a in args_str.split(",")] if args_str else []
        try:
            return cls._registry[agent_type](args)
        except ValueError as e:
            raise ValueError(f"Failed to create agent '{agent_type}' with args {args}: {e}") from e


# Register default agents
AgentFactory.register("human", _build_human)
AgentFactory.register("random", _build_random)
AgentFactory.register("runner", _build_runner)
AgentFactory.register("llm", _build_llm)
