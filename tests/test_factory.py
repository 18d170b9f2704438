import os
import unittest
from unittest import mock
from quoridor_rules.players.factory import AgentFactory
from quoridor_rules.players.agents.human_agent import HumanAgent
from quoridor_rules.players.agents.random_agent import RandomAgent
from quoridor_rules.players.agents.runner_agent import RunnerAgent
from quoridor_rules.players.agents.llm_agent import LLMAgent


class TestFactory(unittest.TestCase):
    def test_create_human(self):
        agent = AgentFactory.create("human")
        self.assertIsInstance(agent, HumanAgent)
        self.assertEqual(agent.name, "Human")

    def test_create_human_with_name(self):
        agent = AgentFactory.create("human:Alice")
        self.assertIsInstance(agent, HumanAgent)
        self.assertEqual(agent.name, "Alice")

    def test_create_random(self):
        self.assertIsInstance(AgentFactory.create("random"), RandomAgent)
        self.assertIsInstance(AgentFactory.create("random:42"), RandomAgent)

    def test_create_runner(self):
        self.assertIsInstance(AgentFactory.create("Runner"), RunnerAgent)

    def test_create_llm(self):
        with mock.patch.dict(os.environ):
            os.environ.pop("OPENAI_MODEL", None)
            os.environ.pop("LLM_MAX_ATTEMPTS", None)
            agent = AgentFactory.create("llm")
        self.assertIsInstance(agent, LLMAgent)
        self.assertEqual(agent.model, "gpt-4o-mini")  # default
        self.assertEqual(agent.max_attempts, 3)

    def test_create_llm_with_args(self):
        agent = AgentFactory.create("llm:gpt-4,5")
        self.assertIsInstance(agent, LLMAgent)
        self.assertEqual(agent.model, "gpt-4")
        self.assertEqual(agent.max_attempts, 5)

    def test_unknown_type(self):
        with self.assertRaises(ValueError):
            AgentFactory.create("minimax")

    def test_bad_args(self):
        with self.assertRaises(ValueError):
            AgentFactory.create("random:notaseed")


if __name__ == '__main__':
    unittest.main()
