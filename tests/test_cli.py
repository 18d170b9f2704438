import os
import tempfile
import unittest
from unittest import mock
from quoridor_rules.cli import Command, ConsoleGame, main, parse_command
from quoridor_rules.engine.state import Cell
from quoridor_rules.players.agents.human_agent import HumanAgent
from quoridor_rules.players.agents.runner_agent import RunnerAgent
from quoridor_rules.players.session import GameSession


def scripted(*lines):
    it = iter(lines)

    def read(prompt):
        try:
            return next(it)
        except StopIteration:
            raise EOFError
    return read


class TestParseCommand(unittest.TestCase):
    def test_commands(self):
        self.assertEqual(parse_command("e8"), Command("move", "e8"))
        self.assertEqual(parse_command(" UNDO "), Command("undo"))
        self.assertEqual(parse_command("redo"), Command("redo"))
        self.assertEqual(parse_command("save game.txt"), Command("save", "game.txt"))
        self.assertEqual(parse_command("load game.txt"), Command("load", "game.txt"))
        self.assertEqual(parse_command("new e8 e2"), Command("new", "e8 e2"))
        self.assertEqual(parse_command("exit"), Command("quit"))
        self.assertEqual(parse_command(""), Command("invalid"))
        self.assertEqual(parse_command("save"), Command("invalid"))
        self.assertEqual(parse_command("e8 e2"), Command("invalid"))


class TestConsoleGame(unittest.TestCase):
    def make(self, agents, *lines):
        out = []
        game = ConsoleGame(GameSession(), agents, scripted(*lines), out.append)
        return game, out

    def test_human_moves_and_undo(self):
        game, out = self.make(
            [HumanAgent("Alice"), HumanAgent("Bob")], "e8", "e2", "undo", "quit"
        )
        self.assertIsNone(game.play())
        self.assertEqual(game.session.turn, 1)
        self.assertEqual(game.session.current_player, 1)
        self.assertTrue(out[0].startswith("Turn 1 | *Alice at e9"))

    def test_illegal_and_garbage_input(self):
        game, out = self.make([HumanAgent(), HumanAgent()], "e7", "zz", "what now")
        self.assertIsNone(game.play())
        self.assertIn("Illegal move e7: NotAdjacent", out)
        self.assertTrue(any("Unrecognised move" in line for line in out))
        self.assertEqual(game.session.turn, 0)

    def test_undo_against_bot_takes_back_both(self):
        game, out = self.make([HumanAgent(), RunnerAgent()], "e8", "undo", "quit")
        game.play()
        self.assertIn("Runner Bot plays e2", out)
        self.assertEqual(game.session.turn, 0)
        self.assertEqual(game.session.board.pawn(0), Cell(4, 9))

    def test_save_load_new(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "g.txt")
            game, out = self.make(
                [HumanAgent(), HumanAgent()],
                "e8", "e2", f"save {path}", "new d9", f"load {path}", "quit",
            )
            game.play()
        self.assertEqual(game.session.move_list(), "e8 e2")
        self.assertIn(f"Saved to {path}", out)

    def test_load_errors_reported(self):
        game, out = self.make([HumanAgent(), HumanAgent()], "load /nonexistent/x.txt", "new e7")
        game.play()
        self.assertTrue(any(line.startswith("Could not load") for line in out))
        self.assertTrue(any(line.startswith("Could not start game") for line in out))

    def test_new_game_past_the_end_is_reported(self):
        race = "e8 d1 e7 d2 e6 d3 e5 d4 e4 d5 e3 d6 e2 d7 e1"
        game, out = self.make([HumanAgent(), HumanAgent()], f"new {race} d8", "quit")
        self.assertIsNone(game.play())
        self.assertTrue(any(line.startswith("Could not start game") for line in out))
        self.assertEqual(game.session.turn, 0)

    def test_bots_play_to_the_end(self):
        game, out = self.make([RunnerAgent(), RunnerAgent()])
        winner = game.play()
        self.assertIn(winner, ("Runner Bot",))
        self.assertTrue(game.session.is_over())
        self.assertTrue(out[-1].startswith("GG. Winner is"))

    def test_needs_two_agents(self):
        with self.assertRaises(ValueError):
            ConsoleGame(GameSession(), [HumanAgent()])


class TestMain(unittest.TestCase):
    def test_runner_game(self):
        with mock.patch("builtins.print") as printed:
            main(["runner", "runner", "--walls", "0", "--log-level", "WARNING"])
        lines = [c.args[0] for c in printed.call_args_list]
        self.assertTrue(lines[-1].startswith("GG. Winner is"))

    def test_rejects_bad_player_count(self):
        with mock.patch("sys.stderr"), self.assertRaises(SystemExit):
            main(["runner"])

    def test_rejects_bad_options(self):
        for argv in (["--walls", "-1"], ["--log-level", "LOUD"], ["--load", "/nonexistent/x.txt"]):
            with self.subTest(argv=argv):
                with mock.patch("sys.stderr"), self.assertRaises(SystemExit):
                    main(["runner", "runner"] + argv)

    def test_rejects_unknown_agent(self):
        with mock.patch("sys.stderr"), self.assertRaises(SystemExit):
            main(["runner", "grandmaster"])


if __name__ == '__main__':
    unittest.main()
