import os
import tempfile
import unittest
from quoridor_rules.engine.state import Cell, PlaceWall, Step
from quoridor_rules.engine.rules import Reason
from quoridor_rules.engine.notation import NotationError
from quoridor_rules.players.session import GameSession, IllegalMoveError
from helpers import hwall, vwall

# A walks down column e, B walks up column d; A arrives on move 15.
RACE = "e8 d1 e7 d2 e6 d3 e5 d4 e4 d5 e3 d6 e2 d7 e1".split()


class TestGameSession(unittest.TestCase):
    def test_turn_order(self):
        s = GameSession()
        self.assertEqual(s.current_player, 0)
        self.assertTrue(s.play(Step(Cell(4, 8))))
        self.assertEqual(s.current_player, 1)
        self.assertEqual(s.turn, 1)
        self.assertTrue(s.play_token("a2h"))
        self.assertEqual(s.current_player, 0)
        self.assertEqual(s.board.players[1].walls_remaining, 9)

    def test_illegal_move_keeps_turn(self):
        s = GameSession()
        result = s.play(Step(Cell(4, 7)))
        self.assertEqual(result.reason, Reason.NOT_ADJACENT)
        self.assertEqual(s.current_player, 0)
        self.assertEqual(s.turn, 0)

    def test_bad_token(self):
        with self.assertRaises(NotationError):
            GameSession().play_token("z9")

    def test_undo_pawn_and_wall(self):
        s = GameSession.from_moves(["e8", "a2h"])
        self.assertTrue(s.undo())
        self.assertEqual(s.current_player, 1)
        self.assertEqual(s.board.walls, set())
        self.assertEqual(s.board.players[1].walls_remaining, 10)
        self.assertTrue(s.undo())
        self.assertEqual(s.current_player, 0)
        self.assertEqual(s.board.pawn(0), Cell(4, 9))
        self.assertEqual(s.board.players[0].history, [Cell(4, 9)])
        self.assertFalse(s.undo())

    def test_redo(self):
        s = GameSession.from_moves(["e8", "a2h"])
        s.undo()
        s.undo()
        self.assertTrue(s.redo())
        self.assertTrue(s.redo())
        self.assertFalse(s.redo())
        self.assertEqual(s.move_list(), "e8 a2h")
        self.assertIn(hwall(0, 2), s.board.walls)

    def test_new_move_clears_redo(self):
        s = GameSession.from_moves(["e8"])
        s.undo()
        s.play_token("d9")
        self.assertFalse(s.redo())
        self.assertEqual(s.move_list(), "d9")

    def test_winner(self):
        s = GameSession.from_moves(RACE, walls_per_player=10)
        self.assertTrue(s.is_over())
        self.assertEqual(s.winner, 0)
        self.assertEqual(s.current_player, 0)
        with self.assertRaises(RuntimeError):
            s.play(Step(Cell(4, 2)))
        s.undo()
        self.assertFalse(s.is_over())
        self.assertEqual(s.current_player, 0)

    def test_illegal_move_list(self):
        with self.assertRaises(IllegalMoveError) as ctx:
            GameSession.from_moves(["e8", "e2", "e6"])
        self.assertEqual(ctx.exception.index, 2)
        self.assertEqual(ctx.exception.reason, Reason.NOT_ADJACENT)
        self.assertIn("e6", str(ctx.exception))

    def test_off_board_wall_is_rejected(self):
        s = GameSession()
        for wall in (hwall(9, 5), hwall(-1, 5), vwall(0, 5)):
            with self.subTest(wall=wall):
                self.assertEqual(s.play(PlaceWall(wall)).reason, Reason.OUT_OF_BOUNDS)
        self.assertEqual(s.turn, 0)
        self.assertEqual(s.board.players[0].walls_remaining, 10)

    def test_illegal_off_board_move_message(self):
        err = IllegalMoveError(PlaceWall(hwall(9, 5)), Reason.OUT_OF_BOUNDS, 0)
        self.assertEqual(str(err), "Illegal move (9,5)h at position 1: OutOfBounds")

    def test_moves_after_game_end(self):
        with self.assertRaises(ValueError) as ctx:
            GameSession.from_moves(RACE + ["d8"])
        self.assertIn("position 16", str(ctx.exception))

    def test_wall_budget(self):
        s = GameSession(walls_per_player=0)
        self.assertEqual(s.play_token("a2h").reason, Reason.NO_WALLS_REMAINING)

    def test_save_and_load(self):
        s = GameSession.from_moves(["e8", "e2", "c5v", "a2h"])
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "game.txt")
            self.assertEqual(s.save(path), "e8 e2 c5v a2h")
            loaded = GameSession.load(path)
        self.assertEqual(loaded.board.walls, s.board.walls)
        self.assertEqual(loaded.board.pawn(0), s.board.pawn(0))
        self.assertEqual(loaded.current_player, s.current_player)
        self.assertEqual(loaded.move_list(), s.move_list())

    def test_load_missing_file(self):
        with self.assertRaises(OSError):
            GameSession.load("/nonexistent/quoridor/game.txt")

    def test_snapshot(self):
        s = GameSession(names=["Alice", "Bob"])
        snap = s.snapshot()
        self.assertEqual(snap["current_player"], {"id": 0, "name": "Alice"})
        self.assertEqual(len(snap["legal_moves"]), 131)
        self.assertEqual(snap["legal_moves"][0]["id"], "M0")
        self.assertIsNone(snap["winner"])

        done = GameSession.from_moves(RACE)
        snap = done.snapshot()
        self.assertEqual(snap["winner"]["id"], 0)
        self.assertEqual(snap["legal_moves"], [])
        self.assertEqual(snap["players"][0]["pawn"], "e1")


if __name__ == '__main__':
    unittest.main()
