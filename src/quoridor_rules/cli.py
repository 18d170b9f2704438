from __future__ import annotations
import argparse
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from dotenv import load_dotenv

from .config import Settings
from .engine.notation import NotationError, format_move, parse_move, split_moves
from .players.agents.base import Agent, GameView
from .players.factory import AgentFactory
from .players.session import GameSession

logger = logging.getLogger(__name__)

HELP = (
    "Commands: <move> (e8, e3h, d4v) | undo | redo | save <file> | load <file> "
    "| new [moves...] | help | quit"
)


@dataclass(frozen=True)
class Command:
    kind: str  # move, undo, redo, save, load, new, help, quit, invalid
    arg: str = ""


def parse_command(line: str) -> Command:
    words = line.strip().lower().split()
    if not words:
        return Command("invalid")
    head, rest = words[0], words[1:]
    if head in ("undo", "redo", "help", "quit", "exit") and not rest:
        return Command("quit" if head == "exit" else head)
    if head in ("save", "load"):
        return Command(head, rest[0]) if len(rest) == 1 else Command("invalid")
    if head == "new":
        return Command("new", " ".join(rest))
    if len(words) == 1:
        return Command("move", head)
    return Command("invalid")


class ConsoleGame:
    """Text loop: asks humans for commands and lets bots move on their own."""

    def __init__(
        self,
        session: GameSession,
        agents: List[Agent],
        input_fn: Optional[Callable[[str], str]] = None,
        output: Optional[Callable[[str], None]] = None,
    ):
        if len(agents) != 2:
            raise ValueError("Exactly two agents are required")
        self.session = session
        self.agents = agents
        self.input_fn = input_fn or input
        self.output = output or print
        self.session.names = [a.name for a in agents]

    def status(self) -> str:
        parts = []
        for i, p in enumerate(self.session.board.players):
            marker = "*" if i == self.session.current_player else " "
            parts.append(f"{marker}{self.session.names[i]} at {p.pawn} ({p.walls_remaining} walls)")
        return f"Turn {self.session.turn + 1} | " + " | ".join(parts)

    def _replace_session(self, session: GameSession) -> None:
        session.names = self.session.names
        self.session = session

    def _undo(self) -> None:
        if not self.session.undo():
            self.output("You need to make a move before undoing it.")
            return
        # against a bot, also take back the move that led to this position
        if not self.agents[self.session.current_player].is_human:
            self.session.undo()

    def _handle(self, cmd: Command, agent: Agent) -> bool:
        """Run one human command; returns False when the player quits."""
        s = self.session
        if cmd.kind == "quit":
            return False
        if cmd.kind == "help" or cmd.kind == "invalid":
            self.output(HELP)
        elif cmd.kind == "undo":
            self._undo()
        elif cmd.kind == "redo":
            if not s.redo():
                self.output("Nothing to redo.")
        elif cmd.kind == "save":
            try:
                s.save(cmd.arg)
                self.output(f"Saved to {cmd.arg}")
            except OSError as e:
                self.output(f"Could not save {cmd.arg}: {e}")
        elif cmd.kind == "load":
            try:
                self._replace_session(GameSession.load(cmd.arg, s.walls_per_player))
            except (OSError, ValueError) as e:
                self.output(f"Could not load {cmd.arg}: {e}")
        elif cmd.kind == "new":
            try:
                self._replace_session(
                    GameSession.from_moves(split_moves(cmd.arg), s.walls_per_player)
                )
            except ValueError as e:
                self.output(f"Could not start game: {e}")
        else:
            try:
                move = parse_move(cmd.arg, s.board, s.current_player)
            except NotationError as e:
                self.output(str(e))
                return True
            agent.set_pending(move)  # type: ignore[attr-defined]
            result = s.play(agent.choose_move(GameView(s.board, s.current_player)))
            if not result:
                self.output(f"Illegal move {cmd.arg}: {result.reason.value}")
        return True

    def play(self) -> Optional[str]:
        """Run until someone wins; returns the winner's name, or None on quit."""
        while not self.session.is_over():
            s = self.session
            agent = self.agents[s.current_player]
            self.output(self.status())
            if agent.is_human:
                try:
                    line = self.input_fn(f"Make a move {agent.name}: ")
                except EOFError:
                    return None
                if not self._handle(parse_command(line), agent):
                    return None
                continue
            move = agent.choose_move(GameView(s.board, s.current_player))
            result = s.play(move)
            if not result:
                raise RuntimeError(
                    f"{agent.name} chose illegal move {format_move(move)}: {result.reason.value}"
                )
            self.output(f"{agent.name} plays {format_move(move)}")
        name = self.session.names[self.session.winner]
        logger.info("game_over winner=%s turns=%d", name, self.session.turn)
        self.output(f"GG. Winner is {name} after {self.session.turn} moves.")
        return name


def main(argv: Optional[List[str]] = None) -> None:
    load_dotenv()  # .env in the working directory; real environment wins
    settings = Settings.from_env()
    parser = argparse.ArgumentParser(description="Quoridor console game")
    parser.add_argument(
        "players",
        nargs="*",
        help=f"Player specs (e.g. human random runner llm:gpt-4o). Types: {AgentFactory.available()}",
    )
    parser.add_argument("--walls", type=int, default=settings.walls_per_player, help="Walls per player")
    parser.add_argument("--load", metavar="FILE", help="Resume from a saved move list")
    parser.add_argument("--log-level", default=settings.log_level)
    args = parser.parse_args(argv)
    if args.walls < 0:
        parser.error(f"--walls must be >= 0, got {args.walls}")
    level = args.log_level.upper()
    if not isinstance(logging.getLevelName(level), int):
        parser.error(f"--log-level is not a logging level: {args.log_level!r}")

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    specs = args.players if args.players else ["human", "human"]
    if len(specs) != 2:
        parser.error("exactly two player specs are required")
    try:
        agents = [AgentFactory.create(spec) for spec in specs]
    except ValueError as e:
        parser.error(str(e))

    if args.load:
        try:
            session = GameSession.load(args.load, args.walls)
        except (OSError, ValueError) as e:
            parser.error(f"cannot load {args.load}: {e}")
    else:
        session = GameSession(walls_per_player=args.walls)
    logger.info("game_started players=%s walls=%d", ",".join(specs), args.walls)
    ConsoleGame(session, agents).play()


if __name__ == "__main__":
    main()
