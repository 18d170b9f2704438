from __future__ import annotations
import json
import logging
import os
import re
from typing import Any, List, Optional, Tuple
from .base import GameView
from .runner_agent import progress_move
from ...engine.state import Move, PlaceWall
from ...engine.notation import format_move
from ...engine import oracle
from ..session import describe_board, serialize_moves

logger = logging.getLogger(__name__)

_openai_client: Optional[Any] = None  # lazy init
_openai_init_error: Optional[str] = None


def _ensure_client() -> None:
    global _openai_client, _openai_init_error
    if _openai_client is not None or _openai_init_error is not None:
        return
    from openai import OpenAI

    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        _openai_init_error = "missing_api_key"
        return
    _openai_client = OpenAI(api_key=api_key)


SYSTEM_PROMPT = (
    "You are an expert Quoridor player. Columns are a-i, rows are 1-9. "
    "A pawn move is written as its destination (e.g. e8); a wall is its anchor "
    "plus h or v (e.g. e3h). You must choose a single legal move that maximizes "
    'strategic advantage. Respond ONLY with a compact JSON object: {\n  "rationale": "...",\n  "move_id": "Mx"\n}.'
)

_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


class LLMAgent:
    name = "LLM Bot"
    is_human = False

    def __init__(
        self, model: str | None = None, max_attempts: int = 3, client: Any = None
    ):
        self.model = model or os.getenv("OPENAI_MODEL", "gpt-4o-mini")
        self.max_attempts = max_attempts
        self.client = client
        self.last_raw_response: str | None = None
        self.last_rationale: str | None = None

    def _get_client(self) -> Any:
        if self.client is not None:
            return self.client
        _ensure_client()
        if _openai_client is None:
            logger.warning("LLM_DIAG no_client reason=%s", _openai_init_error or "unknown")
        return _openai_client

    def _format_legal_moves(self, moves: List[Move]) -> List[dict]:
        return serialize_moves(moves)

    def _get_goals_description(self, view: GameView) -> str:
        lines = []
        for i, p in enumerate(view.board.players):
            lines.append(f"P{i + 1}: Reach Row {p.goal_row}")
        return "\n".join(lines)

    def _game_payload(self, view: GameView) -> dict:
        board = view.board
        me = view.current_player()
        payload = describe_board(board)
        payload["schema"] = "quoridor.v1.partial"
        payload["current_player"] = me
        # shortest route lengths help the model judge races
        payload["path_lengths"] = [
            oracle.path_length(i, board) for i in range(len(board.players))
        ]
        return payload

    def _call_llm(self, moves_payload: List[dict], view: GameView) -> str | None:
        client = self._get_client()
        if client is None:
            return None  # signal fallback
        user_prompt = (
            "Goals:\n"
            + self._get_goals_description(view)
            + f"\nYou are P{view.current_player() + 1}."
            + "\nGame state JSON:"
            + json.dumps(self._game_payload(view), separators=(",", ":"))
            + "\nLegal moves (array):"
            + json.dumps(moves_payload, separators=(",", ":"))
            + '\nSelect one by its id. Respond only with {"rationale":"...","move_id":"Mx"}.'
        )
        try:
            resp = client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=0.2,
            )
            content = (resp.choices[0].message.content or "").strip()
        except Exception as e:  # pragma: no cover - network/client failures
            self.last_raw_response = f"ERROR: {e}"
            logger.warning("LLM_DIAG api_error=%s", e)
            return None
        self.last_raw_response = content
        return content

    def _parse_response(self, text: str) -> Tuple[str | None, str | None]:
        """Extract (move_id, rationale) from a reply, tolerating a Markdown fence."""
        body = text.strip()
        fenced = _FENCE.match(body)
        if fenced:
            body = fenced.group(1)
        try:
            obj = json.loads(body)
        except json.JSONDecodeError:
            return None, None
        if not isinstance(obj, dict) or not isinstance(obj.get("move_id"), str):
            return None, None
        rationale = obj.get("rationale")
        return obj["move_id"].strip(), rationale if isinstance(rationale, str) else None

    def choose_move(self, view: GameView) -> Move:
        moves = list(view.legal_moves())
        if not moves:
            raise RuntimeError("No legal moves available for LLM agent")
        moves_payload = self._format_legal_moves(moves)
        for attempt in range(1, self.max_attempts + 1):
            raw = self._call_llm(moves_payload, view)
            if raw is None:
                break  # fallback
            move_id, rationale = self._parse_response(raw)
            if move_id is None:
                logger.info("LLM_DIAG unparsable_response attempt=%d raw=%s", attempt, raw)
                continue
            try:
                idx = int(move_id[1:]) if move_id.startswith("M") else -1
            except ValueError:
                idx = -1
            if 0 <= idx < len(moves):
                self.last_rationale = rationale
                logger.info("LLM_CHOSEN move_id=%s move=%s", move_id, format_move(moves[idx]))
                return moves[idx]
            logger.info("LLM_DIAG unknown_move_id attempt=%d move_id=%s", attempt, move_id)
        # Fallback: keep the game progressing along the shortest route
        fallback = progress_move(view)
        if fallback is None:
            pawn_moves = [m for m in moves if not isinstance(m, PlaceWall)]
            fallback = pawn_moves[0] if pawn_moves else moves[0]
        logger.info("LLM_FALLBACK move=%s reason=no_valid_llm", format_move(fallback))
        return fallback
