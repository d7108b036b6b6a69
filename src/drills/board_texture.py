"""
Postflop board texture: read a flop as dry / wet / paired / monotone.
"""
from __future__ import annotations

import random
from typing import Any

from src.engine.base import Question, SessionView, Validation
from src.ranges.board import TEXTURE_NOTES, BoardTexture, classify_board_texture, generate_board

from . import DrillKind, register
from .common import resolve_option

OPTIONS = tuple(texture.value.capitalize() for texture in BoardTexture)


@register(DrillKind.BOARD_TEXTURE)
class BoardTextureScenario:
    unit_id = DrillKind.BOARD_TEXTURE.value
    group = "scenarios"
    title = "Board Texture"
    total_questions = 20

    def generate(self, view: SessionView, rng: random.Random) -> Question:
        texture = rng.choice(list(BoardTexture))
        board = generate_board(texture, rng)
        return Question(
            category=texture.value,
            prompt=f"What type of board is this? {' '.join(card.pretty for card in board)}",
            options=OPTIONS,
            payload={"board": tuple(board), "texture": classify_board_texture(board).value},
        )

    def validate(self, answer: Any, question: Question) -> Validation:
        correct = question.payload["texture"].capitalize()
        return Validation(correct=resolve_option(answer, question.options) == correct, correct_answer=correct)

    def explain(self, question: Question, validation: Validation) -> str:
        texture = BoardTexture(question.payload["texture"])
        board = " ".join(str(card) for card in question.payload["board"])
        return f"{board} is a {texture.value.upper()} board: " + "; ".join(TEXTURE_NOTES[texture])
