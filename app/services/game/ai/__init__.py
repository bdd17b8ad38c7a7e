"""Greedy AI opponent."""

from .evaluator import PIECE_VALUES, WIN_SCORE, choose_action, score_outcome

__all__ = [
    "PIECE_VALUES",
    "WIN_SCORE",
    "choose_action",
    "score_outcome",
]
