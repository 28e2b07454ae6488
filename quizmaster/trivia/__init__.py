"""Trivia Source - Open Trivia DB integration."""

from .client import CATEGORY_MAP, CATEGORY_NAMES, OpenTriviaClient

__all__ = ["OpenTriviaClient", "CATEGORY_MAP", "CATEGORY_NAMES"]
