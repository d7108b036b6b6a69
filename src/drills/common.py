"""
Shared answer normalisation for drill handlers.
"""
from __future__ import annotations

from typing import Any, Sequence

from src.ranges.models import Action, parse_action

YES_INPUTS = {"y", "yes", "true", "in"}
NO_INPUTS = {"n", "no", "false", "out"}


def clean(answer: Any) -> str:
    """Lower-cased, stripped text form of an answer."""
    if answer is None:
        return ""
    return str(answer).strip().lower()


def parse_yes_no(answer: Any) -> bool | None:
    """True for yes-ish, False for no-ish, None otherwise."""
    if isinstance(answer, bool):
        return answer
    text = clean(answer)
    if text in YES_INPUTS:
        return True
    if text in NO_INPUTS:
        return False
    return None


def resolve_option(answer: Any, options: Sequence[str]) -> str | None:
    """
    Map an answer to one of `options`.

    Accepts the option text (case-insensitive) or its 1-based number.
    """
    text = clean(answer)
    for option in options:
        if text == option.lower():
            return option
    if text.isdigit():
        index = int(text) - 1
        if 0 <= index < len(options):
            return options[index]
    return None


def resolve_action(answer: Any, options: Sequence[str]) -> Action | None:
    """Action named by `answer`, or by its 1-based option number."""
    action = parse_action(answer)
    if action is None:
        chosen = resolve_option(answer, options)
        action = parse_action(chosen) if chosen else None
    return action
