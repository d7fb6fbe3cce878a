"""Decide whether a string literal is a localization candidate."""

from typing import Optional

from .rules import FILTER_RULES, Candidate, first_match

DEFAULT_MIN_LENGTH = 2
DEFAULT_MAX_LENGTH = 200


def rejection_reason(
    value: str,
    surrounding_text: str = '',
    already_localized: bool = False,
    min_length: int = DEFAULT_MIN_LENGTH,
    max_length: int = DEFAULT_MAX_LENGTH
) -> Optional[str]:
    """
    Return why a literal is not translatable, or None if it is.

    Rules are checked in a fixed order and the first match wins:
    emptiness, length, existing localization, debug context, technical
    identifiers, URLs and paths, date formats, colors, measurements,
    configuration values and finally values without any letter.

    Args:
        value: Decoded literal value
        surrounding_text: Flattened code around the literal
        already_localized: Whether an enclosing expression already uses the accessor
        min_length: Shortest accepted value (after trimming)
        max_length: Longest accepted value (after trimming)

    Returns:
        Human readable rejection reason, or None when the literal is a candidate
    """
    candidate = Candidate(
        value=value,
        text=value.strip(),
        surrounding=surrounding_text or '',
        already_localized=already_localized,
        min_length=min_length,
        max_length=max_length,
    )
    rule = first_match(FILTER_RULES, candidate)
    return rule.outcome if rule else None


def should_extract(
    value: str,
    surrounding_text: str = '',
    already_localized: bool = False,
    min_length: int = DEFAULT_MIN_LENGTH,
    max_length: int = DEFAULT_MAX_LENGTH
) -> bool:
    """True if the literal should be offered for localization."""
    return rejection_reason(
        value,
        surrounding_text,
        already_localized,
        min_length=min_length,
        max_length=max_length,
    ) is None
