"""Dietary restriction selections and their stored form.

The form works with display labels plus a reserved marker for an explicit
"None" answer, so "answered: no restrictions" is distinguishable from
"unanswered" (an empty selection). Storage uses lower-case tags.
"""

import re
from collections.abc import Iterable, Sequence

DIETARY_OPTIONS = (
    "Vegetarian",
    "Vegan",
    "Pescatarian",
    "Dairy-Free",
    "Gluten-Free",
    "Nut Allergy",
    "Other",
    "None",
)
NONE_OPTION = "None"
NO_RESTRICTIONS_MARKER = "__none__"
NO_RESTRICTIONS_TAG = "none"

_SEPARATORS = re.compile(r"[\s\-]+")


def to_tag(label: str) -> str:
    """'Gluten-Free' -> 'gluten_free'."""
    return _SEPARATORS.sub("_", label.strip().lower())


_LABEL_BY_TAG = {to_tag(label): label for label in DIETARY_OPTIONS if label != NONE_OPTION}


def _is_none(option: str) -> bool:
    return option in (NONE_OPTION, NO_RESTRICTIONS_MARKER)


def toggle_option(selection: Sequence[str], option: str, checked: bool) -> list[str]:
    """Apply one checkbox change to a selection."""
    if _is_none(option):
        return [NO_RESTRICTIONS_MARKER] if checked else []

    remaining = [item for item in selection if item != NO_RESTRICTIONS_MARKER]
    if not checked:
        return [item for item in remaining if item != option]
    if option not in remaining:
        remaining.append(option)
    return remaining


def is_option_selected(selection: Sequence[str], option: str) -> bool:
    if _is_none(option):
        return NO_RESTRICTIONS_MARKER in selection
    return option in selection


def encode_restrictions(selection: Iterable[str]) -> list[str]:
    """Form selection -> stored tags. A lone "None" answer is kept as the reserved tag."""
    tags: list[str] = []
    saw_none = False
    for item in selection:
        if not item or not item.strip():
            continue
        if _is_none(item) or to_tag(item) == NO_RESTRICTIONS_TAG:
            saw_none = True
            continue
        tag = to_tag(item)
        if tag not in tags:
            tags.append(tag)
    if not tags and saw_none:
        return [NO_RESTRICTIONS_TAG]
    return tags


def decode_restrictions(tags: Iterable[str]) -> list[str]:
    """Stored tags -> form selection. Unknown tags are passed through."""
    tags = list(tags)
    if tags == [NO_RESTRICTIONS_TAG]:
        return [NO_RESTRICTIONS_MARKER]
    return [_LABEL_BY_TAG.get(tag, tag) for tag in tags if tag != NO_RESTRICTIONS_TAG]


def display_name(tag: str) -> str:
    """'gluten_free' -> 'Gluten Free'."""
    return " ".join(word.capitalize() for word in tag.replace("-", "_").split("_") if word)
