# utils/ranks.py
from enum import Enum


class Belt(str, Enum):
    WHITE = "white"
    BLUE = "blue"
    PURPLE = "purple"
    BROWN = "brown"
    BLACK = "black"

    @property
    def label(self):
        return BELT_LABELS[self]


# Promotion order, lowest first
BELT_PROGRESSION = [Belt.WHITE, Belt.BLUE, Belt.PURPLE, Belt.BROWN, Belt.BLACK]
TERMINAL_BELT = BELT_PROGRESSION[-1]

MAX_STRIPES = 4

BELT_LABELS = {
    Belt.WHITE: "White Belt",
    Belt.BLUE: "Blue Belt",
    Belt.PURPLE: "Purple Belt",
    Belt.BROWN: "Brown Belt",
    Belt.BLACK: "Black Belt",
}

CLASS_TYPES = ["gi", "nogi", "open_mat"]
CLASS_TYPE_LABELS = {
    "gi": "Gi",
    "nogi": "No-Gi",
    "open_mat": "Open Mat",
}

NOTE_CATEGORIES = ["general", "technique", "injury", "goals"]
NOTE_CATEGORY_LABELS = {
    "general": "General",
    "technique": "Technique Focus",
    "injury": "Injury/Limitation",
    "goals": "Goals",
}


def as_belt(value) -> Belt:
    """Coerce a stored string (or a Belt) into a Belt; raises ValueError if unknown."""
    if isinstance(value, Belt):
        return value
    return Belt(str(value).strip().lower())


def belt_index(belt) -> int:
    return BELT_PROGRESSION.index(as_belt(belt))


def next_belt(belt):
    """Return the belt after `belt`, or None at black belt."""
    index = belt_index(belt)
    if index == len(BELT_PROGRESSION) - 1:
        return None
    return BELT_PROGRESSION[index + 1]


def is_terminal(belt) -> bool:
    return as_belt(belt) == TERMINAL_BELT


def get_belt_choices():
    return [(belt.value, belt.label) for belt in BELT_PROGRESSION]


def get_stripe_choices():
    return [(n, f"{n} stripe{'s' if n != 1 else ''}") for n in range(MAX_STRIPES + 1)]


def get_class_type_choices():
    return [(value, CLASS_TYPE_LABELS[value]) for value in CLASS_TYPES]


def get_note_category_choices():
    return [(value, NOTE_CATEGORY_LABELS[value]) for value in NOTE_CATEGORIES]
