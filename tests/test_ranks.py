import pytest

from utils.ranks import (
    Belt, BELT_PROGRESSION, as_belt, belt_index, get_belt_choices, get_stripe_choices,
    is_terminal, next_belt,
)


def test_progression_order():
    assert [belt.value for belt in BELT_PROGRESSION] == ["white", "blue", "purple", "brown", "black"]
    assert [belt_index(b) for b in BELT_PROGRESSION] == [0, 1, 2, 3, 4]


def test_as_belt_accepts_strings_and_belts():
    assert as_belt("Purple ") is Belt.PURPLE
    assert as_belt(Belt.BROWN) is Belt.BROWN
    with pytest.raises(ValueError):
        as_belt("green")


def test_next_belt():
    assert next_belt("white") is Belt.BLUE
    assert next_belt(Belt.BROWN) is Belt.BLACK
    assert next_belt("black") is None
    assert is_terminal("black")
    assert not is_terminal("brown")


def test_choices():
    assert get_belt_choices()[0] == ("white", "White Belt")
    assert [value for value, _ in get_stripe_choices()] == [0, 1, 2, 3, 4]
    assert Belt.BLUE.label == "Blue Belt"
