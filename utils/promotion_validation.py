# utils/promotion_validation.py
from utils.ranks import BELT_PROGRESSION, MAX_STRIPES, belt_index, as_belt


def _plural(count, word):
    return f"{word}{'s' if count != 1 else ''}"


def validate_transition(from_belt, from_stripes, to_belt, to_stripes):
    """
    Check a manually entered rank change against standard progression.
    Standard changes are one stripe on the same belt (Blue 2 -> Blue 3), or the
    next belt at 0 stripes from 4 stripes (Blue 4 -> Purple 0).

    Returns None for a standard change, otherwise a warning to show before the
    change is confirmed. Nothing here blocks the change.
    """
    from_belt = as_belt(from_belt)
    to_belt = as_belt(to_belt)

    # No change at all
    if from_belt == to_belt and from_stripes == to_stripes:
        return None

    from_index = belt_index(from_belt)
    to_index = belt_index(to_belt)

    if from_belt == to_belt and to_stripes == from_stripes + 1:
        return None

    if from_stripes == MAX_STRIPES and to_index == from_index + 1 and to_stripes == 0:
        return None

    warnings = []

    if to_index < from_index:
        warnings.append(f"moving backwards from {from_belt.value} to {to_belt.value} belt")

    if to_index > from_index + 1:
        skipped = ", ".join(b.value for b in BELT_PROGRESSION[from_index + 1:to_index])
        warnings.append(f"skipping {skipped} {_plural(to_index - from_index - 1, 'belt')}")

    if to_index > from_index and from_stripes < MAX_STRIPES:
        warnings.append(f"promoting to next belt without 4 stripes (currently at {from_stripes})")

    if to_index != from_index and to_stripes > 0:
        warnings.append(f"new belt starting with {to_stripes} {_plural(to_stripes, 'stripe')} instead of 0")

    if from_belt == to_belt and to_stripes > from_stripes + 1:
        skipped_stripes = to_stripes - from_stripes - 1
        warnings.append(f"skipping {skipped_stripes} {_plural(skipped_stripes, 'stripe')}")

    if from_belt == to_belt and to_stripes < from_stripes:
        warnings.append(f"reducing stripes from {from_stripes} to {to_stripes}")

    if not warnings:
        return None

    return f"This is a non-standard promotion: {', '.join(warnings)}. Are you sure?"
