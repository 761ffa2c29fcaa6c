# utils/thresholds.py
"""
Promotion thresholds: how many classes a student needs at each belt.

Stored as one JSON record in the ``settings`` table under
``promotionThresholds``. A missing or unreadable record means the built-in
defaults are used; a readable record that lacks a belt falls back to the
default for that belt only.
"""
import json
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from flask import current_app

from models import Setting
from utils.extensions import db
from utils.ranks import Belt, BELT_PROGRESSION, TERMINAL_BELT, as_belt

SETTINGS_KEY = "promotionThresholds"

# Classes between stripes at each belt
DEFAULT_STRIPE_THRESHOLDS = MappingProxyType({
    Belt.WHITE: 25,
    Belt.BLUE: 40,
    Belt.PURPLE: 50,
    Belt.BROWN: 60,
    Belt.BLACK: 100,
})

# Classes at 4 stripes before the next belt; black belt has no next belt
DEFAULT_BELT_THRESHOLDS = MappingProxyType({
    Belt.WHITE: 200,
    Belt.BLUE: 300,
    Belt.PURPLE: 225,
    Belt.BROWN: 150,
})


def _as_int(value):
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _belt_map(raw, belts):
    result = {}
    for belt in belts:
        value = _as_int(raw.get(belt.value))
        if value is not None:
            result[belt] = value
    return result


@dataclass(frozen=True)
class ThresholdConfig:
    stripe_thresholds: Mapping = field(default_factory=lambda: dict(DEFAULT_STRIPE_THRESHOLDS))
    belt_thresholds: Mapping = field(default_factory=lambda: dict(DEFAULT_BELT_THRESHOLDS))

    def __post_init__(self):
        # Read-only copies; DEFAULT_THRESHOLDS is shared
        object.__setattr__(self, "stripe_thresholds", MappingProxyType(dict(self.stripe_thresholds)))
        object.__setattr__(self, "belt_thresholds", MappingProxyType(dict(self.belt_thresholds)))

    def stripe_threshold(self, belt) -> int:
        belt = as_belt(belt)
        value = self.stripe_thresholds.get(belt)
        return DEFAULT_STRIPE_THRESHOLDS[belt] if value is None else value

    def belt_threshold(self, belt):
        """Classes needed at 4 stripes before the next belt, or None at black belt."""
        belt = as_belt(belt)
        if belt == TERMINAL_BELT:
            return None
        value = self.belt_thresholds.get(belt)
        return DEFAULT_BELT_THRESHOLDS[belt] if value is None else value

    def to_dict(self):
        return {
            "stripeThresholds": {
                belt.value: self.stripe_threshold(belt) for belt in BELT_PROGRESSION
            },
            "beltThresholds": {
                belt.value: self.belt_threshold(belt) for belt in BELT_PROGRESSION if belt != TERMINAL_BELT
            },
        }

    @classmethod
    def from_dict(cls, data):
        """Build a config from the serialized shape; raises ValueError if the shape is wrong."""
        if not isinstance(data, dict):
            raise ValueError("threshold record must be an object")
        stripes = data.get("stripeThresholds")
        belts = data.get("beltThresholds")
        if not isinstance(stripes, dict) or not isinstance(belts, dict):
            raise ValueError("threshold record must contain stripeThresholds and beltThresholds")
        non_terminal = [belt for belt in BELT_PROGRESSION if belt != TERMINAL_BELT]
        return cls(
            stripe_thresholds=_belt_map(stripes, BELT_PROGRESSION),
            belt_thresholds=_belt_map(belts, non_terminal),
        )


DEFAULT_THRESHOLDS = ThresholdConfig()


def load_thresholds() -> ThresholdConfig:
    setting = db.session.get(Setting, SETTINGS_KEY)
    if setting is None:
        return DEFAULT_THRESHOLDS

    try:
        return ThresholdConfig.from_dict(json.loads(setting.value))
    except ValueError as exc:
        # json.JSONDecodeError is a ValueError too
        current_app.logger.warning("Ignoring unreadable %s setting: %s", SETTINGS_KEY, exc)
        return DEFAULT_THRESHOLDS


def save_thresholds(config: ThresholdConfig):
    value = json.dumps(config.to_dict())

    # Upsert: update the row if it exists, insert otherwise
    setting = db.session.get(Setting, SETTINGS_KEY)
    if setting:
        setting.value = value
    else:
        db.session.add(Setting(key=SETTINGS_KEY, value=value))
    db.session.commit()
    current_app.logger.info("Promotion thresholds saved")
