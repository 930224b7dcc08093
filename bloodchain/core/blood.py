"""
Blood type definitions and donation reward rules
"""

from enum import Enum


class BloodType(str, Enum):
    """ABO/Rh blood groups accepted by the platform"""
    A_POS = "A+"
    A_NEG = "A-"
    B_POS = "B+"
    B_NEG = "B-"
    AB_POS = "AB+"
    AB_NEG = "AB-"
    O_POS = "O+"
    O_NEG = "O-"


BLOOD_TYPES: tuple[str, ...] = tuple(blood_type.value for blood_type in BloodType)

# Reward points granted per donated unit
REWARD_POINTS_PER_UNIT = 10


def is_valid_blood_type(value: str) -> bool:
    """Check that value is one of the eight enumerated blood types"""
    return value in BLOOD_TYPES


def reward_points_for(quantity: int) -> int:
    """Points awarded to a donor for a donation of `quantity` units"""
    return quantity * REWARD_POINTS_PER_UNIT
