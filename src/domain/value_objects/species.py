from __future__ import annotations

from enum import Enum


class Species(str, Enum):
    SHEEP = "sheep"
    GOAT = "goat"
    COW = "cow"
    PIG = "pig"
    CHICKEN = "chicken"
    DOG = "dog"
    CAT = "cat"
    HORSE = "horse"
    OTHER = "other"
