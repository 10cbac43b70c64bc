from __future__ import annotations
from enum import Enum

class AnimalStatus(str, Enum):
    HEALTHY = "healthy"
    SICK = "sick"
    DEAD = "dead"


class AnimalStage(str, Enum):
    NEWBORN = "newborn"
    JUVENILE = "juvenile"
    ADULT = "adult"
    BREEDER = "breeder"
