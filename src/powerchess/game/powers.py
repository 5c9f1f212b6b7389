"""Power catalogue for Power Chess.

Six purchasable powers exist. The store always shows a subset of them
(the offer); buying one rotates in a power that is not currently offered.
"""

from dataclasses import dataclass
from enum import Enum


class PowerKind(Enum):
    """Purchasable powers."""

    OBSTACLE = "obstacle"  # Opens a temporary hole on an empty square
    DUPLICATE = "duplicate"  # Copies an own piece (not king or queen) next to it
    PULL = "pull"  # Drags the nearest enemy in a column next to an own piece
    FREEZE = "freeze"  # Locks a column for the opponent
    SHIELD = "shield"  # Own piece survives one capture attempt
    BLESSING = "blessing"  # Doubles point gains for a few half-moves


@dataclass(frozen=True)
class PowerDefinition:
    """Static description of a power.

    Attributes:
        kind: Power identifier
        name: Display name
        cost: Price in points
        targeted: Needs a board square after purchase; otherwise resolves
            immediately and consumes the turn
        description: Short rules text for collaborators to display
    """

    kind: PowerKind
    name: str
    cost: int
    targeted: bool
    description: str


POWERS: list[PowerDefinition] = [
    PowerDefinition(
        kind=PowerKind.OBSTACLE,
        name="Obstacle",
        cost=15,
        targeted=True,
        description="Opens an impassable hole on an empty square",
    ),
    PowerDefinition(
        kind=PowerKind.DUPLICATE,
        name="Duplicate",
        cost=14,
        targeted=True,
        description="Copies one of your pieces (except king and queen)",
    ),
    PowerDefinition(
        kind=PowerKind.PULL,
        name="Pull",
        cost=17,
        targeted=True,
        description="Pulls the nearest enemy in a column next to your piece (never the king)",
    ),
    PowerDefinition(
        kind=PowerKind.FREEZE,
        name="Freeze",
        cost=18,
        targeted=True,
        description="Freezes a column for the opponent for 4 rounds",
    ),
    PowerDefinition(
        kind=PowerKind.SHIELD,
        name="Shield",
        cost=19,
        targeted=True,
        description="Protects one of your pieces from a single capture",
    ),
    PowerDefinition(
        kind=PowerKind.BLESSING,
        name="Blessing",
        cost=17,
        targeted=False,
        description="Doubles points from captures and bonus tokens for 6 half-moves",
    ),
]

POWERS_BY_KIND: dict[PowerKind, PowerDefinition] = {p.kind: p for p in POWERS}


def get_power(kind: PowerKind) -> PowerDefinition:
    """Get the definition of a power."""
    return POWERS_BY_KIND[kind]
