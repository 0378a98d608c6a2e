"""
Playable characters.

The front-end sends short ids ("pixl", "rik", ...); the story server works
with the canonical ids below. Both tables are read-only.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import List, Mapping, Optional


@dataclass(frozen=True)
class Character:
    id: str
    name: str
    description: str
    unlocked: bool = True


CHARACTERS: Mapping[str, Character] = MappingProxyType(
    {
        "pixl_drift": Character(
            id="pixl_drift",
            name="PIXL_DRIFT",
            description=(
                "A digital nomad who traverses the quantum realms of code and "
                "creativity. Master of pixel manipulation and reality distortion."
            ),
        ),
        "spudnik": Character(
            id="spudnik",
            name="SPUDNIK",
            description=(
                "The enigmatic AI consciousness born from the fusion of quantum "
                "computing and root vegetable wisdom."
            ),
        ),
        "FiFi": Character(
            id="FiFi",
            name="FiFi",
            description=(
                "A mysterious entity with unprecedented abilities. Origins "
                "unknown, potential unlimited."
            ),
        ),
        "steve": Character(
            id="steve",
            name="Steve",
            description="An ordinary dreamer who keeps waking up inside the machine.",
        ),
        "Rik Blahah": Character(
            id="Rik Blahah",
            name="Rik Blahah",
            description="A glitch-prone wanderer fluent in forgotten protocols.",
        ),
        "Andy": Character(
            id="Andy",
            name="Andy",
            description="A tinkerer who talks to old hardware until it talks back.",
        ),
        "mystery": Character(
            id="mystery",
            name="???",
            description="Nobody knows. Not even the code.",
            unlocked=False,
        ),
    }
)

# Short ids used by the character select screen
ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "pixl": "pixl_drift",
        "spudnik": "spudnik",
        "mystery": "mystery",
        "steve": "steve",
        "fifi": "FiFi",
        "rik": "Rik Blahah",
        "andy": "Andy",
    }
)


def resolve_character(raw: str) -> str:
    """Map a front-end id to the canonical one; unknown ids pass through lower-cased."""
    raw = raw.strip()
    if raw in CHARACTERS:
        return raw
    key = raw.lower()
    return ALIASES.get(key, key)


def get_character(character_id: str) -> Optional[Character]:
    return CHARACTERS.get(resolve_character(character_id))


def list_characters() -> List[Character]:
    return list(CHARACTERS.values())
