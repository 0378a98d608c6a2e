# dreamers/services/story_parser.py

import re
from dataclasses import dataclass, field
from typing import List

STORY_MARKER = "STORY:"
CHOICES_MARKER = "CHOICES:"
MAX_CHOICES = 3

_NUMBERING = re.compile(r"^\s*\d+\.\s*")


@dataclass
class ParsedStory:
    story_text: str
    choices: List[str] = field(default_factory=list)


def parse_story_response(raw: str) -> ParsedStory:
    """
    Best-effort split of a completion into story text and up to three choices.

    Anything the model gets wrong degrades to fewer choices; it never raises.
    """
    story_section, marker, choices_section = raw.partition(CHOICES_MARKER)
    story_text = story_section.replace(STORY_MARKER, "", 1).strip()

    choices: List[str] = []
    if marker:
        for line in choices_section.strip().splitlines():
            if not line.strip():
                continue
            choices.append(_NUMBERING.sub("", line).strip())
            if len(choices) == MAX_CHOICES:
                break

    return ParsedStory(story_text=story_text, choices=choices)
