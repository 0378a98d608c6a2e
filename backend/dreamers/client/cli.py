#!/usr/bin/env python3
"""
Play Digital Dreamers in a terminal against a running story server.

    dreamers-play --api http://localhost:3000
    dreamers-play --character pixl --reset
"""

import argparse
import logging
import os
import sys
import textwrap
from typing import Callable, List, Optional

from dreamers.characters import get_character, list_characters
from dreamers.client.api_client import StoryApiClient
from dreamers.client.session_manager import (
    CREDITS_PAGE,
    PlaythroughState,
    StoryManager,
)
from dreamers.client.storage import LocalStore

DEFAULT_STATE_FILE = os.path.join(os.path.expanduser("~"), ".dreamers", "state.json")


def _ask(prompt: str, valid: List[str], read: Callable[[str], str]) -> str:
    while True:
        answer = read(prompt).strip()
        if answer in valid:
            return answer
        print(f"Pick one of: {', '.join(valid)}")


def choose_character(read: Callable[[str], str] = input) -> str:
    playable = [c for c in list_characters() if c.unlocked]
    print("\nSELECT YOUR DREAMER\n")
    for i, c in enumerate(playable, start=1):
        print(f"  {i}. {c.name}")
        print(textwrap.indent(textwrap.fill(c.description, 70), "     "))
    pick = _ask("\n> ", [str(i) for i in range(1, len(playable) + 1)], read)
    return playable[int(pick) - 1].id


def render_page(manager: StoryManager) -> None:
    print("\n" + "=" * 72)
    print(f"PAGE {len(manager.story_history)}")
    if manager.image_url:
        print(f"[panel] {manager.image_url}")
    print()
    print(textwrap.fill(manager.latest_segment or "No story generated yet.", 72))
    print()
    for i, choice in enumerate(manager.current_choices, start=1):
        print(f"  {i}. {choice}")


def play(manager: StoryManager, read: Callable[[str], str] = input) -> int:
    while True:
        if not manager.initialize():
            manager.select_character(choose_character(read))
            continue
        if manager.state is PlaythroughState.finished:
            print("This playthrough is over. Start again with --reset or --character.")
            return 0
        if manager.error:
            print(manager.error)
            return 1

        render_page(manager)
        valid = [str(i) for i in range(1, max(len(manager.current_choices), 1) + 1)]
        destination = manager.handle_choice(int(_ask("\n> ", valid, read)))
        if destination == CREDITS_PAGE or manager.state is PlaythroughState.finished:
            print("\n" + "=" * 72)
            print("THE END. Thanks for playing Digital Dreamers.")
            if manager.previous_playthroughs:
                print(f"Previous playthroughs as this character: {manager.previous_playthroughs}")
            return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Play Digital Dreamers in the terminal.")
    parser.add_argument(
        "--api",
        default=os.getenv("DREAMERS_API_URL", "http://localhost:3000"),
        help="Story server base URL",
    )
    parser.add_argument(
        "--state-file",
        default=os.getenv("DREAMERS_STATE_FILE", DEFAULT_STATE_FILE),
        help="Where the local playthrough state is kept",
    )
    parser.add_argument("--character", help="Start a new playthrough as this character")
    parser.add_argument("--reset", action="store_true", help="Forget the local playthrough")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    storage = LocalStore(args.state_file)
    if args.reset:
        storage.clear()
    manager = StoryManager(StoryApiClient(args.api), storage)
    if args.character:
        character = get_character(args.character)
        if character is None or not character.unlocked:
            parser.error(f"unknown or locked character: {args.character}")
        manager.select_character(character.id)

    try:
        return play(manager)
    except (KeyboardInterrupt, EOFError):
        print("\nProgress saved. See you in the dream.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
