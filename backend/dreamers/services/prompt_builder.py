from typing import Dict, Optional, Sequence

FORMAT_BLOCK = """Format the response exactly like this:
STORY:
[Your story text here]

CHOICES:
1. [First choice]
2. [Second choice]
3. [Third choice]"""

OPENING_TEMPLATE = """You are writing an interactive comic book story for Digital Dreamers.
The reader has chosen to play as {character}.
Write the opening scene of their story (about 1-2 paragraphs) and provide 3 distinct choices for how they could proceed with varying alignments - Good, Neutral and Evil.

{format_block}"""

CONTINUATION_TEMPLATES: Dict[int, str] = {
    2: """You are continuing the interactive comic book story for Digital Dreamers.
The reader has chosen to play as {character}. This is page 2, where the conflict develops further.
The story so far is: {previous_story}
Their previous choices were: {choices_history}.
Write 1-2 paragraphs advancing the story and provide 3 new choices that build on their previous decision, with varying alignments - Good, Neutral and Evil.

{format_block}""",
    3: """You are continuing the interactive comic book story for Digital Dreamers.
The reader has chosen to play as {character}. This is page 3, where they face their first major challenge.
The story so far is: {previous_story}
Their previous choices were: {choices_history}.
Write 1-2 paragraphs about their encounter and provide 3 choices for how to handle it, with varying alignments - Good, Neutral and Evil.

{format_block}""",
    4: """You are continuing the interactive comic book story for Digital Dreamers.
The reader has chosen to play as {character}. This is page 4 - the climax.
The story so far is: {previous_story}
Based on their previous choices: {choices_history}, write 1-2 paragraphs about their final challenge and provide 3 possible resolutions.

{format_block}""",
}

CONCLUSION_TEMPLATE = """You are concluding the interactive comic book story for Digital Dreamers.
The reader has chosen to play as {character}. This is page 5 - the resolution.
The story so far is: {previous_story}
Based on their journey (choices: {choices_history}), write 1-2 paragraphs wrapping up their story and provide 3 choices for their final decision that hint at future adventures.

{format_block}"""

FIRST_PAGE = 1
LAST_PAGE = 5


def choices_history(previous_choices: Optional[Sequence[dict]]) -> str:
    """Render the choice history as "text, option 2, ..." ("none" when empty)."""
    if not previous_choices:
        return "none"
    parts = []
    for c in previous_choices:
        text = (c.get("text") or "").strip()
        parts.append(text if text else f"option {c.get('choice')}")
    return ", ".join(parts)


class PromptBuilder:

    @staticmethod
    def template_for_page(page_number: int) -> str:
        if page_number == FIRST_PAGE:
            return OPENING_TEMPLATE
        if page_number == LAST_PAGE:
            return CONCLUSION_TEMPLATE
        if page_number in CONTINUATION_TEMPLATES:
            return CONTINUATION_TEMPLATES[page_number]
        raise ValueError(f"No story template for page {page_number}")

    @staticmethod
    def build_page_prompt(
        character: str,
        page_number: int,
        previous_choices: Optional[Sequence[dict]] = None,
        previous_story: Optional[str] = None,
    ) -> str:
        template = PromptBuilder.template_for_page(page_number)
        prompt = template.format(
            character=character,
            previous_story=(previous_story or "").strip() or "No previous story.",
            choices_history=choices_history(previous_choices),
            format_block=FORMAT_BLOCK,
        )
        return prompt.strip()
