from __future__ import annotations

from typing import Mapping, Optional, Sequence

NO_PROMPTS_TEXT = "No prompts available."

# Units 1-6 and 8 of the speaking course.
PROMPTS: dict[str, tuple[str, ...]] = {
    "animals": (
        "Describe a wild animal you find fascinating. Explain its habitat and one adaptation.",
        "Compare two pets that are common in your country. Which is easier to care for and why?",
        "Should zoos focus on conservation or education? Give reasons with one example.",
    ),
    "environment": (
        "Explain one cause and one effect of air pollution in cities you know.",
        "Give three practical ways a college can reduce plastic waste. Which is most effective?",
        "Do the benefits of renewable energy outweigh the costs in your country? Explain.",
    ),
    "transport": (
        "Compare public transport and private cars for daily commuting. Which is better and why?",
        "Suggest improvements to make your city's transport safer and more efficient.",
        "How would self-driving vehicles change logistics or daily life? Give one advantage and one risk.",
    ),
    "customs": (
        "Describe a local celebration or tradition. What values does it teach?",
        "How should tourists behave to respect local customs? Give two examples.",
        "Compare wedding traditions in two cultures. What is similar and different?",
    ),
    "health": (
        "Describe a weekly routine that helps you stay fit. Include exercise and diet.",
        "What advice would you give a friend who wants to improve their sleep?",
        "Explain the pros and cons of high-intensity training for beginners.",
    ),
    "invention": (
        "Choose a modern invention and explain how it changed daily life.",
        "Compare two inventions and explain which is more impactful and why.",
        "Describe a problem at college and propose an invention to solve it.",
    ),
    "economics": (
        "What are the advantages and disadvantages of online shopping for local business?",
        "Explain inflation in simple terms with one real example.",
        "Should students be paid for part-time work during term? Give reasons.",
    ),
}


def next_prompt_index(index: int, length: int) -> int:
    """Advance a rotation index, wrapping to the first prompt after the last."""
    if length <= 0:
        return -1
    return (index + 1) % length


def prompt_text(prompts: Optional[Sequence[str]], index: int) -> str:
    if not prompts or index < 0:
        return NO_PROMPTS_TEXT
    return prompts[index % len(prompts)]


class PromptRotator:
    """Cycles through the prompts of the selected topic."""

    def __init__(self, catalog: Optional[Mapping[str, Sequence[str]]] = None) -> None:
        self._catalog = catalog if catalog is not None else PROMPTS
        self._topic = ""
        self._index = -1

    @property
    def topic(self) -> str:
        return self._topic

    @property
    def topics(self) -> list[str]:
        return list(self._catalog)

    @property
    def current(self) -> str:
        return prompt_text(self._prompts(), self._index)

    def select_topic(self, topic: Optional[str]) -> str:
        """Reset the rotation to the first prompt of ``topic``."""
        self._topic = (topic or "").strip()
        self._index = next_prompt_index(-1, len(self._prompts()))
        return self.current

    def advance(self) -> str:
        self._index = next_prompt_index(self._index, len(self._prompts()))
        return self.current

    def _prompts(self) -> Sequence[str]:
        return self._catalog.get(self._topic) or ()
