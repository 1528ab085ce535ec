import pytest

from speaking_practice.recorder.prompts import NO_PROMPTS_TEXT, PROMPTS, PromptRotator, next_prompt_index, prompt_text


@pytest.mark.parametrize("topic", sorted(PROMPTS))
def test_advancing_cycles_through_every_prompt_once(topic):
    rotator = PromptRotator()
    first = rotator.select_topic(topic)

    seen = [first] + [rotator.advance() for _ in range(len(PROMPTS[topic]) - 1)]

    assert seen == list(PROMPTS[topic])
    assert rotator.advance() == first


def test_selecting_topic_resets_rotation():
    rotator = PromptRotator()
    rotator.select_topic("health")
    rotator.advance()
    rotator.advance()

    assert rotator.select_topic("health") == PROMPTS["health"][0]


@pytest.mark.parametrize("topic", [None, "", "astronomy"])
def test_unknown_or_empty_topic_shows_sentinel(topic):
    rotator = PromptRotator()

    assert rotator.select_topic(topic) == NO_PROMPTS_TEXT
    assert rotator.advance() == NO_PROMPTS_TEXT
    assert rotator.current == NO_PROMPTS_TEXT


def test_topic_with_empty_list_shows_sentinel():
    rotator = PromptRotator({"empty": [], "one": ["Only prompt"]})

    assert rotator.select_topic("empty") == NO_PROMPTS_TEXT
    assert rotator.select_topic("one") == "Only prompt"
    assert rotator.advance() == "Only prompt"


def test_rotation_helpers():
    assert next_prompt_index(-1, 3) == 0
    assert next_prompt_index(2, 3) == 0
    assert next_prompt_index(0, 0) == -1
    assert prompt_text(["a", "b"], 1) == "b"
    assert prompt_text([], 0) == NO_PROMPTS_TEXT
