import pytest

from fivefan.voices import INPUT_PLACEHOLDER, VOICE_NAMES, VOICES, get_voice


def test_closed_voice_set():
    assert VOICE_NAMES == ("hear", "inspyre", "flow", "you", "view")


@pytest.mark.parametrize("name, size", [
    ("hear", 70), ("inspyre", 84), ("flow", 80), ("you", 80), ("view", 90),
])
def test_phrase_table_sizes(name, size):
    assert len(VOICES[name].phrases) == size


def test_only_hear_reflective_echoes_input():
    for name, voice in VOICES.items():
        for category, phrases in voice.categories:
            uses_input = any(INPUT_PLACEHOLDER in p for p in phrases)
            assert uses_input == (name == "hear" and category == "reflective")


def test_hear_literal_pool_excludes_reflective():
    hear = VOICES["hear"]
    assert len(hear.literal_phrases) == 55
    assert not any(INPUT_PLACEHOLDER in p for p in hear.literal_phrases)


def test_unknown_voice_falls_back_to_hear():
    assert get_voice("nobody").name == "hear"
    assert get_voice("").name == "hear"
    assert get_voice("  FLOW ").name == "flow"


def test_tables_are_read_only():
    with pytest.raises(TypeError):
        VOICES["extra"] = VOICES["hear"]
    with pytest.raises(AttributeError):
        VOICES["hear"].name = "other"


@pytest.mark.parametrize("voice, text, category", [
    ("hear", "Would you like to tell me more?", "question"),
    ("hear", "I hear you're feeling tired", "reflective"),
    ("hear", "It sounds like work is on your mind", "reflective"),
    ("hear", "You matter, and I'm here", "encouragement"),
    ("hear", "I'm holding space for you", "supportive"),
    ("inspyre", "You've overcome before; your strength is real", "past-strength"),
    ("inspyre", "Your existence adds something irreplaceable to this world", "connection"),
    ("inspyre", "Even the smallest ember can reignite a flame", "inspiration"),
    ("flow", "The stream of life is always moving, even when we pause", "stream-metaphor"),
    ("flow", "Like water around a stone, life flows around obstacles", "water-wisdom"),
    ("flow", "Fluidity is strength, not weakness", "flow"),
    ("you", "You're an original in a world of copies", "uniqueness"),
    ("you", "Authenticity is your superpower", "self-celebration"),
    ("view", "Is the glass half full today?", "focus-shift"),
    ("view", "Gratitude shifts the entire landscape", "perspective-shift"),
])
def test_categorize_known_phrases(voice, text, category):
    assert VOICES[voice].categorize(text) == category


def test_first_matching_rule_wins():
    # "river" (stream-metaphor) is checked before "water" (water-wisdom)
    assert VOICES["flow"].categorize("water in the river") == "stream-metaphor"
    # "?" outranks every hear marker
    assert VOICES["hear"].categorize("I hear you, is that brave?") == "question"


def test_markers_are_case_sensitive():
    # the view rule looks for lowercase "what if"
    assert VOICES["view"].categorize("What if this obstacle is actually an opportunity?") == "perspective-shift"
    assert VOICES["view"].categorize("and what if it works") == "reframing"


def test_categorize_is_deterministic():
    hear = VOICES["hear"]
    phrase = "Your feelings are valid and important"
    first = hear.categorize(phrase)
    for other in hear.phrases:
        hear.categorize(other)
    assert all(hear.categorize(phrase) == first for _ in range(50))


def test_phrase_pools_built_once():
    hear = VOICES["hear"]
    assert hear.phrases is hear.phrases
    assert hear.literal_phrases is hear.literal_phrases
    with pytest.raises(AttributeError):
        hear.phrases = ()
