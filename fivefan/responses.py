"""
Response Corpus

Pre-written replies for when no model backend answers. Each voice draws
uniformly from its whole phrase pool, echoes the user's words into
``{input}`` phrases, and tags the result with a category recovered from
the final text.
"""

import random
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Optional, Tuple

from fivefan.errors import CorpusError
from fivefan.voices import INPUT_PLACEHOLDER, get_voice


STATUS_SUCCESS = "success"
STATUS_FALLBACK = "fallback"

SOURCE_LOCAL = "local"
SOURCE_CLOUD = "cloud"
SOURCE_CORPUS = "corpus"
SOURCE_EMERGENCY = "emergency"


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class GeneratedReply:
    """One reply, built once per message and never mutated."""

    status: str                  # "success" (model) or "fallback" (corpus)
    message: str
    voice: str
    response_type: str           # corpus category, or "generated"
    data: str                    # raw user input, echoed back
    source: str                  # "local", "cloud", "corpus", "emergency"
    timestamp: str = ""
    total_patterns: Optional[int] = None

    def to_dict(self) -> dict:
        return asdict(self)


class ResponseCorpus:
    """Static phrase selection for the five voices"""

    def __init__(self, rng: Optional[random.Random] = None):
        """
        Initialize corpus

        Args:
            rng: Random source; the shared module generator when omitted
        """
        self.rng = rng or random

    def select_phrase(self, voice: str, raw_input: str) -> Tuple[str, str]:
        """
        Pick a phrase for a voice and classify it

        Args:
            voice: Voice name; unknown names use the default voice
            raw_input: User text, may be empty

        Returns:
            (phrase, category) with the placeholder already filled in

        Raises:
            CorpusError: the voice has no usable phrases
        """
        v = get_voice(voice)
        pool = v.phrases
        if not pool:
            raise CorpusError(f"Voice '{v.name}' has an empty phrase table")

        phrase = self.rng.choice(pool)

        blank = not raw_input or not raw_input.strip()
        if blank and INPUT_PLACEHOLDER in phrase:
            # One re-draw from the categories that stand on their own
            literal = v.literal_phrases
            if not literal:
                raise CorpusError(f"Voice '{v.name}' has no phrases usable without input")
            phrase = self.rng.choice(literal)

        if INPUT_PLACEHOLDER in phrase:
            phrase = phrase.replace(INPUT_PLACEHOLDER, raw_input)

        return phrase, v.categorize(phrase)

    def reply(self, voice: str, raw_input: str) -> GeneratedReply:
        """Build a fallback reply for a voice."""
        v = get_voice(voice)
        phrase, category = self.select_phrase(v.name, raw_input)
        return GeneratedReply(
            status=STATUS_FALLBACK,
            message=phrase,
            voice=v.name,
            response_type=category,
            data=raw_input,
            source=SOURCE_CORPUS,
            timestamp=utc_timestamp(),
            total_patterns=len(v.phrases),
        )

    @staticmethod
    def categorize(voice: str, text: str) -> str:
        return get_voice(voice).categorize(text)


# Global instance
_corpus = None


def get_corpus() -> ResponseCorpus:
    """Get or create global response corpus"""
    global _corpus
    if _corpus is None:
        _corpus = ResponseCorpus()
    return _corpus


# Per-voice entry points, shaped like the transport's fallback callbacks

def hear(text: str = "") -> GeneratedReply:
    """Empathetic listener: reflects, validates, asks gently."""
    return get_corpus().reply("hear", text)


def inspyre(text: str = "") -> GeneratedReply:
    """Reconnects the user with their inner light."""
    return get_corpus().reply("inspyre", text)


def flow(text: str = "") -> GeneratedReply:
    """Water and nature metaphors about the constant flow of life."""
    return get_corpus().reply("flow", text)


def you(text: str = "") -> GeneratedReply:
    """Celebrates the user's unique, authentic self."""
    return get_corpus().reply("you", text)


def view(text: str = "") -> GeneratedReply:
    """Offers new perspectives and reframes challenges."""
    return get_corpus().reply("view", text)


VOICE_FUNCTIONS = {
    "hear": hear,
    "inspyre": inspyre,
    "flow": flow,
    "you": you,
    "view": view,
}
