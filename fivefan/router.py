"""
Response Router

Picks the reply for one inbound message.

Fallback strategy (local-first):
  1. Probe the local model server (cached); if up, generate locally
  2. Probe the cloud API (every time); if up, generate in the cloud
  3. Otherwise answer from the voice's static phrase corpus
  4. If even the corpus fails, answer with a fixed acknowledgment

Each backend is tried at most once per message. A reply always comes
back; backend trouble only shows as a canned instead of generated text.
"""

from typing import Any, Callable, List, Optional, Sequence, Tuple

from fivefan.availability import AvailabilityProbe
from fivefan.backends import BackendClient, CloudBackendClient, LocalBackendClient
from fivefan.config import CloudBackendConfig, Config, LocalBackendConfig
from fivefan.logger import get_logger
from fivefan.responses import (
    SOURCE_CORPUS, SOURCE_EMERGENCY, STATUS_FALLBACK, STATUS_SUCCESS,
    GeneratedReply, ResponseCorpus, utc_timestamp, get_corpus,
)
from fivefan.transport import HTTPTransport
from fivefan.voices import DEFAULT_VOICE, VOICES, get_voice

EMERGENCY_REPLY = "I hear you."
GENERATED_RESPONSE_TYPE = "generated"

PROVIDER_TIERS = {
    "auto": ("local", "cloud"),
    "local": ("local",),
    "cloud": ("cloud",),
    "template": (),
}

FallbackFn = Callable[[str], Any]


class ResponseOrchestrator:
    """Routes a message through local LLM, cloud LLM, then the corpus"""

    def __init__(self, config: Optional[Config] = None,
                 transport: Optional[HTTPTransport] = None,
                 corpus: Optional[ResponseCorpus] = None,
                 local: Optional[LocalBackendClient] = None,
                 cloud: Optional[CloudBackendClient] = None,
                 probe: Optional[AvailabilityProbe] = None):
        """
        Initialize orchestrator

        Args:
            config: Configuration object (defaults only when omitted)
            transport: HTTP transport shared by both backends
            corpus: Phrase corpus for the fallback tier
            local / cloud: Prebuilt backend clients (built from config otherwise)
            probe: Prebuilt availability probe (built around local/cloud otherwise)
        """
        self.config = config or Config()
        self.logger = get_logger(__name__, self.config)

        local_settings = LocalBackendConfig.from_config(self.config)
        self.local = local or LocalBackendClient(local_settings, transport, self.config)
        self.cloud = cloud or CloudBackendClient(CloudBackendConfig.from_config(self.config),
                                                 transport, self.config)
        self.probe = probe or AvailabilityProbe(self.local, self.cloud, self.config,
                                                recheck_interval=local_settings.recheck_interval)
        self.corpus = corpus or get_corpus()

        provider = str(self.config.get("llm.provider", "auto")).lower()
        if provider not in PROVIDER_TIERS:
            self.logger.warning(f"Unknown llm.provider '{provider}', using 'auto'")
            provider = "auto"
        self.provider = provider

        default_voice = self.config.get("voices.default", DEFAULT_VOICE)
        if default_voice not in VOICES:
            self.logger.warning(f"Unknown default voice '{default_voice}', using '{DEFAULT_VOICE}'")
            default_voice = DEFAULT_VOICE
        self.default_voice = default_voice

        self.logger.info(
            f"Response router initialized (provider={self.provider}, "
            f"cloud={'configured' if self.probe.is_cloud_configured() else 'not configured'})"
        )

    def _tiers(self) -> List[Tuple[str, BackendClient, Callable[[], bool]]]:
        tiers = {
            "local": (self.local, self.probe.is_local_available),
            "cloud": (self.cloud, self.probe.is_cloud_available),
        }
        return [(name, *tiers[name]) for name in PROVIDER_TIERS[self.provider]]

    def respond(self, voice: str, user_message: str,
                history: Optional[Sequence[Any]] = None,
                fallback: Optional[FallbackFn] = None) -> GeneratedReply:
        """
        Produce a reply for one message

        Args:
            voice: Voice name; unknown names use the default voice
            user_message: Inbound text (may be empty)
            history: Earlier turns, oldest first
            fallback: Optional corpus callable replacing the built-in tables

        Returns:
            GeneratedReply with a non-empty message
        """
        v = get_voice(voice, default=self.default_voice)
        text = user_message or ""

        for name, client, is_available in self._tiers():
            reply = self._try_backend(name, client, is_available, v.name, v.system_prompt,
                                      text, history)
            if reply is not None:
                return reply

        return self._fallback(v.name, text, fallback)

    def _try_backend(self, name: str, client: BackendClient, is_available: Callable[[], bool],
                     voice: str, system_prompt: str, text: str,
                     history: Optional[Sequence[Any]]) -> Optional[GeneratedReply]:
        """Single attempt at one tier; None means fall through."""
        try:
            if not is_available():
                self.logger.debug(f"[{voice}] {name} LLM unavailable, skipping")
                return None
            generated = client.generate(system_prompt, text, history, voice=voice)
        except Exception as e:
            self.logger.exception(f"[{voice}] {name} LLM raised unexpectedly: {e}")
            return None

        if not generated:
            self.logger.info(f"[{voice}] {name} LLM failed, falling through")
            return None

        self.logger.info(f"[AI] {voice} generated contextual response via {name}")
        return GeneratedReply(
            status=STATUS_SUCCESS,
            message=generated,
            voice=voice,
            response_type=GENERATED_RESPONSE_TYPE,
            data=text,
            source=name,
            timestamp=utc_timestamp(),
        )

    def _fallback(self, voice: str, text: str, fallback: Optional[FallbackFn]) -> GeneratedReply:
        """Corpus tier, with the fixed acknowledgment as the final net."""
        self.logger.info(f"[Fallback] {voice} using pre-written response for: \"{text}\"")
        try:
            if fallback is not None:
                reply = _coerce_reply(fallback(text), voice, text)
            else:
                reply = self.corpus.reply(voice, text)
        except Exception:
            self.logger.exception(f"[Fallback] Corpus lookup failed for voice '{voice}'")
            reply = None

        if reply is None or not reply.message or not reply.message.strip():
            self.logger.error(f"[Fallback] No message from corpus for voice '{voice}', "
                              "using emergency reply")
            return GeneratedReply(
                status=STATUS_FALLBACK,
                message=EMERGENCY_REPLY,
                voice=voice,
                response_type="supportive",
                data=text,
                source=SOURCE_EMERGENCY,
                timestamp=utc_timestamp(),
            )
        return reply

    def generate_response(self, voice_name: str, user_message: str,
                          fallback: Optional[FallbackFn] = None,
                          conversation_history: Optional[Sequence[Any]] = None) -> str:
        """Plain-string reply for the transport layer."""
        return self.respond(voice_name, user_message, conversation_history, fallback).message

    def status(self) -> dict:
        """Which tiers are up and which would answer next."""
        return self.probe.status()


def _coerce_reply(result: Any, voice: str, text: str) -> Optional[GeneratedReply]:
    """Normalize what a fallback callable returned into a GeneratedReply."""
    if isinstance(result, GeneratedReply):
        return result
    if isinstance(result, dict):
        message = result.get("message")
        if not isinstance(message, str):
            return None
        return GeneratedReply(
            status=STATUS_FALLBACK,
            message=message,
            voice=voice,
            response_type=str(result.get("responseType") or result.get("response_type") or ""),
            data=text,
            source=SOURCE_CORPUS,
            timestamp=str(result.get("timestamp") or utc_timestamp()),
            total_patterns=result.get("totalPatterns") or result.get("total_patterns"),
        )
    if isinstance(result, str):
        return GeneratedReply(
            status=STATUS_FALLBACK,
            message=result,
            voice=voice,
            response_type=get_voice(voice).categorize(result),
            data=text,
            source=SOURCE_CORPUS,
            timestamp=utc_timestamp(),
        )
    return None


# Global instance
_orchestrator = None


def get_response_orchestrator(config: Optional[Config] = None) -> ResponseOrchestrator:
    """Get or create the shared orchestrator (config applies on first call only)"""
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = ResponseOrchestrator(config)
    return _orchestrator


def generate_response(voice_name: str, user_message: str,
                      fallback: Optional[FallbackFn] = None,
                      conversation_history: Optional[Sequence[Any]] = None) -> str:
    """
    Main entry point: LLM reply if a backend answers, pre-written otherwise

    Args:
        voice_name: One of hear, inspyre, flow, you, view
        user_message: Inbound text
        fallback: Optional voice function (text -> reply) for the corpus tier
        conversation_history: Earlier turns, oldest first

    Returns:
        Non-empty reply text
    """
    return get_response_orchestrator().generate_response(
        voice_name, user_message, fallback, conversation_history
    )
