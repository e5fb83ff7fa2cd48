"""
LLM Backends

Two interchangeable generation clients behind one contract:

    generate(system_prompt, user_message, history, options) -> str | None

  - LocalBackendClient: self-hosted Ollama server (/api/generate)
  - CloudBackendClient: OpenAI-compatible chat completions (Groq,
    OpenRouter, Together.ai) with bearer auth

Every failure (timeout, refused connection, non-2xx, malformed body,
empty content) comes back as None. Nothing raises past this module.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Sequence

from fivefan.config import CloudBackendConfig, LocalBackendConfig
from fivefan.errors import TransportError
from fivefan.logger import get_logger
from fivefan.transport import HTTPTransport, RequestsTransport, TransportResponse
from fivefan.voices import VOICE_NAMES

SELF_TEST_PROMPT = "You are a helpful assistant. Reply in one short sentence."
SELF_TEST_MESSAGE = "Say hello."

_ASSISTANT_SPEAKERS = {"assistant", "5fan", "bot"} | set(VOICE_NAMES)
CHAT_ROLES = ("system", "user", "assistant")


@dataclass(frozen=True)
class HistoryTurn:
    """One earlier message in the conversation."""

    speaker: str
    text: str

    @property
    def role(self) -> str:
        """Chat-completions role for this turn."""
        speaker = self.speaker.strip().lower()
        if speaker in CHAT_ROLES:
            return speaker
        if speaker in _ASSISTANT_SPEAKERS:
            return "assistant"
        return "user"

    @classmethod
    def coerce(cls, item: Any) -> Optional["HistoryTurn"]:
        """Accept a HistoryTurn or a transport dict ({from, text} or {role, content})."""
        if isinstance(item, HistoryTurn):
            return item
        if isinstance(item, dict):
            speaker = item.get("from") or item.get("role") or "user"
            text = item.get("text") or item.get("content") or ""
            if text:
                return cls(speaker=str(speaker), text=str(text))
        return None


def recent_history(history: Optional[Iterable[Any]], limit: int) -> List[HistoryTurn]:
    """Newest `limit` turns, oldest first."""
    if not history or limit <= 0:
        return []
    turns = [t for t in (HistoryTurn.coerce(item) for item in history) if t is not None]
    return turns[-limit:]


@dataclass(frozen=True)
class GenerationOptions:
    """Per-call overrides; None means use the backend's configured value."""

    model: Optional[str] = None
    max_tokens: Optional[int] = None
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    timeout: Optional[float] = None


@dataclass
class BackendReport:
    """Outcome of a backend self-test."""

    backend: str
    configured: bool
    available: bool
    model: Optional[str] = None
    models: List[str] = field(default_factory=list)
    response: Optional[str] = None
    latency_ms: Optional[float] = None


class BackendClient:
    """Shared plumbing for the generation backends"""

    kind = "backend"

    def __init__(self, transport: Optional[HTTPTransport] = None, config=None):
        self.transport = transport or RequestsTransport()
        self.logger = get_logger(__name__, config)

    # -- contract ---------------------------------------------------------

    def generate(self, system_prompt: str, user_message: str,
                 history: Optional[Sequence[Any]] = None,
                 options: Optional[GenerationOptions] = None,
                 voice: str = "") -> Optional[str]:
        raise NotImplementedError

    def probe(self) -> bool:
        raise NotImplementedError

    def list_models(self) -> List[str]:
        raise NotImplementedError

    @property
    def model(self) -> str:
        raise NotImplementedError

    # -- helpers ----------------------------------------------------------

    def _send(self, url: str, method: str, timeout: float, headers: Optional[dict] = None,
              body: Optional[dict] = None) -> Optional[TransportResponse]:
        """One exchange; transport errors are logged and become None."""
        start = time.time()
        try:
            response = self.transport.request(url, method=method, headers=headers,
                                              body=body, timeout=timeout)
        except TransportError as e:
            self.logger.warning(f"[{self.kind}] {e}")
            return None
        elapsed_ms = (time.time() - start) * 1000
        if not response.ok:
            self.logger.warning(f"[{self.kind}] {method} {url} -> HTTP {response.status} "
                                f"({_error_message(response.body)}) in {elapsed_ms:.0f}ms")
            return None
        self.logger.debug(f"[{self.kind}] {method} {url} -> HTTP {response.status} in {elapsed_ms:.0f}ms")
        return response

    def self_test(self) -> BackendReport:
        """Probe, list models, and ask for a one-line hello."""
        configured = self.configured
        if not configured:
            return BackendReport(backend=self.kind, configured=False, available=False)
        if not self.probe():
            return BackendReport(backend=self.kind, configured=True, available=False)

        models = self.list_models()
        start = time.time()
        response = self.generate(SELF_TEST_PROMPT, SELF_TEST_MESSAGE,
                                 options=GenerationOptions(max_tokens=30))
        return BackendReport(
            backend=self.kind,
            configured=True,
            available=True,
            model=models[0] if models else self.model,
            models=models,
            response=response,
            latency_ms=(time.time() - start) * 1000,
        )

    @property
    def configured(self) -> bool:
        return True


def _error_message(body: Any) -> str:
    if isinstance(body, dict):
        err = body.get("error")
        if isinstance(err, dict):
            return str(err.get("message") or err)
        if err:
            return str(err)
    return "no error detail"


def _clean(text: Any) -> Optional[str]:
    """Strip model output; anything that is not non-empty text is None."""
    if not isinstance(text, str):
        return None
    text = text.strip()
    return text or None


class LocalBackendClient(BackendClient):
    """Ollama generate API on the local machine"""

    kind = "local"

    def __init__(self, settings: Optional[LocalBackendConfig] = None,
                 transport: Optional[HTTPTransport] = None, config=None):
        super().__init__(transport, config)
        self.settings = settings or LocalBackendConfig()

    @property
    def model(self) -> str:
        return self.settings.model

    @staticmethod
    def build_prompt(user_message: str, turns: Sequence[HistoryTurn], voice: str = "") -> str:
        """Flatten recent turns and the new message into one completion prompt."""
        respond_as = f"\n\nRespond as {voice}:" if voice else ""
        if turns:
            context = "\n".join(f"{t.speaker}: {t.text}" for t in turns)
            return f"Recent conversation:\n{context}\n\nUser: {user_message}{respond_as}"
        return f"User: {user_message}{respond_as}"

    def build_payload(self, system_prompt: str, user_message: str,
                      history: Optional[Sequence[Any]] = None,
                      options: Optional[GenerationOptions] = None,
                      voice: str = "") -> dict:
        opts = options or GenerationOptions()
        s = self.settings
        turns = recent_history(history, s.history_limit)
        return {
            "model": opts.model or s.model,
            "prompt": self.build_prompt(user_message, turns, voice),
            "system": system_prompt,
            "stream": False,
            "options": {
                "temperature": opts.temperature if opts.temperature is not None else s.temperature,
                "top_p": opts.top_p if opts.top_p is not None else s.top_p,
                "num_predict": opts.max_tokens or s.max_tokens,
            },
        }

    def generate(self, system_prompt: str, user_message: str,
                 history: Optional[Sequence[Any]] = None,
                 options: Optional[GenerationOptions] = None,
                 voice: str = "") -> Optional[str]:
        """
        Generate a reply with the local model

        Args:
            system_prompt: Persona prompt
            user_message: Current message
            history: Earlier turns; only the newest history_limit are sent
            options: Per-call overrides
            voice: Voice name for the "Respond as" cue

        Returns:
            Stripped text, or None on any failure
        """
        opts = options or GenerationOptions()
        payload = self.build_payload(system_prompt, user_message, history, opts, voice)
        response = self._send(self.settings.generate_url, "POST",
                              timeout=opts.timeout or self.settings.timeout, body=payload)
        if response is None or not isinstance(response.body, dict):
            return None

        text = _clean(response.body.get("response"))
        if text is None:
            self.logger.warning("[local] Response had no usable 'response' field")
        return text

    def probe(self) -> bool:
        """GET the tag list; reachable means HTTP 2xx within the probe timeout."""
        response = self._send(self.settings.probe_url, "GET", timeout=self.settings.probe_timeout)
        return response is not None

    def list_models(self) -> List[str]:
        response = self._send(self.settings.probe_url, "GET", timeout=self.settings.probe_timeout)
        if response is None or not isinstance(response.body, dict):
            return []
        models = response.body.get("models")
        if not isinstance(models, list):
            return []
        return [m.get("name") or m.get("model") for m in models
                if isinstance(m, dict) and (m.get("name") or m.get("model"))]


class CloudBackendClient(BackendClient):
    """OpenAI-compatible hosted API"""

    kind = "cloud"

    MAX_LISTED_MODELS = 20

    def __init__(self, settings: Optional[CloudBackendConfig] = None,
                 transport: Optional[HTTPTransport] = None, config=None):
        super().__init__(transport, config)
        self.settings = settings or CloudBackendConfig()

    @property
    def model(self) -> str:
        return self.settings.model

    @property
    def configured(self) -> bool:
        return self.settings.configured

    def provider_name(self) -> str:
        """Human name of the provider behind the base URL."""
        url = self.settings.url or ""
        if "groq.com" in url:
            return "Groq"
        if "openrouter.ai" in url:
            return "OpenRouter"
        if "together.xyz" in url or "together.ai" in url:
            return "Together.ai"
        if "openai.com" in url:
            return "OpenAI"
        return "Unknown"

    def build_payload(self, system_prompt: str, user_message: str,
                      history: Optional[Sequence[Any]] = None,
                      options: Optional[GenerationOptions] = None) -> dict:
        opts = options or GenerationOptions()
        s = self.settings

        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        for turn in recent_history(history, s.history_limit):
            messages.append({"role": turn.role, "content": turn.text})
        messages.append({"role": "user", "content": user_message})

        return {
            "model": opts.model or s.model,
            "messages": messages,
            "max_tokens": opts.max_tokens or s.max_tokens,
            "temperature": opts.temperature if opts.temperature is not None else s.temperature,
            "stream": False,
        }

    def generate(self, system_prompt: str, user_message: str,
                 history: Optional[Sequence[Any]] = None,
                 options: Optional[GenerationOptions] = None,
                 voice: str = "") -> Optional[str]:
        """Generate a reply with the hosted model; None on any failure."""
        if not self.configured:
            self.logger.warning("[cloud] Not configured - set the API key env var and llm.cloud.url")
            return None

        opts = options or GenerationOptions()
        payload = self.build_payload(system_prompt, user_message, history, opts)
        response = self._send(self.settings.chat_url, "POST",
                              timeout=opts.timeout or self.settings.timeout,
                              headers=self.settings.auth_headers, body=payload)
        if response is None or not isinstance(response.body, dict):
            return None

        try:
            content = response.body["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            self.logger.warning("[cloud] Response had no choices[0].message.content")
            return None
        return _clean(content)

    def probe(self) -> bool:
        if not self.configured:
            return False
        response = self._send(self.settings.models_url, "GET", timeout=self.settings.probe_timeout,
                              headers=self.settings.auth_headers)
        return response is not None

    def list_models(self) -> List[str]:
        if not self.configured:
            return []
        response = self._send(self.settings.models_url, "GET", timeout=self.settings.probe_timeout,
                              headers=self.settings.auth_headers)
        if response is None or not isinstance(response.body, dict):
            return []
        data = response.body.get("data")
        if not isinstance(data, list):
            return []
        ids = [m["id"] for m in data if isinstance(m, dict) and m.get("id")]
        return ids[:self.MAX_LISTED_MODELS]
