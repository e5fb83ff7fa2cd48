"""5FAN response core.

Five voices, one reply: picks a voice persona, asks a local or cloud LLM
for a short empathetic answer and falls back to the static phrase corpus
when no backend is usable.

Entry points:
    generate_response(voice, message, fallback=None, conversation_history=None) -> str
    ResponseOrchestrator(config).respond(voice, message, history) -> GeneratedReply
"""

from fivefan.responses import GeneratedReply, ResponseCorpus
from fivefan.router import ResponseOrchestrator, generate_response, get_response_orchestrator

__version__ = "0.3.0"

__all__ = [
    "GeneratedReply",
    "ResponseCorpus",
    "ResponseOrchestrator",
    "generate_response",
    "get_response_orchestrator",
]
