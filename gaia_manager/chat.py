"""
Chat with a running node through its OpenAI-compatible endpoint.

The whole transcript is sent on every turn as a single, non-streaming
request. A failed request leaves the user's turn in the transcript and adds
no assistant turn.
"""

import json
import logging
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .config import Settings
from .errors import RemoteChatFailure
from .navigator import Screen, Transition
from .utils import get_ssl_context

_logger = logging.getLogger(__name__)

# Directive -> navigation transition. "/menu" opens the menu directly, without the
# "Return to the main menu?" question of a standalone command.
DIRECTIVES = {
    "/menu": Transition.advance(Screen.MAIN_MENU),
    "/kb": Transition.advance(Screen.KNOWLEDGE_BASE),
    "/exit": Transition.exit(),
    "/quit": Transition.exit(),
}

DIRECTIVE_HELP = [
    ("/menu", "return to the main menu"),
    ("/kb", "open the knowledge base"),
    ("/clear", "start a fresh conversation"),
    ("/help", "show this list"),
    ("/exit", "quit gaia-manager"),
]


@dataclass(frozen=True)
class ChatMessage:
    role: str  # "system", "user" or "assistant"
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


def completions_url(endpoint: str) -> str:
    base = endpoint.rstrip("/")
    if base.endswith("/v1"):
        base = base[: -len("/v1")]
    return f"{base}/v1/chat/completions"


def extract_reply(data: Any) -> str:
    """Read choices[0].message.content from a completion response."""
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as e:
        raise RemoteChatFailure("Completion response did not contain a message") from e
    if not isinstance(content, str):
        raise RemoteChatFailure("Completion response content is not text")
    return content


class ChatSession:
    """One conversation with the node's completion endpoint."""

    def __init__(self, settings: Settings, model: Optional[str] = None, system_prompt: Optional[str] = None):
        self.settings = settings
        self.model = model or settings.chat_model
        self.system_prompt = settings.system_prompt if system_prompt is None else system_prompt
        self.transcript: List[ChatMessage] = []

    @property
    def url(self) -> str:
        return completions_url(self.settings.chat_endpoint)

    def reset(self) -> None:
        self.transcript = []

    def _append_user_turn(self, text: str) -> None:
        if not self.transcript and self.system_prompt:
            self.transcript.append(ChatMessage("system", self.system_prompt))
        self.transcript.append(ChatMessage("user", text))

    def build_payload(self) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": [m.to_dict() for m in self.transcript],
            "stream": False,
        }

    def _post(self, payload: Dict[str, Any]) -> Any:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self.settings.chat_api_key:
            headers["Authorization"] = f"Bearer {self.settings.chat_api_key}"
        req = urllib.request.Request(
            self.url,
            data=json.dumps(payload).encode("utf-8"),
            headers=headers,
            method="POST",
        )
        try:
            with urllib.request.urlopen(
                req, timeout=self.settings.chat_timeout, context=get_ssl_context(self.settings.verify_ssl)
            ) as response:
                return json.loads(response.read().decode("utf-8"))
        except urllib.error.HTTPError as e:
            raise RemoteChatFailure(f"Chat endpoint responded with status {e.code}") from e
        except (urllib.error.URLError, OSError) as e:
            raise RemoteChatFailure(f"Could not reach chat endpoint {self.url}: {e}") from e
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise RemoteChatFailure(f"Invalid JSON from chat endpoint: {e}") from e

    def send(self, text: str) -> str:
        """
        Send a user turn and return the assistant's reply.

        Raises:
            RemoteChatFailure: If the request fails; the user turn is kept
        """
        self._append_user_turn(text)
        try:
            reply = extract_reply(self._post(self.build_payload()))
        except RemoteChatFailure as e:
            _logger.warning("Chat request failed: %s", e)
            raise
        self.transcript.append(ChatMessage("assistant", reply))
        return reply


def parse_directive(line: str) -> Optional[Transition]:
    """Navigation transition for a directive line, or None if it is not one."""
    return DIRECTIVES.get(line.strip().lower())
