"""One chat exchange: history lookup, upstream call, history update."""
from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Protocol

from .config import Settings
from .errors import ConfigurationError, NotFoundError, ValidationError
from .identifiers import IdentifierGenerator
from .schemas import ChatResponse, Turn
from .session_store import SessionStore

logger = logging.getLogger(__name__)

FALLBACK_REPLY = "No response"


class Completer(Protocol):
    async def complete(
        self, messages: List[Dict[str, str]], api_key: str
    ) -> Optional[str]: ...


class ChatService:
    """Orchestrates a chat request against a shared SessionStore.

    Store updates never span the upstream await: the user turn is appended and
    the prompt snapshot taken before suspending. Two requests racing on the
    same conversation may still interleave their turns; that is not serialized.
    A failed upstream call leaves the user turn in the history.
    """

    def __init__(
        self,
        store: SessionStore,
        client: Completer,
        settings: Settings,
        id_generator: Optional[Callable[[], str]] = None,
    ) -> None:
        self._store = store
        self._client = client
        self._settings = settings
        self._new_id = id_generator or IdentifierGenerator()

    async def handle_chat(
        self, message: Optional[str], conversation_id: Optional[str] = None
    ) -> ChatResponse:
        if not message:
            raise ValidationError()

        session_id = conversation_id or self._new_id()
        history = self._store.append(session_id, Turn(role="user", content=message))
        prompt = [{"role": turn.role, "content": turn.content} for turn in history]

        api_key = self._settings.upstream_api_key
        if not api_key:
            logger.error("Rejecting chat for %s: upstream credential not set", session_id)
            raise ConfigurationError()

        content = await self._client.complete(prompt, api_key)
        reply = (content or "").strip() or FALLBACK_REPLY

        self._store.append(session_id, Turn(role="assistant", content=reply))
        logger.debug(
            "Conversation %s now holds %d turns",
            session_id,
            len(self._store.get(session_id)),
        )
        return ChatResponse(message=reply, conversationId=session_id)

    def clear(self, conversation_id: str) -> None:
        if not self._store.delete(conversation_id):
            raise NotFoundError()
        logger.info("Conversation %s cleared", conversation_id)
