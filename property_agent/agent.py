"""Property search chat agent.

One turn:
1. Resolver extracts a SearchFilter (AI delegate, follow-up reuse, or pattern parser)
2. Relaxation engine matches it against the catalog, never returning an empty list
3. Composer phrases the reply (AI delegate when healthy, templates otherwise)

Entry points: PropertyChatAgent.chat(), PropertyChatAgent.from_config()
"""

from typing import Any, Dict, List, Optional

from .catalog import Catalog, load_catalog
from .composer import SAVED_REPLY, ResponseComposer
from .config import CATALOG_PATH
from .delegate import AbstractTextGenerator, DelegateFilterExtractor, build_text_generator
from .models import Action, ChatReply, ChatTurn
from .relaxation import RelaxationEngine
from .resolver import IntentResolver
from .state import ConversationStateStore
from .utils import get_logger, history_from_payload

logger = get_logger(__name__)


class PropertyChatAgent:
    """Resolve → match/relax → compose, over a read-only catalog."""

    def __init__(
        self,
        catalog: Catalog,
        generator: Optional[AbstractTextGenerator] = None,
        state: Optional[ConversationStateStore] = None,
        engine: Optional[RelaxationEngine] = None,
    ) -> None:
        self.catalog = catalog
        self.generator = generator
        self.state = state or ConversationStateStore()
        delegate = DelegateFilterExtractor(generator) if generator is not None else None
        self.resolver = IntentResolver(delegate=delegate, state=self.state)
        self.engine = engine or RelaxationEngine()
        self.composer = ResponseComposer(generator)

    @classmethod
    def from_config(cls) -> "PropertyChatAgent":
        """Build an agent from the configured catalog path and API key."""
        return cls(catalog=load_catalog(CATALOG_PATH), generator=build_text_generator())

    @property
    def ai_enabled(self) -> bool:
        return self.generator is not None

    async def chat(
        self,
        message: str,
        history: Optional[List[ChatTurn]] = None,
        session_id: Optional[str] = None,
    ) -> ChatReply:
        """Handle one user message and return the reply, filters and listings."""
        if not isinstance(message, str) or not message.strip():
            raise ValueError("Message is required")

        resolution = await self.resolver.resolve(message, history or [], session_id)
        filters = resolution.filters
        logger.info(
            "Resolved filters",
            extra={"source": resolution.source, "filters": filters.to_dict(), "session_id": session_id},
        )

        # The saved list lives elsewhere; the client fetches it separately.
        if filters.action == Action.SAVED:
            return ChatReply(message=SAVED_REPLY, filters=filters, properties=[], ai_enabled=self.ai_enabled)

        match = self.engine.match(filters, self.catalog.get_all())
        text = await self.composer.compose(message, filters, match, use_delegate=not resolution.ai_failed)
        return ChatReply(message=text, filters=filters, properties=match.results, ai_enabled=self.ai_enabled)

    async def chat_payload(
        self,
        message: str,
        history: Optional[List[Dict[str, Any]]] = None,
        session_id: Optional[str] = None,
    ) -> ChatReply:
        """Same as chat(), taking the client's ``[{sender, text}]`` history."""
        return await self.chat(message, history_from_payload(history), session_id)
