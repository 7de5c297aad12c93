"""Decides, per message, which extractor produces the filter and when to reuse the last one.

Order of preference:
1. the AI delegate, when configured (its non-empty results are remembered)
2. the remembered filter of this session, when the message is a bare confirmation
3. the pattern parser (its non-empty results are remembered)
"""
from dataclasses import dataclass
from typing import List, Optional

from .errors import AgentError
from .models import ChatTurn, SearchFilter
from .parser import AbstractFilterExtractor, PatternFilterExtractor, is_follow_up
from .state import ConversationStateStore
from .utils import get_logger

logger = get_logger(__name__)


@dataclass
class Resolution:
    filters: SearchFilter
    source: str  # "delegate" | "follow_up" | "pattern"
    follow_up: bool = False
    ai_failed: bool = False  # a configured delegate was tried and failed


class IntentResolver:
    def __init__(
        self,
        delegate: Optional[AbstractFilterExtractor] = None,
        pattern: Optional[AbstractFilterExtractor] = None,
        state: Optional[ConversationStateStore] = None,
    ) -> None:
        self.delegate = delegate
        self.pattern = pattern or PatternFilterExtractor()
        self.state = state or ConversationStateStore()

    async def resolve(
        self,
        message: str,
        history: Optional[List[ChatTurn]] = None,
        session_id: Optional[str] = None,
    ) -> Resolution:
        history = history or []
        follow_up = is_follow_up(message)
        ai_failed = False

        if self.delegate is not None:
            try:
                filters = await self.delegate.extract(message, history, follow_up)
            except AgentError as e:
                logger.warning("AI extraction failed, using pattern fallback: %s", e)
                ai_failed = True
            else:
                self.state.remember(filters, session_id)
                return Resolution(filters, source=self.delegate.name, follow_up=follow_up)

        if follow_up:
            previous = self.state.get(session_id)
            if previous is not None:
                logger.info("Using last filters for follow-up", extra={"filters": previous.to_dict()})
                return Resolution(previous, source="follow_up", follow_up=True, ai_failed=ai_failed)

        filters = await self.pattern.extract(message, history, follow_up)
        self.state.remember(filters, session_id)
        return Resolution(filters, source=self.pattern.name, follow_up=follow_up, ai_failed=ai_failed)
