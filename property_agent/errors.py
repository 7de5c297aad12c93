"""Errors raised on the AI delegate path.

Both are recovered inside the resolver; callers of PropertyChatAgent never see them.
"""


class AgentError(Exception):
    """Base class for recoverable agent failures."""


class AIUnavailable(AgentError):
    """No delegate is configured, or the delegate call itself failed."""


class AIParseError(AgentError):
    """The delegate answered but its text could not be read as a filter."""
