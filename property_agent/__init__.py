from .agent import PropertyChatAgent
from .catalog import Catalog, load_catalog
from .models import Action, ChatReply, ChatTurn, Property, SearchFilter
from .parser import parse

__all__ = [
    "Action",
    "Catalog",
    "ChatReply",
    "ChatTurn",
    "Property",
    "PropertyChatAgent",
    "SearchFilter",
    "load_catalog",
    "parse",
]
