from syncemit.constants import NEW_LISTENER, REMOVE_LISTENER
from syncemit.lib.events import EventEmitter, OnceWrapper, Token, listener_count
from syncemit.version import __version__

PACKAGE = __package__
VERSION = __version__

__all__ = [
    "VERSION",
    "PACKAGE",
    "NEW_LISTENER",
    "REMOVE_LISTENER",
    EventEmitter.__name__,
    OnceWrapper.__name__,
    Token.__name__,
    listener_count.__name__,
]
