"""Synchronous event emitter with once-listeners, prepends and raw listener views."""

from __future__ import annotations

import inspect
import logging
import numbers
import warnings
from collections.abc import Hashable
from typing import Any, Callable

from syncemit.constants import DEFAULT_MAX_LISTENERS, NEW_LISTENER, REMOVE_LISTENER

Listener = Callable[..., Any]


class Token:
    """Opaque event key.

    Two tokens are only ever equal to themselves, even when they were created
    from the same description.
    """

    __slots__ = ("description",)

    def __init__(self, description: str = "") -> None:
        self.description = description

    def __repr__(self) -> str:
        return f"Token({self.description!r})"


class _ListenerSlot:
    __slots__ = ("listener", "once")

    def __init__(self, listener: Listener, once: bool = False) -> None:
        self.listener = listener
        self.once = once


def _same_listener(registered: Listener, listener: Listener) -> bool:
    if registered is listener:
        return True
    # Bound methods are recreated on every attribute access
    if inspect.ismethod(registered) and inspect.ismethod(listener):
        return registered.__func__ is listener.__func__ and registered.__self__ is listener.__self__
    return False


class OnceWrapper:
    """Stand-in returned by raw_listeners() for a listener registered with once().

    Calling the wrapper removes the listener from the emitter and then invokes it.
    The original callable is available as ``listener`` and can be called without
    touching the emitter.
    """

    def __init__(self, emitter: EventEmitter, event_name: Hashable, listener: Listener) -> None:
        self._emitter = emitter
        self._event_name = event_name
        self.listener = listener

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        self._emitter.remove_listener(self._event_name, self.listener)
        self.listener(*args, **kwargs)

    def __repr__(self) -> str:
        return f"<OnceWrapper {self._event_name!r}: {self.listener!r}>"


class EventEmitter:
    """In-process event emitter.

    Listeners are called synchronously, in registration order, and exceptions
    raised by a listener bubble up to the caller of emit(). Listeners added
    with once() are dropped after the first emit() of their event.

    The emitter emits NEW_LISTENER before a listener is added by on() and
    REMOVE_LISTENER after remove_listener() and after every emit() that had
    listeners.
    """

    default_max_listeners: int = DEFAULT_MAX_LISTENERS

    def __init__(self) -> None:
        self._listeners: dict[Hashable, list[_ListenerSlot]] = {}
        # Used as an insertion-ordered set
        self._event_names: dict[Hashable, None] = {}
        self._max_listeners = self.default_max_listeners

    def _slots(self, event_name: Hashable) -> list[_ListenerSlot]:
        return self._listeners.setdefault(event_name, [])

    def on(self, event_name: Hashable, listener: Listener) -> EventEmitter:
        """Append a listener for an event, unless the event is at capacity."""
        if self.listener_count(event_name) < self._max_listeners:
            self.emit(NEW_LISTENER)
            self._slots(event_name).append(_ListenerSlot(listener))
            self._event_names.setdefault(event_name, None)
        else:
            logging.error(
                f"Cannot add listener for {event_name!r}: "
                f"max listeners ({self._max_listeners}) exceeded"
            )
        return self

    def add_listener(self, event_name: Hashable, listener: Listener) -> EventEmitter:
        """Alias for on()."""
        return self.on(event_name, listener)

    def once(self, event_name: Hashable, listener: Listener) -> EventEmitter:
        """Add a listener that is removed after the next emit() of the event."""
        self.on(event_name, listener)
        if self.listener_count(event_name) < self._max_listeners:
            self._slots(event_name)[-1].once = True
        else:
            logging.error(
                f"Cannot add once-listener for {event_name!r}: "
                f"max listeners ({self._max_listeners}) exceeded"
            )
        return self

    def prepend_listener(self, event_name: Hashable, listener: Listener) -> EventEmitter:
        """Insert a listener at the front of the event's listeners.

        Prepending ignores the max listener limit, does not emit NEW_LISTENER and
        does not add the event to event_names().
        """
        self._slots(event_name).insert(0, _ListenerSlot(listener))
        return self

    def prepend_once_listener(self, event_name: Hashable, listener: Listener) -> EventEmitter:
        """Insert a once-listener at the front of the event's listeners."""
        self.prepend_listener(event_name, listener)
        self._slots(event_name)[0].once = True
        return self

    def emit(self, event_name: Hashable, *args: Any, **kwargs: Any) -> bool:
        """Call every listener of an event with the given arguments.

        Returns:
            True if the event had listeners, False otherwise.
        """
        listeners = self.listeners(event_name)
        if not listeners:
            return False

        for listener in listeners:
            listener(*args, **kwargs)

        self._remove_once_listeners(event_name)
        # REMOVE_LISTENER does not re-emit itself
        if event_name != REMOVE_LISTENER:
            self.emit(REMOVE_LISTENER)
        return True

    def _remove_once_listeners(self, event_name: Hashable) -> None:
        # Slots as they are after the listeners ran, not as they were before
        self._listeners[event_name] = [slot for slot in self._slots(event_name) if not slot.once]

    def event_names(self) -> list[Hashable]:
        """Return every event that ever had a listener, in first-registration order."""
        return list(self._event_names)

    def get_max_listeners(self) -> int:
        return self._max_listeners

    def set_max_listeners(self, n: int) -> EventEmitter:
        """Set the per-event listener limit. Non-integer values are logged and ignored."""
        if isinstance(n, numbers.Integral) and not isinstance(n, bool):
            self._max_listeners = int(n)
        else:
            logging.error(f"Cannot set max listeners to {n!r}: value must be an integer")
        return self

    def listener_count(self, event_name: Hashable) -> int:
        return len(self._slots(event_name))

    def listeners(self, event_name: Hashable) -> list[Listener]:
        """Return a new list of the event's listeners."""
        return [slot.listener for slot in self._slots(event_name)]

    def raw_listeners(self, event_name: Hashable) -> list[Listener | OnceWrapper]:
        """Return the event's listeners, with once-listeners wrapped in OnceWrapper."""
        return [
            OnceWrapper(self, event_name, slot.listener) if slot.once else slot.listener
            for slot in self._slots(event_name)
        ]

    def remove_listener(self, event_name: Hashable, listener: Listener) -> EventEmitter:
        """Remove the first registration of ``listener`` for an event.

        Listeners are matched by identity; bound methods match when they wrap the
        same function on the same object.
        A listener registered several times must be removed as many times.
        REMOVE_LISTENER is emitted whether or not anything was removed.
        """
        slots = self._slots(event_name)
        for idx, slot in enumerate(slots):
            if _same_listener(slot.listener, listener):
                del slots[idx]
                break

        self.emit(REMOVE_LISTENER)
        return self

    def off(self, event_name: Hashable, listener: Listener) -> EventEmitter:
        """Alias for remove_listener()."""
        return self.remove_listener(event_name, listener)

    def remove_all_listeners(self, event_name: Hashable | None = None) -> EventEmitter:
        """Remove every listener of one event, or of all events when none is given.

        Listeners are removed one at a time, so REMOVE_LISTENER is emitted once
        per listener. Events stay in event_names().
        """
        event_names = self.event_names() if event_name is None else [event_name]
        for name in event_names:
            for listener in self.listeners(name):
                self.remove_listener(name, listener)
        return self

    # Descriptive aliases
    register = on
    register_once = once
    prepend = prepend_listener
    prepend_once = prepend_once_listener
    dispatch = emit
    count = listener_count
    unregister = remove_listener
    unregister_all = remove_all_listeners
    event_keys = event_names
    get_capacity = get_max_listeners
    set_capacity = set_max_listeners


def listener_count(emitter: EventEmitter, event_name: Hashable) -> int:
    """Deprecated: use ``emitter.listener_count(event_name)``."""
    warnings.warn(
        "listener_count(emitter, event_name) is deprecated, use emitter.listener_count()",
        DeprecationWarning,
        stacklevel=2,
    )
    return emitter.listener_count(event_name)
