from collections import defaultdict
from typing import Any, Callable, TypeAlias

from lineage.binder import BoundCallable
from lineage.debug import get_debug_logger
from lineage.events.event import Event

Handler: TypeAlias = Callable[..., Any]


class Listener:
    """A handler registered with an event source. Disabled listeners stay registered but are skipped by dispatch."""
    def __init__(self, event_name: str, handler: Handler):
        self.event_name = event_name
        self.handler = handler
        self.enabled = True

    def enable(self):
        self.enabled = True

    def disable(self):
        self.enabled = False

    def notify(self, target: Any, event: Event) -> Any:
        """Calls the handler. Bound callables already carry their context, so they only receive the event. Any other
        handler gets the source's target as its context, just like an unbound DOM listener sees the element as this."""
        if isinstance(self.handler, BoundCallable):
            return self.handler(event)

        return self.handler(target, event)

    def __repr__(self):
        state = "enabled" if self.enabled else "disabled"
        return f"<{type(self).__name__} {self.event_name!r} {self.handler!r} ({state})>"


class EventSource:
    """Something that emits named events to registered handlers, standing in for an element that handlers are
    attached to. Unbound handlers see the target as their context, the source itself when no target is given.
    Dispatch is synchronous and happens on the caller's thread."""
    def __init__(self, target: Any = None, name: str = ""):
        self.target = self if target is None else target
        self._name = name
        self._listeners: dict[str, list[Listener]] = defaultdict(list)

    @property
    def name(self) -> str:
        return self._name

    def add_listener(self, event_name: str, handler: Handler) -> Listener:
        """Registers a handler for an event name. Returns a Listener that allows enabling and disabling the handler."""
        if not callable(handler):
            raise TypeError(f"Event handlers must be callable, got {handler!r}")

        listener = Listener(event_name, handler)
        self._listeners[event_name].append(listener)
        return listener

    def remove_listener(self, listener: Listener):
        self._listeners[listener.event_name].remove(listener)

    def dispatch(self, event_name: str, *args, **kwargs) -> list[Any]:
        """Creates an event with the args payload and calls every enabled listener for it in the order they were
        added. Returns the handlers' results. An exception from a handler stops dispatch and reaches the caller."""
        event = Event(event_name, *args, **kwargs)
        listeners = [listener for listener in self._listeners[event_name] if listener.enabled]
        get_debug_logger().dispatched_event(self._name, event_name, len(listeners))
        return [listener.notify(self.target, event) for listener in listeners]

    def __repr__(self):
        return f"{type(self).__name__}({self._name!r})"
