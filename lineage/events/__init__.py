from lineage.events.dispatch import EventSource, Listener
from lineage.events.event import Event

__all__ = ["Event", "EventSource", "Listener"]
