from lineage.binder import bind, BoundCallable
from lineage.composer import compose
from lineage.descriptors import ComposedType, define_type, TypeDescriptor
from lineage.events import Event, EventSource, Listener
from lineage.exceptions import LineageError, MethodNotFound, MisuseError
from lineage.hooks import Hook, hooks
from lineage.instances import bind_method, Instance, invoke, is_instance_of, new_instance
from lineage.registries import get_registry, Registry

__all__ = [
    "bind", "BoundCallable", "bind_method",
    "TypeDescriptor", "ComposedType", "define_type",
    "compose", "new_instance", "is_instance_of", "invoke", "Instance",
    "get_registry", "Registry", "Hook", "hooks",
    "Event", "EventSource", "Listener",
    "LineageError", "MethodNotFound", "MisuseError",
]
