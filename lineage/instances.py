import typing as t

from tramp.optionals import Optional

import lineage.registries as r
from lineage.binder import bind, BoundCallable
from lineage.descriptors import Method, TypeDescriptor
from lineage.exceptions import MethodNotFound, MisuseError
from lineage.hooks import Hook


class Instance:
    """The context object produced by constructing a type descriptor.

    Fields are ordinary attributes owned by the instance, ``vars(instance)`` returns them. The instance is tagged with
    the descriptor that built it and the registry that was active at the time, both read-only. Attribute lookups that
    don't find a field fall back to the type's method table and return the method bound to the instance, so
    ``instance.say_age()`` is the same as ``invoke(instance, "say_age")``.

    The names ``lineage_type`` and ``lineage_registry``, and any name starting with ``_lineage_``, are reserved.
    Construction procedures can't use them as field names. Assigning ``lineage_type`` or ``lineage_registry`` raises
    AttributeError, the ``_lineage_`` names hold the instance's own state.
    """
    __slots__ = ("_lineage_type", "_lineage_registry", "__dict__")

    def __init__(self, lineage_type: TypeDescriptor, registry: "r.Registry"):
        self._lineage_type = lineage_type
        self._lineage_registry = registry

    @property
    def lineage_type(self) -> TypeDescriptor:
        return self._lineage_type

    @property
    def lineage_registry(self) -> "r.Registry":
        return self._lineage_registry

    def __getattr__(self, name: str) -> BoundCallable:
        if name.startswith("__") or name.startswith("_lineage_"):
            raise AttributeError(name)

        try:
            return bind_method(self, name)
        except MethodNotFound as e:
            raise AttributeError(f"{self._lineage_type.name} instance has no field or method {name!r}") from e

    def __repr__(self):
        fields = ", ".join(f"{name}={value!r}" for name, value in vars(self).items())
        return f"<{self._lineage_type.name} instance{': ' if fields else ''}{fields}>"


def create_instance(registry: "r.Registry", lineage_type: TypeDescriptor, args: tuple, kwargs: dict) -> Instance:
    """Creates a fresh instance and runs the type's construction procedures against it. For composed types the
    supertype's construction runs first, exactly once, followed by the subtype's own."""
    if not isinstance(lineage_type, TypeDescriptor):
        raise MisuseError(f"Cannot create an instance of {lineage_type!r}, it is not a TypeDescriptor")

    instance = Instance(lineage_type, registry)
    lineage_type.construct(instance, *args, **kwargs)
    registry.debug_logger.constructed_instance(lineage_type)
    return registry.hooks[Hook.CREATED_INSTANCE].filter(registry, instance, {"args": args, "kwargs": kwargs})


def new_instance(lineage_type: TypeDescriptor, /, *args, **kwargs) -> Instance:
    """Creates an instance of a type using the active registry. See Registry.new_instance."""
    return r.get_registry().new_instance(lineage_type, *args, **kwargs)


def is_instance_of(instance: t.Any, descriptor: TypeDescriptor) -> bool:
    """True when the descriptor is the instance's own type or one of its designated supertypes. Derivation only runs
    one way, an instance of a supertype is never an instance of a type composed from it."""
    if not isinstance(instance, Instance):
        return False

    return any(ancestor is descriptor for ancestor in instance.lineage_type.lineage())


def resolve_method(instance: Instance, method_name: str) -> Method:
    """Finds a method in the instance type's method table. On a miss the registry's METHOD_NOT_FOUND hooks may supply
    a fallback, otherwise MethodNotFound is raised."""
    if not isinstance(instance, Instance):
        raise MisuseError(f"Cannot resolve {method_name!r} on {instance!r}, it is not a lineage Instance")

    lineage_type, registry = instance.lineage_type, instance.lineage_registry
    match lineage_type.find_method(method_name):
        case Optional.Some(method):
            registry.debug_logger.resolved_method(lineage_type, method_name)
            return method

        case Optional.Nothing():
            registry.debug_logger.missing_method(lineage_type, method_name)

    match registry.hooks[Hook.METHOD_NOT_FOUND].handle(registry, instance, {"method_name": method_name}):
        case Optional.Some(method):
            return method

        case Optional.Nothing():
            raise MethodNotFound(lineage_type.name, method_name)


def invoke(instance: Instance, method_name: str, /, *args, **kwargs) -> t.Any:
    """Calls a method with the instance as its context. Errors raised by the method reach the caller unchanged."""
    return resolve_method(instance, method_name)(instance, *args, **kwargs)


def bind_method(instance: Instance, method_name: str, /, *args, **kwargs) -> BoundCallable:
    """Resolves a method and binds it to the instance, ready to hand to something that will call it later."""
    return bind(resolve_method(instance, method_name), instance, *args, **kwargs)
