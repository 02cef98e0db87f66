import functools
from enum import Enum
from typing import Any, Callable, Generic, ParamSpec, TypeAlias, TypeVar, TYPE_CHECKING

from tramp.optionals import Optional

import lineage.registries as r

if TYPE_CHECKING:
    from lineage.registries import Registry

T = TypeVar("T")
P = ParamSpec("P")
R = TypeVar("R")

HookFunction: TypeAlias = "Callable[[Registry, T, dict[str, Any]], Optional[T]]"


class Hook(Enum):
    CREATED_INSTANCE = "created_instance"    # After an instance's construction procedures have run
    METHOD_NOT_FOUND = "method_not_found"    # When a method name misses the type's method table
    COMPOSED_TYPE = "composed_type"          # After compose builds a new type


class HookManager:
    """A utility type that makes it easier to work with collections of functions waiting for the
    hook to be triggered. Callbacks run in the order they were added."""
    def __init__(self):
        self.callbacks: list[HookFunction] = []

    def add_callback(self, hook: HookFunction):
        """Adds a function that will be called when the hook is triggered."""
        if hook not in self.callbacks:
            self.callbacks.append(hook)

    def handle(self, registry: "Registry", value: T, context: dict[str, Any] | None = None) -> Optional[Any]:
        """Iterates each callback and returns the first result."""
        ctx = context or {}
        for callback in self.callbacks:
            match callback(registry, value, ctx):
                case Optional.Some() as v:
                    return v

                case Optional.Nothing():
                    pass

                case result:
                    raise ValueError(f"Invalid value returned from hook {callback!r}: {result!r}, must be an Optional type.")

        return Optional.Nothing()

    def filter(self, registry: "Registry", value: T, context: dict[str, Any] | None = None) -> T:
        """Iterates all callbacks and updates the value when a callback returns a Some result."""
        ctx = context or {}
        for callback in self.callbacks:
            match callback(registry, value, ctx):
                case Optional.Some(v):
                    value = v

                case Optional.Nothing():
                    pass

                case result:
                    raise ValueError(f"Invalid value returned from hook {callback!r}: {result!r}, must be an Optional type.")

        return value


class HookWrapper(Generic[P, R]):
    """Wraps a hook callback function to make it easier to register with a registry."""
    __match_args__ = ("hook_type",)

    def __init__(self, hook_type: Hook, func: Callable[P, R]):
        self.hook_type = hook_type
        self.func = func

        functools.update_wrapper(self, func)

    def __call__(self, registry: "Registry", value, context=None) -> Optional[R]:
        return self.func(registry, value, context or {})

    def register_hook(self, registry: "r.Registry | None" = None):
        """Adds the callback to a registry for the hook type."""
        registry = r.get_registry(registry)
        registry.add_hook(self)


class _HookDecoratorDescriptor:
    def __init__(self):
        self.hook_type: Optional[Hook] = Optional.Nothing()

    def __get__(self, instance, owner):
        match self.hook_type:
            case Optional.Some(hook_type):
                return HookDecorator(hook_type)

            case Optional.Nothing():
                raise ValueError("Hook type is not yet set. Accessed before owning class definition fully created.")

    def __set_name__(self, owner, name):
        self.hook_type = Optional.Some(Hook[name])


class HookDecorator(Generic[P, R]):
    """A decorator that wraps a function in a hook type to simplify adding it to a registry. This class is aliased as
    "hooks" for convenience.

    Example:
        @hooks.METHOD_NOT_FOUND
        def fallback(registry: Registry, instance: Instance, context: dict) -> Optional[Callable]:
            ...
    """
    CREATED_INSTANCE = _HookDecoratorDescriptor()
    METHOD_NOT_FOUND = _HookDecoratorDescriptor()
    COMPOSED_TYPE = _HookDecoratorDescriptor()

    def __init__(self, hook_type: Hook):
        self.hook_type = hook_type

    def __call__(self, func: Callable[P, R]) -> HookWrapper[P, R]:
        return HookWrapper(self.hook_type, func)

    def __repr__(self):
        return f"HookDecorator({self.hook_type})"


hooks = HookDecorator
