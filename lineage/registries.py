from collections import defaultdict
from typing import overload

import lineage.composer as composer
import lineage.hooks as hooks
import lineage.instances as instances
from lineage.context_vars import get_global_registry, global_registry, GlobalContextMixin
from lineage.debug import create_debug_logger, DebugLogger, get_debug_logger
from lineage.descriptors import ComposedType, TypeDescriptor


class Registry(GlobalContextMixin, var=global_registry):
    """Registries hold the hooks that customize composition and instance creation. Instances remember the registry
    that created them and use its hooks when resolving methods.

    A registry can be made the global registry for a block of code:

        >>> with Registry(debug=True) as registry:
        ...     person = new_instance(Person, "Charlie")

    When ``debug`` is None the registry follows the global debug logger, which starts out enabled when the
    LINEAGE_DEBUG environment variable is set to a truthy value.
    """
    def __init__(self, *, debug: bool | None = None):
        super().__init__()
        self.hooks: dict[hooks.Hook, hooks.HookManager] = defaultdict(hooks.HookManager)
        self.debug = debug

    @property
    def debug_logger(self) -> DebugLogger:
        if self.debug is None:
            return get_debug_logger()

        return create_debug_logger(self.debug)

    @overload
    def add_hook(self, hook: "hooks.HookWrapper"):
        ...

    @overload
    def add_hook(self, hook_type: "hooks.Hook", func: "hooks.HookFunction"):
        ...

    def add_hook(self, *args):
        """Adds a callback to a hook. If a HookWrapper is passed, the hook is added to the registry. If a Hook type and
        a callable are passed, the callable is added as a callback to the hook."""
        match args:
            case [hooks.Hook() as hook_type, func] if callable(func):
                self.hooks[hook_type].add_callback(func)

            case [hooks.HookWrapper(hook_type) as hook]:
                self.hooks[hook_type].add_callback(hook)

            case _:
                raise ValueError(f"Unexpected arguments to add_hook: {args}")

    def compose(self, subtype: TypeDescriptor, supertype: TypeDescriptor, *, name: str | None = None) -> ComposedType:
        """Composes a subtype over a supertype using this registry's hooks."""
        return composer.compose(subtype, supertype, name=name, registry=self)

    def new_instance(self, lineage_type: TypeDescriptor, /, *args, **kwargs) -> "instances.Instance":
        """Creates an instance of a type. The supertype's construction procedure, if there is one, runs exactly once
        before the type's own. CREATED_INSTANCE hooks may replace the result."""
        return instances.create_instance(self, lineage_type, args, kwargs)


@overload
def get_registry(registry: Registry | None) -> Registry:
    ...


@overload
def get_registry() -> Registry:
    ...


def get_registry(*args) -> Registry:
    """Returns a registry. If a registry is passed, it is returned. If no registry is passed or None is passed, the
    global registry is returned. This creates a new global registry if it is needed and doesn't already exist."""
    match args:
        case [Registry() as registry]:
            return registry

        case [None]:
            return get_global_registry()

        case []:
            return get_global_registry()

        case _:
            raise ValueError(f"Unexpected arguments to get_registry: {args}")
