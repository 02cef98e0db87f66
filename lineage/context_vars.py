import os
from contextvars import ContextVar

from lineage.exceptions import GlobalContextDisabledError

global_registry: "ContextVar[r.Registry]" = ContextVar("global_registry")


yes_no_mapping = {
    "yes": True,
    "no": False,
    "true": True,
    "false": False,
    "1": True,
    "0": False,
    "y": True,
    "n": False,
}


def _env_flag(name: str, default: bool) -> bool:
    var = os.getenv(name, "yes" if default else "no")
    return yes_no_mapping.get(var.casefold(), default)


def is_global_context_enabled() -> bool:
    """Returns True if the global context is enabled, False otherwise."""
    return _env_flag("LINEAGE_ENABLE_GLOBAL_CONTEXT", True)


def is_debug_enabled() -> bool:
    """Returns True if LINEAGE_DEBUG asks for debug logging. Unrecognized values are treated as off."""
    return _env_flag("LINEAGE_DEBUG", False)


def get_global_registry() -> "r.Registry":
    """Gets the global registry. If no registry exists, creates a new one. Raises GlobalContextDisabledError if the
    LINEAGE_ENABLE_GLOBAL_CONTEXT environment variable is set to False."""
    import lineage.registries as r

    if not is_global_context_enabled():
        raise GlobalContextDisabledError("Global context is disabled. You must provide a registry to use.")

    try:
        registry = global_registry.get()
    except LookupError:
        global_registry.set(
            registry := r.Registry()
        )

    return registry


class GlobalContextMixin:
    """This mixin allows instances to be loaded into a predefined contextvar using a context manager."""
    def __init_subclass__(cls, *, var: ContextVar, **kwargs):
        super().__init_subclass__(**kwargs)
        cls._context_var = var

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._reset_tokens = []

    def __enter__(self):
        self._reset_tokens.append(self._context_var.set(self))
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._context_var.reset(self._reset_tokens.pop())
