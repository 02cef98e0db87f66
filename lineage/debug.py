"""
Debug utilities for lineage.
"""
from lineage.context_vars import is_debug_enabled


class DebugLogger:
    """
    Centralized debug logging for binding, composition, and dispatch.

    Keeps the "is debugging on" checks out of the core code paths.
    """

    def __init__(self, enabled: bool = False):
        self.enabled = enabled

    def bound_callable(self, func, context, args: tuple):
        if self.enabled:
            args_str = f" with preset args {args!r}" if args else ""
            print(f"[LINEAGE DEBUG] Bound {_name_of(func)} to {context!r}{args_str}")

    def composed_type(self, composed, parent, method_names):
        """Log a new composed type and the methods its table ended up with."""
        if self.enabled:
            methods = ", ".join(sorted(method_names)) or "no methods"
            print(f"[LINEAGE DEBUG] Composed {composed.name} over {parent.name} ({methods})")

    def constructed_instance(self, type_):
        if self.enabled:
            print(f"[LINEAGE DEBUG] Constructed instance of {type_.name}")

    def resolved_method(self, type_, method_name: str):
        if self.enabled:
            print(f"[LINEAGE DEBUG] Resolved {type_.name}.{method_name}")

    def missing_method(self, type_, method_name: str):
        """Log a method lookup that missed the type's table."""
        if self.enabled:
            print(f"[LINEAGE DEBUG] {type_.name} has no method {method_name!r}")

    def dispatched_event(self, source_name: str, event_name: str, listener_count: int):
        if self.enabled:
            source = f" on {source_name}" if source_name else ""
            print(f"[LINEAGE DEBUG] Dispatching {event_name!r}{source} to {listener_count} listener(s)")


def _name_of(func) -> str:
    return getattr(func, "__qualname__", None) or getattr(func, "__name__", None) or repr(func)


# Global debug logger instance
_debug_logger = DebugLogger(is_debug_enabled())


def get_debug_logger() -> DebugLogger:
    """Get the global debug logger instance."""
    return _debug_logger


def set_debug_enabled(enabled: bool):
    """Enable or disable debug logging globally."""
    _debug_logger.enabled = enabled


def create_debug_logger(enabled: bool) -> DebugLogger:
    """Create a new debug logger with specified state."""
    return DebugLogger(enabled)
