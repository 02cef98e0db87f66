class LineageError(Exception):
    """Base for every error raised by lineage itself. Exceptions raised by bound callables, methods, and construction
    procedures are never wrapped in one of these, they reach the caller unchanged."""

    pass


class MethodNotFound(LineageError):
    """Raised when a method name cannot be resolved through an instance's type.

    Resolution is structural: only the method table that was actually composed into the instance's type is searched,
    so a method defined on an unrelated type is never found even if the names look related.
    """
    def __init__(self, type_name: str, method_name: str, message: str = None):
        self.type_name = type_name
        self.method_name = method_name
        if message is None:
            message = f"{type_name} has no method {method_name!r}"
        super().__init__(message)


class MisuseError(LineageError, TypeError):
    """Raised when lineage is handed something it cannot work with: a non-callable to bind, a value that isn't a type
    descriptor, or an attempt to mutate a composed type."""

    pass


class GlobalContextDisabledError(LineageError):
    """Raised when the global context is disabled by the LINEAGE_ENABLE_GLOBAL_CONTEXT environment variable."""
