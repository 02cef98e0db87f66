import inspect
from functools import WRAPPER_ASSIGNMENTS
from types import MappingProxyType
from typing import Any, Callable, Generic, Mapping, TypeAlias, TypeVar

from lineage.debug import get_debug_logger
from lineage.exceptions import MisuseError

Context: TypeAlias = Any

R = TypeVar("R")

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
_KEYWORD = (inspect.Parameter.POSITIONAL_OR_KEYWORD, inspect.Parameter.KEYWORD_ONLY)


class BoundCallable(Generic[R]):
    """A callable permanently tied to a context value and a set of leading arguments.

    Calling a bound callable with ``(*args, **kwargs)`` calls the wrapped function as
    ``func(context, *preset_args, *args, **preset_kwargs | kwargs)``. The context is stored by reference, it is never
    copied, so changes made to the context object are visible to later calls. Bound callables cannot be modified once
    created.

    Wrapper metadata (name, qualname, docstring) is copied from the function. The reported signature is the one callers
    actually see: the context and preset positional arguments are removed and preset keywords become keyword-only
    defaults.
    """
    def __init__(
        self,
        func: Callable[..., R],
        context: Context,
        args: tuple = (),
        keywords: Mapping[str, Any] | None = None,
    ):
        object.__setattr__(self, "_func", func)
        object.__setattr__(self, "_context", context)
        object.__setattr__(self, "_args", tuple(args))
        object.__setattr__(self, "_keywords", dict(keywords or {}))
        for attr in WRAPPER_ASSIGNMENTS:
            try:
                value = getattr(func, attr)
            except AttributeError:
                continue

            object.__setattr__(self, attr, value)

        object.__setattr__(self, "__wrapped__", func)
        object.__setattr__(self, "__signature__", _bound_signature(func, self._args, self._keywords))

    @property
    def func(self) -> Callable[..., R]:
        return self._func

    @property
    def context(self) -> Context:
        return self._context

    @property
    def args(self) -> tuple:
        return self._args

    @property
    def keywords(self) -> Mapping[str, Any]:
        return MappingProxyType(self._keywords)

    def __call__(self, *args, **kwargs) -> R:
        return self._func(self._context, *self._args, *args, **(self._keywords | kwargs))

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable, cannot set {name!r}")

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__} is immutable, cannot delete {name!r}")

    def __repr__(self):
        parts = [repr(self._func), repr(self._context)]
        parts.extend(repr(arg) for arg in self._args)
        parts.extend(f"{name}={value!r}" for name, value in self._keywords.items())
        return f"{type(self).__name__}({', '.join(parts)})"


def bind(func: Callable[..., R], context: Context, /, *args, **kwargs) -> BoundCallable[R]:
    """Binds a function to a context and any number of leading arguments, returning a new callable.

    The function receives the context as its first positional argument every time the bound callable is called,
    regardless of who calls it. Binding an already bound callable keeps its original context and appends the new
    preset arguments after the existing ones.

    Example:
        >>> def greet(this, greeting, name):
        ...     return f"{this.prefix}{greeting}, {name}"
        >>> hello = bind(greet, Handler(prefix="> "), "Hello")
        >>> hello("Charlie")
        '> Hello, Charlie'
    """
    match func:
        case BoundCallable():
            bound = BoundCallable(func.func, func.context, func.args + args, {**func.keywords, **kwargs})

        case _ if callable(func):
            bound = BoundCallable(func, context, args, kwargs)

        case _:
            raise MisuseError(f"Cannot bind {func!r}, it is not callable")

    get_debug_logger().bound_callable(bound.func, bound.context, bound.args)
    return bound


def _bound_signature(func: Callable, args: tuple, keywords: Mapping[str, Any]) -> inspect.Signature | None:
    """The signature left over once the context and presets are filled in, None when it can't be worked out."""
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return None

    to_skip = 1 + len(args)
    remaining = []
    for parameter in signature.parameters.values():
        if to_skip and parameter.kind in _POSITIONAL:
            to_skip -= 1
            continue

        if parameter.kind is inspect.Parameter.VAR_POSITIONAL:
            to_skip = 0

        remaining.append(parameter)

    if to_skip:
        return None

    presets = dict(keywords)
    parameters, keyword_only = [], False
    for parameter in remaining:
        if parameter.name in presets and parameter.kind in _KEYWORD:
            parameter = parameter.replace(kind=inspect.Parameter.KEYWORD_ONLY, default=presets.pop(parameter.name))
            keyword_only = True

        elif keyword_only and parameter.kind is inspect.Parameter.POSITIONAL_OR_KEYWORD:
            parameter = parameter.replace(kind=inspect.Parameter.KEYWORD_ONLY)

        parameters.append(parameter)

    if presets and not any(p.kind is inspect.Parameter.VAR_KEYWORD for p in parameters):
        return None

    try:
        return signature.replace(parameters=parameters)
    except ValueError:
        return None
