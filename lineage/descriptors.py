"""
Type descriptors: a construction procedure plus a method table.

A descriptor stands in for a class. Its construction procedure receives the new instance as its first argument and
fills in fields, its method table maps names to callables that receive the instance the same way.

Example:
    >>> @define_type
    ... def Person(this, name):
    ...     this.name = name
    ...     this.colors = ["red", "blue", "green"]
    >>>
    >>> @Person.method
    ... def say_name(this):
    ...     return this.name
"""
import inspect
import typing as t
from types import MappingProxyType

from tramp.optionals import Optional

from lineage.exceptions import MisuseError

Constructor: t.TypeAlias = t.Callable[..., None]
Method: t.TypeAlias = t.Callable[..., t.Any]

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
_KEYWORD = (inspect.Parameter.POSITIONAL_OR_KEYWORD, inspect.Parameter.KEYWORD_ONLY)


class TypeDescriptor:
    """Describes one composable type.

    Methods can be added until the descriptor is composed into another type. Composition takes a snapshot of the
    table, so methods added later are not seen by types that were already composed. Adding methods is not synchronized,
    callers sharing a descriptor across threads must do that themselves.

    ``forwards`` is only used when this descriptor is the subtype in a composition: it is the number of leading
    positional constructor arguments that belong to the supertype. When it is None the supertype's required positional
    arity is used, so supertype parameters with defaults can only be given by keyword.

    The name, construction procedure, and forwards count are fixed when the descriptor is created.
    """
    def __init__(
        self,
        name: str,
        constructor: Constructor,
        methods: t.Mapping[str, Method] | None = None,
        *,
        forwards: int | None = None,
    ):
        if not callable(constructor):
            raise MisuseError(f"Type {name!r} needs a callable construction procedure, got {constructor!r}")

        if forwards is not None and forwards < 0:
            raise ValueError(f"forwards must not be negative, got {forwards}")

        self._name = name
        self._constructor = constructor
        self._forwards = forwards
        self._methods: t.MutableMapping[str, Method] = dict(methods or {})

    @property
    def name(self) -> str:
        return self._name

    @property
    def constructor(self) -> Constructor:
        return self._constructor

    @property
    def forwards(self) -> int | None:
        return self._forwards

    @property
    def parent(self) -> "TypeDescriptor | None":
        """The designated supertype, plain descriptors have none."""
        return None

    @property
    def methods(self) -> t.Mapping[str, Method]:
        """A read-only view of the method table."""
        return MappingProxyType(self._methods)

    @property
    def arity(self) -> int | None:
        """Number of required positional arguments the construction procedure takes after the context, or None when it
        accepts any number of them."""
        return _positional_arity(self.constructor)

    @property
    def parameter_names(self) -> frozenset[str]:
        """Names the construction procedure accepts as keyword arguments."""
        return _keyword_names(self.constructor)

    @t.overload
    def method(self, func: Method) -> Method:
        ...

    @t.overload
    def method(self, *, name: str) -> t.Callable[[Method], Method]:
        ...

    def method(self, func: Method | None = None, *, name: str | None = None):
        """Decorator that adds a function to the method table under its own name, or under ``name`` when given."""
        def decorator(method: Method) -> Method:
            self.add_method(name or method.__name__, method)
            return method

        return decorator(func) if func else decorator

    def add_method(self, name: str, func: Method):
        if not callable(func):
            raise MisuseError(f"Method {name!r} of {self.name} must be callable, got {func!r}")

        self._methods[name] = func

    def find_method(self, name: str) -> Optional[Method]:
        if name in self._methods:
            return Optional.Some(self._methods[name])

        return Optional.Nothing()

    def construct(self, instance, *args, **kwargs):
        """Runs the construction procedure against an instance."""
        self.constructor(instance, *args, **kwargs)

    def lineage(self) -> t.Iterator["TypeDescriptor"]:
        """Yields this descriptor followed by each designated supertype up the chain."""
        descriptor = self
        while descriptor is not None:
            yield descriptor
            descriptor = descriptor.parent

    def __repr__(self):
        return f"<{type(self).__name__} {self.name}>"


class ComposedType(TypeDescriptor):
    """A descriptor derived from a subtype (the origin) and a supertype (the parent).

    The method table is the origin's table laid over a copy of the parent's, both taken when the composed type is
    created. Constructing an instance runs the parent's construction procedure once with the first ``forwards``
    positional arguments and the keywords only the parent accepts, then the origin's construction procedure with
    everything else. Composed types are immutable: the argument split is worked out from the signatures as they were
    at compose time, and no attribute can be set once the type is built.
    """
    def __init__(
        self,
        origin: TypeDescriptor,
        parent: TypeDescriptor,
        *,
        forwards: int,
        name: str | None = None,
    ):
        super().__init__(
            name or origin.name,
            origin.constructor,
            {**parent.methods, **origin.methods},
            forwards=forwards,
        )
        self._methods = MappingProxyType(self._methods)
        self._origin = origin
        self._parent = parent
        own_arity, own_names = origin.arity, origin.parameter_names
        self._arity = None if own_arity is None else forwards + own_arity
        self._parameter_names = parent.parameter_names | own_names
        self._parent_only_names = parent.parameter_names - own_names
        self._sealed = True

    @property
    def origin(self) -> TypeDescriptor:
        return self._origin

    @property
    def parent(self) -> TypeDescriptor:
        return self._parent

    @property
    def methods(self) -> t.Mapping[str, Method]:
        return self._methods

    @property
    def arity(self) -> int | None:
        return self._arity

    @property
    def parameter_names(self) -> frozenset[str]:
        return self._parameter_names

    def add_method(self, name: str, func: Method):
        raise MisuseError(f"Cannot add method {name!r}, composed type {self.name} is immutable")

    def construct(self, instance, *args, **kwargs):
        parent_args, own_args = args[:self.forwards], args[self.forwards:]
        parent_kwargs, own_kwargs = self._split_keywords(kwargs)
        self._parent.construct(instance, *parent_args, **parent_kwargs)
        self.constructor(instance, *own_args, **own_kwargs)

    def _split_keywords(self, kwargs: dict[str, t.Any]) -> tuple[dict[str, t.Any], dict[str, t.Any]]:
        parent_kwargs, own_kwargs = {}, {}
        for name, value in kwargs.items():
            (parent_kwargs if name in self._parent_only_names else own_kwargs)[name] = value

        return parent_kwargs, own_kwargs

    def __setattr__(self, name, value):
        if getattr(self, "_sealed", False):
            raise AttributeError(f"Composed type {self.name} is immutable, cannot set {name!r}")

        super().__setattr__(name, value)

    def __delattr__(self, name):
        raise AttributeError(f"Composed type {self.name} is immutable, cannot delete {name!r}")

    def __repr__(self):
        return f"<{type(self).__name__} {self.name} of {self._parent.name}>"


@t.overload
def define_type(constructor: Constructor) -> TypeDescriptor:
    ...


@t.overload
def define_type(*, name: str | None = None, forwards: int | None = None) -> t.Callable[[Constructor], TypeDescriptor]:
    ...


def define_type(constructor: Constructor | None = None, *, name: str | None = None, forwards: int | None = None):
    """Decorator that turns a construction procedure into a type descriptor named after the function. It can be used
    bare or called with a name and forwards count."""
    def decorator(func: Constructor) -> TypeDescriptor:
        return TypeDescriptor(name or func.__name__, func, forwards=forwards)

    return decorator(constructor) if constructor else decorator


def _parameters(func: t.Callable) -> list[inspect.Parameter] | None:
    try:
        parameters = list(inspect.signature(func).parameters.values())
    except (ValueError, TypeError):
        return None

    # The first positional parameter receives the instance
    if parameters and parameters[0].kind in _POSITIONAL:
        parameters = parameters[1:]

    return parameters


def _positional_arity(func: t.Callable) -> int | None:
    parameters = _parameters(func)
    if parameters is None or any(p.kind is inspect.Parameter.VAR_POSITIONAL for p in parameters):
        return None

    return sum(1 for p in parameters if p.kind in _POSITIONAL and p.default is inspect.Parameter.empty)


def _keyword_names(func: t.Callable) -> frozenset[str]:
    parameters = _parameters(func) or []
    return frozenset(p.name for p in parameters if p.kind in _KEYWORD)
