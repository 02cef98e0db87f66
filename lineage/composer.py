import lineage.registries as r
from lineage.descriptors import ComposedType, TypeDescriptor
from lineage.exceptions import MisuseError
from lineage.hooks import Hook


def compose(
    subtype: TypeDescriptor,
    supertype: TypeDescriptor,
    *,
    name: str | None = None,
    registry: "r.Registry | None" = None,
) -> ComposedType:
    """Derives a new type from a subtype and a supertype.

    The new type's method table is the subtype's table laid over a copy of the supertype's, so same-named methods on
    the subtype win. The supertype becomes the designated parent used by capability queries. Nothing is constructed
    here, the supertype's construction procedure runs once for each instance created from the composed type.

    Raises MisuseError when either argument isn't a type descriptor, when the subtype is already composed (a type has
    at most one supertype), or when the number of arguments to forward to the supertype can't be determined.
    """
    registry = r.get_registry(registry)
    for role, descriptor in (("subtype", subtype), ("supertype", supertype)):
        if not isinstance(descriptor, TypeDescriptor):
            raise MisuseError(f"The {role} must be a TypeDescriptor, got {descriptor!r}")

    if subtype is supertype:
        raise MisuseError(f"Cannot compose {subtype.name} over itself")

    if isinstance(subtype, ComposedType):
        raise MisuseError(
            f"{subtype.name} already has the supertype {subtype.parent.name}, it cannot also be composed over "
            f"{supertype.name}"
        )

    composed = ComposedType(subtype, supertype, forwards=_forward_count(subtype, supertype), name=name)
    registry.debug_logger.composed_type(composed, supertype, composed.methods.keys())
    return registry.hooks[Hook.COMPOSED_TYPE].filter(registry, composed)


def _forward_count(subtype: TypeDescriptor, supertype: TypeDescriptor) -> int:
    if subtype.forwards is not None:
        return subtype.forwards

    match supertype.arity:
        case int() as arity:
            return arity

        case None:
            raise MisuseError(
                f"Cannot tell how many arguments {subtype.name} should forward to {supertype.name}, its construction "
                f"procedure accepts any number of positional arguments. Set forwards on {subtype.name}."
            )
