"""Type relationships used by the compatibility checks.

A "type" here is either a class or a parameterized generic alias such as
``Repository[str]``. The walk over a type's relationships yields its
implemented generic interfaces first (parameterized bases, with the type
variables of each ancestor substituted by the arguments the descendant
binds them to, each yielded once), then its linear base chain (the MRO).
"""

from __future__ import annotations

import inspect
import typing
from typing import Any, Generic, Iterator, Protocol, get_args, get_origin

from typedparts.discovery.types import PropertyMember
from typedparts.errors import TypeResolutionError

__all__ = [
    "assignable_types",
    "base_type_chain",
    "generic_parameters",
    "implemented_interfaces",
    "is_assignable",
    "is_generic_definition",
    "property_type",
]

_MARKER_ORIGINS = (Generic, Protocol)


def generic_parameters(tp: Any) -> tuple[Any, ...]:
    """The unbound type parameters of a class, in declaration order."""
    if not inspect.isclass(tp):
        return ()
    return tuple(getattr(tp, "__parameters__", ()))


def is_generic_definition(tp: Any) -> bool:
    """True for a generic class that has not been parameterized, e.g. ``Box``."""
    return bool(generic_parameters(tp))


def _split(tp: Any) -> tuple[Any, tuple[Any, ...]]:
    """Return (class, arguments) for a class or a parameterized alias."""
    origin = get_origin(tp)
    if origin is None:
        return tp, generic_parameters(tp)
    return origin, get_args(tp)


def _substitute(alias: Any, mapping: dict[Any, Any]) -> Any:
    params = getattr(alias, "__parameters__", ())
    if not params or not mapping:
        return alias
    return alias[tuple(mapping.get(p, p) for p in params)]


def implemented_interfaces(tp: Any) -> Iterator[Any]:
    """Yield every parameterized generic base reachable from ``tp``, once each."""
    seen: set[Any] = set()

    def _walk(current: Any) -> Iterator[Any]:
        cls, args = _split(current)
        if not inspect.isclass(cls):
            return
        mapping = dict(zip(generic_parameters(cls), args))
        for base in vars(cls).get("__orig_bases__", cls.__bases__):
            base_origin = get_origin(base)
            if base_origin in _MARKER_ORIGINS:
                continue
            if base_origin is None:
                yield from _walk(base)
                continue
            bound = _substitute(base, mapping)
            if bound in seen:
                continue
            seen.add(bound)
            yield bound
            yield from _walk(bound)

    yield from _walk(tp)


def base_type_chain(tp: Any) -> Iterator[Any]:
    """Yield ``tp`` itself, then each base class up to ``object``."""
    cls, _ = _split(tp)
    yield tp
    if inspect.isclass(cls):
        yield from cls.__mro__[1:]


def assignable_types(tp: Any) -> Iterator[Any]:
    """Interfaces first, then the base chain."""
    yield from implemented_interfaces(tp)
    yield from base_type_chain(tp)


def _is_subclass(source_cls: type, contract_cls: type) -> bool:
    try:
        return issubclass(source_cls, contract_cls)
    except TypeError:
        # Protocols that are not runtime checkable refuse issubclass().
        return contract_cls in source_cls.__mro__


def _is_builtin_generic_match(contract: Any, source: Any) -> bool:
    """``list[str]`` against ``Sequence[str]``: same arguments, related origins.

    Only for origins that carry no ``__orig_bases__`` (builtins and
    ``collections.abc``), whose bases cannot be walked for their arguments.
    """
    source_cls, source_args = _split(source)
    contract_cls, contract_args = _split(contract)
    if not inspect.isclass(source_cls) or not inspect.isclass(contract_cls):
        return False
    if "__orig_bases__" in vars(source_cls) or not source_args:
        return False
    return source_args == contract_args and _is_subclass(source_cls, contract_cls)


def is_assignable(contract: Any, source: Any) -> bool:
    """Whether a value of type ``source`` may be supplied for ``contract``.

    An open generic definition only accepts itself: a closed type such as
    ``class StrBox(Container[str])`` is not assignable to ``Container``.
    """
    if contract is object or contract is typing.Any:
        return True
    if contract == source:
        return True
    if is_generic_definition(contract):
        return False
    if get_origin(contract) is not None:
        if any(candidate == contract for candidate in assignable_types(source)):
            return True
        return _is_builtin_generic_match(contract, source)

    source_cls, _ = _split(source)
    if not inspect.isclass(contract) or not inspect.isclass(source_cls):
        return False
    return _is_subclass(source_cls, contract)


def property_type(member: PropertyMember) -> Any:
    """The annotated return type of a property getter; ``object`` if unannotated."""
    getter = member.descriptor.fget
    try:
        hints = typing.get_type_hints(getter)
    except NameError as exc:
        raise TypeResolutionError(
            reference=f"{member.declaring_type.__qualname__}.{member.name}",
            reason=f"unresolvable return annotation ({exc})",
        ) from exc
    annotation = hints.get("return", object)
    if annotation is typing.Any:
        return object
    return annotation
