"""Attribute types and the decorators that attach them to parts and properties.

Attributes are plain objects stored on the decorated class (type-level) or
on a property getter function (member-level). Decorators are applied
bottom-up, so each one prepends its attribute: the stored order is the
top-to-bottom order in which attributes are written in source.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, TypeVar

__all__ = [
    "ExportAttribute",
    "ExportMetadataAttribute",
    "PartNotDiscoverableAttribute",
    "annotate",
    "declared_attributes",
    "export",
    "export_metadata",
    "is_metadata_attribute",
    "metadata_attribute",
    "part_not_discoverable",
]

_ATTRIBUTES_KEY = "__typedparts_attributes__"
_METADATA_ATTRIBUTE_FLAG = "__typedparts_metadata_attribute__"

_T = TypeVar("_T")


@dataclass(frozen=True)
class ExportAttribute:
    """Declares that a part, or one of its properties, is exported.

    Attributes:
        contract_type: Contract to export under. Defaults to the part type
            (type-level) or the property's annotated return type.
        contract_name: Optional discriminator for the contract.
    """

    contract_type: Any = None
    contract_name: str | None = None


@dataclass(frozen=True)
class ExportMetadataAttribute:
    """A single explicit metadata name/value pair for the exports of a member."""

    name: str
    value: Any


@dataclass(frozen=True)
class PartNotDiscoverableAttribute:
    """Marks a class as never being a part, whatever exports it declares."""


def metadata_attribute(cls: type[_T]) -> type[_T]:
    """Tag an attribute class so that its declared fields become export metadata.

    The tag is inherited by subclasses.
    """
    setattr(cls, _METADATA_ATTRIBUTE_FLAG, True)
    return cls


def is_metadata_attribute(attribute_type: type) -> bool:
    return bool(getattr(attribute_type, _METADATA_ATTRIBUTE_FLAG, False))


def _unwrap(target: Any) -> Any:
    if isinstance(target, property):
        return target.fget
    return target


def annotate(*attributes: Any) -> Callable[[_T], _T]:
    """Attach arbitrary attribute instances to a class or property getter."""

    def decorator(target: _T) -> _T:
        holder = _unwrap(target)
        if holder is None:
            raise TypeError("Cannot annotate a property without a getter")
        declared = vars(holder).get(_ATTRIBUTES_KEY)
        if declared is None:
            declared = []
            setattr(holder, _ATTRIBUTES_KEY, declared)
        declared[0:0] = attributes
        return target

    return decorator


def declared_attributes(target: Any) -> tuple[Any, ...]:
    """Return the attributes declared directly on ``target`` (never inherited ones)."""
    holder = _unwrap(target)
    if holder is None:
        return ()
    try:
        namespace = vars(holder)
    except TypeError:
        return ()
    return tuple(namespace.get(_ATTRIBUTES_KEY, ()))


def export(
    target_or_none: Any = None,
    /,
    *,
    contract_type: Any = None,
    contract_name: str | None = None,
) -> Any:
    """Export a class, or a property getter, as a part capability.

    Works bare (``@export``) and with arguments
    (``@export(contract_type=Greeter, contract_name="formal")``).
    """
    attribute = ExportAttribute(contract_type=contract_type, contract_name=contract_name)
    if target_or_none is not None:
        return annotate(attribute)(target_or_none)
    return annotate(attribute)


def export_metadata(name: str, value: Any) -> Callable[[_T], _T]:
    return annotate(ExportMetadataAttribute(name=name, value=value))


def part_not_discoverable(cls: type[_T]) -> type[_T]:
    return annotate(PartNotDiscoverableAttribute())(cls)
