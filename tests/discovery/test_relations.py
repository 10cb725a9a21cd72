"""Tests for the type-relationship walk and assignability."""

from __future__ import annotations

import typing
from collections.abc import Hashable, Mapping, Sequence, Sized
from typing import Generic, Protocol, TypeVar

import pytest

import part_helpers as h
from typedparts.discovery.relations import (
    assignable_types,
    base_type_chain,
    generic_parameters,
    implemented_interfaces,
    is_assignable,
    is_generic_definition,
    property_type,
)
from typedparts.discovery.types import PropertyMember
from typedparts.errors import TypeResolutionError

A = TypeVar("A")
B = TypeVar("B")


class Named(Protocol):
    name: str


class HasName:
    name = "x"


class NamedImpl(Named):
    pass


class Diamond(h.Container[A], h.Pairing[A, B]):
    pass


class Twice(h.Middle[A], h.Container[A]):
    pass


class TestGenericDefinition:
    def test_open_generic_class(self) -> None:
        assert is_generic_definition(h.Container)
        assert generic_parameters(h.Pairing) == (h.K, h.V)

    def test_parameters_in_declaration_order(self) -> None:
        """Generic[K, V] fixes the order even when bases use another order."""
        assert generic_parameters(h.SwappedPair) == (h.K, h.V)

    @pytest.mark.parametrize("tp", [h.Container[str], h.StringBox, int, list, list[int], "Container"])
    def test_not_generic_definitions(self, tp: object) -> None:
        assert not is_generic_definition(tp)


class TestImplementedInterfaces:
    def test_direct_generic_base(self) -> None:
        assert list(implemented_interfaces(h.Box)) == [h.Container[h.T]]

    def test_substitutes_through_intermediate_base(self) -> None:
        """Middle[K] -> Container[K] seen from DeepBox[T] is Container[T]."""
        assert list(implemented_interfaces(h.DeepBox)) == [h.Middle[h.T], h.Container[h.T]]

    def test_parameterized_alias_substitutes_arguments(self) -> None:
        assert list(implemented_interfaces(h.Middle[int])) == [h.Container[int]]

    def test_each_interface_once(self) -> None:
        """Container[A] reachable twice is yielded once."""
        interfaces = list(implemented_interfaces(Twice))
        assert interfaces.count(h.Container[A]) == 1

    def test_multiple_generic_bases(self) -> None:
        assert list(implemented_interfaces(Diamond)) == [h.Container[A], h.Pairing[A, B]]

    def test_plain_class_has_none(self) -> None:
        assert list(implemented_interfaces(h.Greeter)) == []


class TestBaseTypeChain:
    def test_class_chain_ends_at_object(self) -> None:
        chain = list(base_type_chain(h.Greeter))
        assert chain[0] is h.Greeter
        assert chain[-1] is object
        assert h.GreeterContract in chain

    def test_alias_chain_starts_with_alias(self) -> None:
        chain = list(base_type_chain(h.Container[int]))
        assert chain[0] == h.Container[int]
        assert Generic in chain

    def test_interfaces_before_bases(self) -> None:
        walk = list(assignable_types(h.Box))
        assert walk.index(h.Container[h.T]) < walk.index(h.Box)


class TestIsAssignable:
    def test_object_and_any_accept_everything(self) -> None:
        assert is_assignable(object, h.Greeter)
        assert is_assignable(typing.Any, int)

    def test_subclass(self) -> None:
        assert is_assignable(h.GreeterContract, h.Greeter)
        assert not is_assignable(h.Greeter, h.GreeterContract)

    def test_abc_virtual_subclass(self) -> None:
        """str is registered with collections.abc ABCs."""
        assert is_assignable(Hashable, str)
        assert is_assignable(Sequence, str)
        assert not is_assignable(Sized, int)

    def test_parameterized_contract(self) -> None:
        assert is_assignable(h.Container[str], h.StringBox)
        assert not is_assignable(h.Container[int], h.StringBox)

    def test_alias_source_uses_origin(self) -> None:
        assert is_assignable(Sequence, list[int])

    def test_open_definition_rejects_closed_types(self) -> None:
        """Only the open definition itself satisfies an open generic contract."""
        assert is_assignable(h.Container, h.Container)
        assert not is_assignable(h.Container, h.StringBox)
        assert not is_assignable(h.Container, h.Container[str])

    def test_builtin_generic_against_abc(self) -> None:
        assert is_assignable(Sequence[str], list[str])
        assert is_assignable(Mapping[str, int], dict[str, int])
        assert not is_assignable(Sequence[int], list[str])
        assert not is_assignable(Sequence[str], list)

    def test_user_generic_arguments_are_not_compared_positionally(self) -> None:
        """SwappedPair[int, str] implements Pairing[str, int], not Pairing[int, str]."""
        assert is_assignable(h.Pairing[str, int], h.SwappedPair[int, str])
        assert not is_assignable(h.Pairing[int, str], h.SwappedPair[int, str])

    def test_non_runtime_protocol_uses_mro(self) -> None:
        """Explicit protocol implementations count; structural matches do not."""
        assert is_assignable(Named, NamedImpl)
        assert not is_assignable(Named, HasName)


class TestPropertyType:
    def test_annotated_return(self) -> None:
        member = PropertyMember("name", vars(h.Settings)["name"], h.Settings)
        assert property_type(member) is str

    def test_unannotated_is_object(self) -> None:
        member = PropertyMember("value", vars(h.UnannotatedProperty)["value"], h.UnannotatedProperty)
        assert property_type(member) is object

    def test_unresolvable_annotation_raises(self) -> None:
        def getter(self) -> "MissingType":  # noqa: F821
            return None

        member = PropertyMember("broken", property(getter), HasName)
        with pytest.raises(TypeResolutionError) as exc_info:
            property_type(member)
        assert exc_info.value.details["reference"] == "HasName.broken"
