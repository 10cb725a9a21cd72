"""Compatibility checks between an exporting member and its declared contract."""

from __future__ import annotations

import logging
from typing import Any, get_args, get_origin

from typedparts.discovery.relations import (
    assignable_types,
    generic_parameters,
    is_assignable,
    is_generic_definition,
)
from typedparts.discovery.types import PropertyMember
from typedparts.errors import (
    ContractNotAssignableError,
    ExportedContractTypeNotAssignableError,
    ExportNotCompatibleError,
    GenericArgumentMismatchError,
    NonGenericContractError,
)

logger = logging.getLogger(__name__)

__all__ = [
    "check_generic_contract_compatibility",
    "check_instance_export_compatibility",
    "check_property_export_compatibility",
]


def check_instance_export_compatibility(part_type: type, contract_type: Any) -> None:
    """Validate that ``part_type`` itself may be exported as ``contract_type``.

    Raises:
        ContractNotAssignableError: If a non-generic part is not assignable to the contract.
        NonGenericContractError, GenericArgumentMismatchError, ExportNotCompatibleError:
            See :func:`check_generic_contract_compatibility`.
    """
    if is_generic_definition(part_type):
        check_generic_contract_compatibility(part_type, part_type, contract_type)
    elif not is_assignable(contract_type, part_type):
        raise ContractNotAssignableError(contract=contract_type, part=part_type)


def check_property_export_compatibility(
    part_type: type,
    member: PropertyMember,
    member_type: Any,
    contract_type: Any,
) -> None:
    """Validate that a property of type ``member_type`` may be exported as ``contract_type``."""
    if is_generic_definition(part_type):
        check_generic_contract_compatibility(part_type, member_type, contract_type)
    elif not is_assignable(contract_type, member_type):
        raise ExportedContractTypeNotAssignableError(
            contract=contract_type,
            member=member.name,
            part=part_type,
        )


def check_generic_contract_compatibility(
    part_type: type,
    exporting_member_type: Any,
    contract_type: Any,
) -> None:
    """Validate an export from an open generic part.

    The contract must itself be an open generic definition, and the first
    interface or base of the exporting member that is (or parameterizes) the
    contract must be bound to exactly the part's own type parameters, in
    declaration order. Rebinding, reordering, or partially closing those
    parameters is rejected.

    Raises:
        NonGenericContractError: If the contract is not an open generic definition.
        GenericArgumentMismatchError: If the matching type binds other arguments.
        ExportNotCompatibleError: If no interface or base matches the contract.
    """
    if not is_generic_definition(contract_type):
        raise NonGenericContractError(contract=contract_type, part=part_type)

    part_parameters = generic_parameters(part_type)
    for candidate in assignable_types(exporting_member_type):
        if candidate == contract_type or get_origin(candidate) is contract_type:
            if not (candidate == part_type or get_args(candidate) == part_parameters):
                raise GenericArgumentMismatchError(contract=contract_type, part=part_type)
            logger.debug("Generic contract %r matched on %r", contract_type, candidate)
            return

    raise ExportNotCompatibleError(
        contract=contract_type,
        member=exporting_member_type,
        part=part_type,
    )
