"""Error hierarchy for the typedparts library."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

__all__ = [
    "TypedPartsError",
    "ConfigNotFoundError",
    "ConfigError",
    "TypeResolutionError",
    "DuplicateAttributeError",
    "CompositionFailedError",
    "ContractNotAssignableError",
    "ExportedContractTypeNotAssignableError",
    "NonGenericContractError",
    "GenericArgumentMismatchError",
    "ExportNotCompatibleError",
    "ErrorCodes",
]


def _name_of(tp: Any) -> str:
    """Short display name for a class, generic alias, or arbitrary object."""
    if isinstance(tp, type):
        return tp.__qualname__
    return repr(tp)


class TypedPartsError(Exception):
    """Base error for all typedparts errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details: dict[str, Any] = details or {}
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc).isoformat()

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ConfigNotFoundError(TypedPartsError):
    """Raised when a configuration or convention file cannot be found."""

    def __init__(self, config_path: str, **kwargs: Any) -> None:
        super().__init__(
            code="CONFIG_NOT_FOUND",
            message=f"Configuration file not found: {config_path}",
            details={"config_path": config_path},
            **kwargs,
        )


class ConfigError(TypedPartsError):
    """Raised when configuration is invalid."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(code="CONFIG_INVALID", message=message, **kwargs)


class TypeResolutionError(TypedPartsError):
    """Raised when a type reference or a type annotation cannot be resolved."""

    def __init__(self, *, reference: str, reason: str, **kwargs: Any) -> None:
        super().__init__(
            code="TYPE_RESOLUTION_ERROR",
            message=f"Cannot resolve '{reference}': {reason}",
            details={"reference": reference, "reason": reason},
            **kwargs,
        )


class DuplicateAttributeError(TypedPartsError):
    """Raised when a single attribute was requested but several are declared."""

    def __init__(self, *, kind: type, member: str, count: int, **kwargs: Any) -> None:
        super().__init__(
            code="DUPLICATE_ATTRIBUTE",
            message=f"Expected at most one {kind.__name__} on '{member}', found {count}",
            details={"kind": kind.__name__, "member": member, "count": count},
            **kwargs,
        )


class CompositionFailedError(TypedPartsError):
    """Base error for structural defects found while discovering a part.

    Every subclass carries the offending ``part`` in its details so that a
    catalog can attribute the failure to the inspected type.
    """

    @property
    def part(self) -> str:
        """Name of the part type being inspected."""
        return self.details["part"]

    @property
    def contract(self) -> str:
        """Name of the contract the export was declared under."""
        return self.details["contract"]


class ContractNotAssignableError(CompositionFailedError):
    """Raised when a part is exported under a contract it is not assignable to."""

    def __init__(self, *, contract: Any, part: Any, **kwargs: Any) -> None:
        contract_name, part_name = _name_of(contract), _name_of(part)
        super().__init__(
            code="CONTRACT_NOT_ASSIGNABLE",
            message=(
                f"Exported contract type '{contract_name}' is not assignable from part '{part_name}'."
            ),
            details={"contract": contract_name, "part": part_name},
            **kwargs,
        )


class ExportedContractTypeNotAssignableError(CompositionFailedError):
    """Raised when a property is exported under a contract its type does not satisfy."""

    def __init__(self, *, contract: Any, member: str, part: Any, **kwargs: Any) -> None:
        contract_name, part_name = _name_of(contract), _name_of(part)
        super().__init__(
            code="EXPORTED_CONTRACT_TYPE_NOT_ASSIGNABLE",
            message=(
                f"Exported contract type '{contract_name}' is not assignable from "
                f"property '{member}' of part '{part_name}'."
            ),
            details={"contract": contract_name, "member": member, "part": part_name},
            **kwargs,
        )

    @property
    def member(self) -> str:
        """Name of the exporting property."""
        return self.details["member"]


class NonGenericContractError(CompositionFailedError):
    """Raised when an open generic part exports a closed or non-generic contract."""

    def __init__(self, *, contract: Any, part: Any, **kwargs: Any) -> None:
        contract_name, part_name = _name_of(contract), _name_of(part)
        super().__init__(
            code="NON_GENERIC_CONTRACT_FROM_GENERIC_PART",
            message=(
                f"Open generic part '{part_name}' cannot export non-generic contract '{contract_name}'."
            ),
            details={"contract": contract_name, "part": part_name},
            **kwargs,
        )


class GenericArgumentMismatchError(CompositionFailedError):
    """Raised when a generic contract is matched with rebound or reordered parameters."""

    def __init__(self, *, contract: Any, part: Any, **kwargs: Any) -> None:
        contract_name, part_name = _name_of(contract), _name_of(part)
        super().__init__(
            code="GENERIC_ARGUMENT_MISMATCH",
            message=(
                f"Exported contract '{contract_name}' must be parameterized with the type "
                f"parameters of part '{part_name}' in declaration order."
            ),
            details={"contract": contract_name, "part": part_name},
            **kwargs,
        )


class ExportNotCompatibleError(CompositionFailedError):
    """Raised when no base or interface of the exporting member matches a generic contract."""

    def __init__(self, *, contract: Any, member: Any, part: Any, **kwargs: Any) -> None:
        contract_name, member_name, part_name = _name_of(contract), _name_of(member), _name_of(part)
        super().__init__(
            code="EXPORT_NOT_COMPATIBLE",
            message=(
                f"Exported type '{member_name}' on part '{part_name}' is not compatible "
                f"with contract '{contract_name}'."
            ),
            details={"contract": contract_name, "member": member_name, "part": part_name},
            **kwargs,
        )

    @property
    def member(self) -> str:
        """Name of the exporting member type."""
        return self.details["member"]


class ErrorCodes:
    """All typedparts error codes as constants.

    Example:
        if error.code == ErrorCodes.GENERIC_ARGUMENT_MISMATCH:
            report_rebound_parameters(error.part)
    """

    CONFIG_NOT_FOUND = "CONFIG_NOT_FOUND"
    CONFIG_INVALID = "CONFIG_INVALID"
    TYPE_RESOLUTION_ERROR = "TYPE_RESOLUTION_ERROR"
    DUPLICATE_ATTRIBUTE = "DUPLICATE_ATTRIBUTE"
    CONTRACT_NOT_ASSIGNABLE = "CONTRACT_NOT_ASSIGNABLE"
    EXPORTED_CONTRACT_TYPE_NOT_ASSIGNABLE = "EXPORTED_CONTRACT_TYPE_NOT_ASSIGNABLE"
    NON_GENERIC_CONTRACT_FROM_GENERIC_PART = "NON_GENERIC_CONTRACT_FROM_GENERIC_PART"
    GENERIC_ARGUMENT_MISMATCH = "GENERIC_ARGUMENT_MISMATCH"
    EXPORT_NOT_COMPATIBLE = "EXPORT_NOT_COMPATIBLE"

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("ErrorCodes is immutable")
