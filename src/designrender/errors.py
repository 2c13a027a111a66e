"""
Exceptions raised by the composition compiler.

Contract violations (malformed input the upstream adapter should never
produce) are raised immediately and carry the id of the offending node.
Degradations, such as approximated gradient kinds, are logged and never
raised.
"""

from __future__ import annotations

from typing import Optional


class DesignRenderError(Exception):
    """Base class for all compiler errors."""


class ContractViolation(DesignRenderError, ValueError):
    """Raised when a Composition breaks an input contract.

    Attributes:
        node_id: Id of the node that violated the contract, when known.
    """

    def __init__(self, message: str, *, node_id: Optional[str] = None) -> None:
        self.node_id = node_id
        if node_id is not None:
            message = f"{message} (node {node_id})"
        super().__init__(message)


class MissingOriginError(ContractViolation):
    """Raised when the Composition carries no absolute origin."""


class MissingTransformError(ContractViolation):
    """Raised when a node reaches layout without an absolute transform."""


class SingularTransformError(ContractViolation):
    """Raised when a parent transform cannot be inverted."""


class MissingRenderBoundsError(ContractViolation):
    """Raised when render bounds are required but absent."""


class InvisibleNodeError(ContractViolation):
    """Raised when an invisible node reaches node compilation.

    Visibility filtering happens while grouping render items, so this
    always indicates a caller bypassing that step.
    """


class InvalidDimensionError(ContractViolation):
    """Raised when a numeric size is required but the value is symbolic or absent."""


class EmptyCompositionError(ContractViolation):
    """Raised when a document is requested for a Composition with nothing visible."""


__all__ = [
    "DesignRenderError",
    "ContractViolation",
    "MissingOriginError",
    "MissingTransformError",
    "SingularTransformError",
    "MissingRenderBoundsError",
    "InvisibleNodeError",
    "InvalidDimensionError",
    "EmptyCompositionError",
]
