# partsdesk/utils/errors.py
from typing import List, Optional


class PartsdeskError(Exception):
    """Base class for domain errors surfaced to the caller."""


class NotFoundError(PartsdeskError):
    """A referenced entity is missing, or inactive where activity is required."""

    def __init__(self, entity: str, entity_id, detail: Optional[str] = None):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(detail or f"{entity} with ID {entity_id} not found")


class PreconditionFailedError(PartsdeskError):
    """The operation is not allowed from the entity's current state."""


class StockLimitExceeded(PreconditionFailedError):
    def __init__(self, violations: List):
        self.violations = violations
        ids = ", ".join(str(v.product_id) for v in violations)
        super().__init__(f"Monthly stock limit exceeded for product(s): {ids}")
