"""Shipping errors that have no Protean counterpart.

Validation problems are raised as ``protean.exceptions.ValidationError`` and
unknown identifiers surface as ``protean.exceptions.ObjectNotFoundError``;
only the conflict kind needs its own type.
"""


class DuplicateTrackingNumberError(Exception):
    """A shipment with this tracking number already exists."""

    code = "CONFLICT"

    def __init__(self, tracking_number: str) -> None:
        self.tracking_number = tracking_number
        super().__init__(f"Shipment with tracking number '{tracking_number}' already exists")
