"""Shipment queries: single fetch and filtered, paginated listing."""

from dataclasses import dataclass

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from shipping.shipment.shipment import Shipment, parse_status

DEFAULT_PAGE_LIMIT = 10
MAX_PAGE_LIMIT = 100


@dataclass(frozen=True)
class ShipmentFilter:
    """Listing filter. ``status`` is the only recognized criterion."""

    status: str | None = None

    def criteria(self) -> dict:
        if self.status is None:
            return {}
        return {"status": parse_status(self.status).value}


@dataclass
class ShipmentPage:
    data: list
    page: int
    limit: int
    total: int


def get_shipment(shipment_id: str) -> Shipment:
    return current_domain.repository_for(Shipment).get(shipment_id)


def list_shipments(
    shipment_filter: ShipmentFilter | None = None,
    page: int = 1,
    limit: int = DEFAULT_PAGE_LIMIT,
) -> ShipmentPage:
    """Return one page of shipments, oldest first.

    ``page`` is 1-indexed; ``total`` counts every match, not just this page.
    """
    if page < 1:
        raise ValidationError({"page": ["Page must be 1 or greater"]})
    if not 1 <= limit <= MAX_PAGE_LIMIT:
        raise ValidationError({"limit": [f"Limit must be between 1 and {MAX_PAGE_LIMIT}"]})

    criteria = (shipment_filter or ShipmentFilter()).criteria()
    query = current_domain.repository_for(Shipment)._dao.query
    if criteria:
        query = query.filter(**criteria)

    results = query.order_by("created_at").offset((page - 1) * limit).limit(limit).all()
    return ShipmentPage(data=results.items, page=page, limit=limit, total=results.total)
