"""Shipping bounded context: shipment lifecycle, audit trail and delivery evidence.

Tracks shipments through CREATED → IN_TRANSIT → DELIVERED / CANCELLED,
keeps an append-only milestone log of who caused each transition, anchors
each shipment on a public ledger as an advisory proof, and attaches
delivery-proof uploads.
"""

from protean.domain import Domain

from shipping.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

shipping = Domain(name="shipping")
