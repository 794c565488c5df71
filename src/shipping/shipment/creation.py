"""Shipment creation: command, handler, and the create-then-anchor flow."""

import json

from protean import handle
from protean.exceptions import TransactionError, ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain
from sqlalchemy.exc import IntegrityError

from shipping.domain import shipping
from shipping.errors import DuplicateTrackingNumberError
from shipping.shipment.anchoring import AnchorShipment
from shipping.shipment.shipment import Shipment
from shipping.utils.logging import get_logger

logger = get_logger(__name__)


@shipping.command(part_of="Shipment")
class CreateShipment:
    """Register a new shipment."""

    tracking_number = String(required=True, max_length=100)
    origin = String(required=True, max_length=255)
    destination = String(required=True, max_length=255)
    enterprise_id = Identifier(required=True)
    logistics_id = Identifier(required=True)
    status = String(max_length=50)
    milestones = Text()  # JSON list of {name, timestamp, description?, user_id?, wallet_address?}
    off_chain_metadata = Text()  # JSON object


@shipping.command_handler(part_of=Shipment)
class CreateShipmentHandler:
    @handle(CreateShipment)
    def create_shipment(self, command):
        shipment = Shipment.create(
            tracking_number=command.tracking_number,
            origin=command.origin,
            destination=command.destination,
            enterprise_id=command.enterprise_id,
            logistics_id=command.logistics_id,
            status=command.status,
            milestones=json.loads(command.milestones) if command.milestones else None,
            off_chain_metadata=json.loads(command.off_chain_metadata) if command.off_chain_metadata else None,
        )
        try:
            current_domain.repository_for(Shipment).add(shipment)
        except ValidationError as exc:
            # Only the unique check can fail on tracking_number at this point
            if "tracking_number" in exc.messages:
                raise DuplicateTrackingNumberError(command.tracking_number) from exc
            raise
        logger.info(
            "shipment_created",
            shipment_id=str(shipment.id),
            tracking_number=shipment.tracking_number,
            status=shipment.status,
        )
        return str(shipment.id)


def register_shipment(
    tracking_number: str,
    origin: str,
    destination: str,
    enterprise_id: str,
    logistics_id: str,
    status: str | None = None,
    milestones: list[dict] | None = None,
    off_chain_metadata: dict | None = None,
) -> str:
    """Create a shipment, then try to anchor it on the ledger.

    Creation and anchoring run as two separate units of work. Once the
    shipment is persisted the call succeeds whatever happens to anchoring;
    an unanchored shipment simply carries no anchor.
    """
    try:
        shipment_id = current_domain.process(
            CreateShipment(
                tracking_number=tracking_number,
                origin=origin,
                destination=destination,
                enterprise_id=enterprise_id,
                logistics_id=logistics_id,
                status=status,
                milestones=json.dumps(milestones, default=str) if milestones else None,
                off_chain_metadata=json.dumps(off_chain_metadata) if off_chain_metadata is not None else None,
            ),
            asynchronous=False,
        )
    except TransactionError as exc:
        # A concurrent create won the race past the unique check
        if isinstance(exc.__cause__, IntegrityError):
            raise DuplicateTrackingNumberError(tracking_number) from exc
        raise

    try:
        current_domain.process(AnchorShipment(shipment_id=shipment_id), asynchronous=False)
    except Exception:
        logger.exception("shipment_anchor_aborted", shipment_id=shipment_id)

    return shipment_id
