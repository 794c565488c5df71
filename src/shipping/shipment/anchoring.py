"""Ledger anchoring: best-effort second write after a shipment is created."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from shipping.domain import shipping
from shipping.ledger import get_ledger
from shipping.ledger.port import AnchorOutcome, AnchorReceipt, LedgerError, LedgerPort
from shipping.shipment.shipment import Shipment
from shipping.utils.logging import get_logger

logger = get_logger(__name__)


def attempt_anchor(ledger: LedgerPort, shipment: Shipment) -> AnchorOutcome:
    """Call the ledger and turn its failures into a failed outcome."""
    try:
        anchor = ledger.anchor(
            tracking_number=shipment.tracking_number,
            origin=shipment.origin,
            destination=shipment.destination,
            shipment_id=str(shipment.id),
        )
    except LedgerError as exc:
        return AnchorOutcome.failed(exc.code, str(exc))
    return AnchorOutcome.succeeded(anchor)


@shipping.command(part_of="Shipment")
class AnchorShipment:
    shipment_id = Identifier(required=True)


@shipping.command_handler(part_of=Shipment)
class AnchorShipmentHandler:
    @handle(AnchorShipment)
    def anchor_shipment(self, command):
        repo = current_domain.repository_for(Shipment)
        shipment = repo.get(command.shipment_id)
        if shipment.is_anchored:
            return AnchorOutcome.succeeded(
                AnchorReceipt(anchor_id=shipment.anchor.anchor_id, anchor_tx_ref=shipment.anchor.anchor_tx_ref)
            )

        outcome = attempt_anchor(get_ledger(), shipment)
        if not outcome.anchored:
            logger.warning(
                "shipment_anchor_failed",
                shipment_id=str(shipment.id),
                code=outcome.failure_code,
                reason=outcome.failure_reason,
            )
            return outcome

        shipment.record_anchor(outcome.anchor.anchor_id, outcome.anchor.anchor_tx_ref)
        repo.add(shipment)
        logger.info("shipment_anchored", shipment_id=str(shipment.id), anchor_id=outcome.anchor.anchor_id)
        return outcome
