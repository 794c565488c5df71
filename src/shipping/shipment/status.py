"""Status transitions: command and handler."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from shipping.domain import shipping
from shipping.shipment.actor import resolve_actor
from shipping.shipment.shipment import Shipment, parse_status
from shipping.utils.logging import get_logger

logger = get_logger(__name__)


@shipping.command(part_of="Shipment")
class ChangeShipmentStatus:
    """Move a shipment to a new status, crediting the calling user."""

    shipment_id = Identifier(required=True)
    status = String(required=True, max_length=50)
    user_id = Identifier()


@shipping.command_handler(part_of=Shipment)
class ChangeShipmentStatusHandler:
    @handle(ChangeShipmentStatus)
    def change_status(self, command):
        repo = current_domain.repository_for(Shipment)
        shipment = repo.get(command.shipment_id)
        target = parse_status(command.status)

        actor = resolve_actor(command.user_id)
        if not shipment.change_status(target, actor):
            logger.debug("shipment_status_unchanged", shipment_id=str(shipment.id), status=target.value)
            return False

        repo.add(shipment)
        logger.info(
            "shipment_status_changed",
            shipment_id=str(shipment.id),
            status=target.value,
            user_id=actor.user_id,
        )
        return True
