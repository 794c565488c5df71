"""Off-chain metadata: command and handler."""

import json

from protean import handle
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from shipping.domain import shipping
from shipping.shipment.shipment import Shipment


@shipping.command(part_of="Shipment")
class UpdateShipmentMetadata:
    """Replace a shipment's off-chain metadata."""

    shipment_id = Identifier(required=True)
    off_chain_metadata = Text(required=True)  # JSON object


@shipping.command_handler(part_of=Shipment)
class UpdateShipmentMetadataHandler:
    @handle(UpdateShipmentMetadata)
    def update_metadata(self, command):
        repo = current_domain.repository_for(Shipment)
        shipment = repo.get(command.shipment_id)
        shipment.update_metadata(json.loads(command.off_chain_metadata))
        repo.add(shipment)
