"""Shipment domain events: immutable facts about shipment state changes."""

from protean.fields import DateTime, Identifier, Integer, String, Text

from shipping.domain import shipping


@shipping.event(part_of="Shipment")
class ShipmentCreated:
    """A shipment was registered."""

    __version__ = "v1"

    shipment_id = Identifier(required=True)
    tracking_number = String(required=True)
    origin = String(required=True)
    destination = String(required=True)
    enterprise_id = Identifier(required=True)
    logistics_id = Identifier(required=True)
    status = String(required=True)
    milestone_count = Integer(required=True)
    created_at = DateTime(required=True)


@shipping.event(part_of="Shipment")
class ShipmentStatusChanged:
    """A shipment moved to a new status and a milestone was appended."""

    __version__ = "v1"

    shipment_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    sequence = Integer(required=True)
    user_id = Identifier()
    wallet_address = String()
    changed_at = DateTime(required=True)


@shipping.event(part_of="Shipment")
class ShipmentMetadataUpdated:
    __version__ = "v1"

    shipment_id = Identifier(required=True)
    off_chain_metadata = Text(required=True)  # JSON object
    updated_at = DateTime(required=True)


@shipping.event(part_of="Shipment")
class ShipmentAnchored:
    """The shipment was anchored on the public ledger."""

    __version__ = "v1"

    shipment_id = Identifier(required=True)
    anchor_id = String(required=True)
    anchor_tx_ref = String(required=True)
    anchored_at = DateTime(required=True)


@shipping.event(part_of="Shipment")
class DeliveryProofAttached:
    __version__ = "v1"

    shipment_id = Identifier(required=True)
    reference = String(required=True)
    recipient_signature_name = String()
    uploaded_at = DateTime(required=True)
