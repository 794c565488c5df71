"""Shipment aggregate: lifecycle state machine and milestone audit log.

State Machine:
    CREATED, IN_TRANSIT, DELIVERED, CANCELLED
    Any status may move to any other, DELIVERED and CANCELLED included.
    Moving to the current status is a no-op and leaves no milestone behind.

Every effective transition appends one Milestone crediting the actor that
caused it. Milestones are never edited or removed once appended.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Dict,
    HasMany,
    Identifier,
    Integer,
    String,
    ValueObject,
)

from shipping.domain import shipping
from shipping.shipment.events import (
    DeliveryProofAttached,
    ShipmentAnchored,
    ShipmentCreated,
    ShipmentMetadataUpdated,
    ShipmentStatusChanged,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class ShipmentStatus(Enum):
    CREATED = "CREATED"
    IN_TRANSIT = "IN_TRANSIT"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


# Fully connected. Restricting a move means removing it from its source set.
_ALLOWED_TRANSITIONS = {status: set(ShipmentStatus) for status in ShipmentStatus}


def parse_status(value) -> ShipmentStatus:
    """Convert a raw status label into a ShipmentStatus."""
    if isinstance(value, ShipmentStatus):
        return value
    try:
        return ShipmentStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in ShipmentStatus)
        raise ValidationError({"status": [f"Invalid status '{value}'. Expected one of: {allowed}"]}) from None


def _as_datetime(value):
    if isinstance(value, str):
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    return value


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@shipping.value_object(part_of="Shipment")
class LedgerAnchor:
    """Proof that the shipment was written to the public ledger."""

    anchor_id = String(max_length=255)
    anchor_tx_ref = String(max_length=255)
    anchored_at = DateTime()


@shipping.value_object(part_of="Shipment")
class DeliveryProof:
    reference = String(max_length=1000)
    recipient_signature_name = String(max_length=255)
    uploaded_at = DateTime()


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@shipping.entity(part_of="Shipment")
class Milestone:
    """One entry of the audit trail: which status was entered, when, and by whom."""

    sequence = Integer(required=True, min_value=1)
    name = String(required=True, max_length=50, choices=ShipmentStatus)
    timestamp = DateTime(required=True)
    description = String(max_length=500)
    user_id = Identifier()
    wallet_address = String(max_length=255)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@shipping.aggregate
class Shipment:
    tracking_number = String(required=True, max_length=100, unique=True)
    origin = String(required=True, max_length=255)
    destination = String(required=True, max_length=255)
    enterprise_id = Identifier(required=True)
    logistics_id = Identifier(required=True)
    status = String(
        max_length=50,
        choices=ShipmentStatus,
        default=ShipmentStatus.CREATED.value,
    )
    milestones = HasMany(Milestone)
    off_chain_metadata = Dict()
    anchor = ValueObject(LedgerAnchor)
    delivery_proof = ValueObject(DeliveryProof)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        tracking_number: str,
        origin: str,
        destination: str,
        enterprise_id: str,
        logistics_id: str,
        status: str | None = None,
        milestones: list[dict] | None = None,
        off_chain_metadata: dict | None = None,
    ):
        """Create a new shipment, optionally seeded with a status and milestone history."""
        initial_status = parse_status(status) if status else ShipmentStatus.CREATED
        now = datetime.now(UTC)
        shipment = cls(
            tracking_number=tracking_number,
            origin=origin,
            destination=destination,
            enterprise_id=enterprise_id,
            logistics_id=logistics_id,
            status=initial_status.value,
            off_chain_metadata=off_chain_metadata or {},
            created_at=now,
            updated_at=now,
        )

        for seed in milestones or []:
            shipment._append_milestone(
                name=parse_status(seed.get("name")),
                timestamp=_as_datetime(seed.get("timestamp")) or now,
                description=seed.get("description"),
                user_id=seed.get("user_id"),
                wallet_address=seed.get("wallet_address"),
            )

        shipment.raise_(
            ShipmentCreated(
                shipment_id=str(shipment.id),
                tracking_number=tracking_number,
                origin=origin,
                destination=destination,
                enterprise_id=enterprise_id,
                logistics_id=logistics_id,
                status=initial_status.value,
                milestone_count=len(shipment.milestones),
                created_at=now,
            )
        )
        return shipment

    # -------------------------------------------------------------------
    # Milestones
    # -------------------------------------------------------------------
    @property
    def timeline(self) -> list[Milestone]:
        """Milestones in the order they were appended."""
        return sorted(self.milestones, key=lambda m: m.sequence)

    def _append_milestone(
        self,
        name: ShipmentStatus,
        timestamp: datetime,
        description: str | None = None,
        user_id: str | None = None,
        wallet_address: str | None = None,
    ) -> Milestone:
        milestone = Milestone(
            sequence=len(self.milestones) + 1,
            name=name.value,
            timestamp=timestamp,
            description=description,
            user_id=user_id,
            wallet_address=wallet_address,
        )
        self.add_milestones(milestone)
        return milestone

    # -------------------------------------------------------------------
    # Status
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status: ShipmentStatus) -> None:
        current = ShipmentStatus(self.status)
        if target_status not in _ALLOWED_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def change_status(self, target_status, actor=None) -> bool:
        """Move to ``target_status`` and credit ``actor`` in a new milestone.

        Returns False, without touching the shipment, when it is already in
        the target status.
        """
        target = parse_status(target_status)
        current = ShipmentStatus(self.status)
        if target == current:
            return False

        self._assert_can_transition(target)
        now = datetime.now(UTC)
        user_id = actor.user_id if actor else None
        wallet_address = actor.wallet_address if actor else None

        milestone = self._append_milestone(
            name=target,
            timestamp=now,
            description=f"Status changed to {target.value}",
            user_id=user_id,
            wallet_address=wallet_address,
        )
        self.status = target.value
        self.updated_at = now
        self.raise_(
            ShipmentStatusChanged(
                shipment_id=str(self.id),
                previous_status=current.value,
                new_status=target.value,
                sequence=milestone.sequence,
                user_id=user_id,
                wallet_address=wallet_address,
                changed_at=now,
            )
        )
        return True

    # -------------------------------------------------------------------
    # Metadata
    # -------------------------------------------------------------------
    def update_metadata(self, off_chain_metadata: dict) -> None:
        """Replace the off-chain metadata. Status and milestones are untouched."""
        if not isinstance(off_chain_metadata, dict):
            raise ValidationError({"off_chain_metadata": ["Metadata must be a JSON object"]})

        now = datetime.now(UTC)
        self.off_chain_metadata = off_chain_metadata
        self.updated_at = now
        self.raise_(
            ShipmentMetadataUpdated(
                shipment_id=str(self.id),
                off_chain_metadata=json.dumps(off_chain_metadata),
                updated_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Ledger anchor
    # -------------------------------------------------------------------
    @property
    def is_anchored(self) -> bool:
        return self.anchor is not None and bool(self.anchor.anchor_id)

    def record_anchor(self, anchor_id: str, anchor_tx_ref: str) -> None:
        if self.is_anchored:
            raise ValidationError({"anchor": ["Shipment is already anchored"]})

        now = datetime.now(UTC)
        self.anchor = LedgerAnchor(anchor_id=anchor_id, anchor_tx_ref=anchor_tx_ref, anchored_at=now)
        self.updated_at = now
        self.raise_(
            ShipmentAnchored(
                shipment_id=str(self.id),
                anchor_id=anchor_id,
                anchor_tx_ref=anchor_tx_ref,
                anchored_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Delivery proof
    # -------------------------------------------------------------------
    def attach_delivery_proof(self, reference: str, recipient_signature_name: str | None = None) -> None:
        """Record where the proof of delivery is stored. A later proof replaces an earlier one."""
        if not reference:
            raise ValidationError({"reference": ["Proof reference is required"]})

        now = datetime.now(UTC)
        self.delivery_proof = DeliveryProof(
            reference=reference,
            recipient_signature_name=recipient_signature_name,
            uploaded_at=now,
        )
        self.updated_at = now
        self.raise_(
            DeliveryProofAttached(
                shipment_id=str(self.id),
                reference=reference,
                recipient_signature_name=recipient_signature_name,
                uploaded_at=now,
            )
        )
