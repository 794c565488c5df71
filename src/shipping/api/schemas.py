"""Pydantic API schemas for the Shipping domain.

These are the external API contracts: separate from domain commands.
Field names follow the JSON the tracking clients already consume.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------
class SeedMilestoneRequest(BaseModel):
    name: str
    timestamp: datetime | None = None
    description: str | None = None
    user_id: str | None = None
    wallet_address: str | None = None


class CreateShipmentRequest(BaseModel):
    tracking_number: str = Field(min_length=1, max_length=100)
    origin: str = Field(min_length=1)
    destination: str = Field(min_length=1)
    enterprise_id: str
    logistics_id: str
    status: str | None = None
    milestones: list[SeedMilestoneRequest] | None = None
    off_chain_metadata: dict[str, Any] | None = None


class UpdateMetadataRequest(BaseModel):
    off_chain_metadata: dict[str, Any]


class ChangeStatusRequest(BaseModel):
    status: str


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------
class MilestoneResponse(BaseModel):
    sequence: int
    name: str
    timestamp: datetime
    description: str | None = None
    user_id: str | None = None
    wallet_address: str | None = None


class AnchorResponse(BaseModel):
    anchor_id: str
    anchor_tx_ref: str
    anchored_at: datetime | None = None


class DeliveryProofResponse(BaseModel):
    reference: str
    recipient_signature_name: str | None = None
    uploaded_at: datetime | None = None


class ShipmentResponse(BaseModel):
    id: str
    tracking_number: str
    origin: str
    destination: str
    enterprise_id: str
    logistics_id: str
    status: str
    milestones: list[MilestoneResponse]
    off_chain_metadata: dict[str, Any]
    anchor: AnchorResponse | None = None
    delivery_proof: DeliveryProofResponse | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_aggregate(cls, shipment) -> "ShipmentResponse":
        anchor = None
        if shipment.is_anchored:
            anchor = AnchorResponse(
                anchor_id=shipment.anchor.anchor_id,
                anchor_tx_ref=shipment.anchor.anchor_tx_ref,
                anchored_at=shipment.anchor.anchored_at,
            )
        proof = None
        if shipment.delivery_proof is not None and shipment.delivery_proof.reference:
            proof = DeliveryProofResponse(
                reference=shipment.delivery_proof.reference,
                recipient_signature_name=shipment.delivery_proof.recipient_signature_name,
                uploaded_at=shipment.delivery_proof.uploaded_at,
            )

        return cls(
            id=str(shipment.id),
            tracking_number=shipment.tracking_number,
            origin=shipment.origin,
            destination=shipment.destination,
            enterprise_id=str(shipment.enterprise_id),
            logistics_id=str(shipment.logistics_id),
            status=shipment.status,
            milestones=[
                MilestoneResponse(
                    sequence=m.sequence,
                    name=m.name,
                    timestamp=m.timestamp,
                    description=m.description,
                    user_id=str(m.user_id) if m.user_id else None,
                    wallet_address=m.wallet_address,
                )
                for m in shipment.timeline
            ],
            off_chain_metadata=shipment.off_chain_metadata or {},
            anchor=anchor,
            delivery_proof=proof,
            created_at=shipment.created_at,
            updated_at=shipment.updated_at,
        )


class ShipmentListResponse(BaseModel):
    data: list[ShipmentResponse]
    page: int
    limit: int
    total: int


class ProofUploadResponse(BaseModel):
    shipment: ShipmentResponse
