"""FastAPI endpoints for the Shipping domain."""

import json

from fastapi import APIRouter, Depends, Query, Request
from protean.utils.globals import current_domain

from shipping.api.dependencies import Caller, get_caller, require_role
from shipping.api.schemas import (
    ChangeStatusRequest,
    CreateShipmentRequest,
    ProofUploadResponse,
    ShipmentListResponse,
    ShipmentResponse,
    UpdateMetadataRequest,
)
from shipping.shipment.creation import register_shipment
from shipping.shipment.delivery_proof import attach_delivery_proof
from shipping.shipment.listing import DEFAULT_PAGE_LIMIT, ShipmentFilter, get_shipment, list_shipments
from shipping.shipment.metadata import UpdateShipmentMetadata
from shipping.shipment.status import ChangeShipmentStatus
from shipping.uploads.multipart import parse_multipart

shipment_router = APIRouter(prefix="/shipments", tags=["shipments"])


@shipment_router.get("", response_model=ShipmentListResponse)
async def list_all(
    status: str | None = None,
    page: int = Query(default=1),
    limit: int = Query(default=DEFAULT_PAGE_LIMIT),
) -> ShipmentListResponse:
    result = list_shipments(ShipmentFilter(status=status), page=page, limit=limit)
    return ShipmentListResponse(
        data=[ShipmentResponse.from_aggregate(s) for s in result.data],
        page=result.page,
        limit=result.limit,
        total=result.total,
    )


@shipment_router.post("", status_code=201, response_model=ShipmentResponse)
async def create_shipment(
    body: CreateShipmentRequest,
    caller: Caller = Depends(require_role("MANAGER", "ADMIN")),
) -> ShipmentResponse:
    """Register a shipment and anchor it on the ledger when possible."""
    shipment_id = register_shipment(
        tracking_number=body.tracking_number,
        origin=body.origin,
        destination=body.destination,
        enterprise_id=body.enterprise_id,
        logistics_id=body.logistics_id,
        status=body.status,
        milestones=[m.model_dump() for m in body.milestones] if body.milestones else None,
        off_chain_metadata=body.off_chain_metadata,
    )
    return ShipmentResponse.from_aggregate(get_shipment(shipment_id))


@shipment_router.get("/{shipment_id}", response_model=ShipmentResponse)
async def get_one(shipment_id: str) -> ShipmentResponse:
    return ShipmentResponse.from_aggregate(get_shipment(shipment_id))


@shipment_router.patch("/{shipment_id}", response_model=ShipmentResponse)
async def update_metadata(shipment_id: str, body: UpdateMetadataRequest) -> ShipmentResponse:
    command = UpdateShipmentMetadata(
        shipment_id=shipment_id,
        off_chain_metadata=json.dumps(body.off_chain_metadata),
    )
    current_domain.process(command, asynchronous=False)
    return ShipmentResponse.from_aggregate(get_shipment(shipment_id))


@shipment_router.patch("/{shipment_id}/status", response_model=ShipmentResponse)
async def change_status(
    shipment_id: str,
    body: ChangeStatusRequest,
    caller: Caller = Depends(get_caller),
) -> ShipmentResponse:
    """Move the shipment to a new status, crediting the caller in a milestone."""
    command = ChangeShipmentStatus(shipment_id=shipment_id, status=body.status, user_id=caller.user_id)
    current_domain.process(command, asynchronous=False)
    return ShipmentResponse.from_aggregate(get_shipment(shipment_id))


@shipment_router.post("/{shipment_id}/proof", response_model=ProofUploadResponse)
async def upload_proof(shipment_id: str, request: Request) -> ProofUploadResponse:
    """Accept a multipart delivery-proof upload (file + recipient signature name)."""
    form = parse_multipart(request.headers.get("content-type"), await request.body())
    signature_name = form.fields.get("recipient_signature_name") or form.fields.get("recipientSignatureName")

    attach_delivery_proof(shipment_id, form.file, signature_name)
    return ProofUploadResponse(shipment=ShipmentResponse.from_aggregate(get_shipment(shipment_id)))
