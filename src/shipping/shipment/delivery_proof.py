"""Delivery proof: store the uploaded evidence and attach its reference.

Input is checked and the shipment looked up before the file is stored, so
a rejected upload never leaves an orphaned binary behind. Storage failures are not retried.
"""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from shipping.domain import shipping
from shipping.shipment.shipment import Shipment
from shipping.storage import get_proof_storage
from shipping.storage.port import ProofStorageError
from shipping.uploads.multipart import UploadedFile
from shipping.utils.logging import get_logger

logger = get_logger(__name__)

MAX_SIGNATURE_NAME_LENGTH = 255


@shipping.command(part_of="Shipment")
class RecordDeliveryProof:
    shipment_id = Identifier(required=True)
    reference = String(required=True, max_length=1000)
    recipient_signature_name = String(max_length=MAX_SIGNATURE_NAME_LENGTH)


@shipping.command_handler(part_of=Shipment)
class RecordDeliveryProofHandler:
    @handle(RecordDeliveryProof)
    def record_delivery_proof(self, command):
        repo = current_domain.repository_for(Shipment)
        shipment = repo.get(command.shipment_id)
        shipment.attach_delivery_proof(command.reference, command.recipient_signature_name)
        repo.add(shipment)


def attach_delivery_proof(
    shipment_id: str,
    upload: UploadedFile | None,
    recipient_signature_name: str | None = None,
) -> str:
    """Store ``upload`` and attach it to the shipment. Returns the stored reference."""
    if upload is None:
        raise ValidationError({"file": ["No file uploaded"]})
    if recipient_signature_name and len(recipient_signature_name) > MAX_SIGNATURE_NAME_LENGTH:
        raise ValidationError(
            {"recipient_signature_name": [f"Ensure this value has at most {MAX_SIGNATURE_NAME_LENGTH} characters."]}
        )

    current_domain.repository_for(Shipment).get(shipment_id)

    storage = get_proof_storage()
    try:
        reference = storage.store(upload)
    except ProofStorageError:
        raise
    except Exception as exc:
        raise ProofStorageError(f"Failed to store proof: {exc}") from exc

    current_domain.process(
        RecordDeliveryProof(
            shipment_id=shipment_id,
            reference=reference,
            recipient_signature_name=recipient_signature_name or None,
        ),
        asynchronous=False,
    )
    logger.info(
        "delivery_proof_attached",
        shipment_id=shipment_id,
        reference=reference,
        size=upload.size,
    )
    return reference
