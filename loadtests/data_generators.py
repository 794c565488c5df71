"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the shipment API's validation
and match the field names expected by its Pydantic request schemas.
"""

import random
import uuid
from datetime import UTC, datetime, timedelta

from faker import Faker

fake = Faker()

STATUSES = ["CREATED", "IN_TRANSIT", "DELIVERED", "CANCELLED"]
MANAGER_HEADERS = {"X-User-Id": "loadtest-manager", "X-User-Role": "MANAGER"}

PROOF_BOUNDARY = "----LoadtestProofBoundary"


def unique_tracking_number() -> str:
    """Generate tracking numbers like 'TRK-LT-1A2B3C4D5E'."""
    return f"TRK-LT-{uuid.uuid4().hex[:10].upper()}"


def city_pair() -> tuple[str, str]:
    origin = fake.city()
    destination = fake.city()
    while destination == origin:
        destination = fake.city()
    return origin, destination


def off_chain_metadata() -> dict:
    return {
        "weight_kg": round(random.uniform(0.5, 900.0), 1),
        "carrier": random.choice(["FedEx", "UPS", "DHL", "Maersk"]),
        "temperature_controlled": random.random() < 0.2,
        "reference": fake.bothify("PO-####-????").upper(),
    }


def seed_milestones(final_status: str) -> list[dict]:
    """A plausible milestone history ending in ``final_status``."""
    path = {
        "CREATED": ["CREATED"],
        "IN_TRANSIT": ["CREATED", "IN_TRANSIT"],
        "DELIVERED": ["CREATED", "IN_TRANSIT", "DELIVERED"],
        "CANCELLED": ["CREATED", "CANCELLED"],
    }[final_status]
    start = datetime.now(UTC) - timedelta(days=len(path))
    return [
        {
            "name": name,
            "timestamp": (start + timedelta(days=i, hours=random.randint(0, 8))).isoformat(),
            "description": f"Status changed to {name}",
        }
        for i, name in enumerate(path)
    ]


def shipment_data(with_history: bool = False) -> dict:
    """Generate a CreateShipmentRequest payload."""
    origin, destination = city_pair()
    payload = {
        "tracking_number": unique_tracking_number(),
        "origin": origin,
        "destination": destination,
        "enterprise_id": f"ent-{uuid.uuid4().hex[:8]}",
        "logistics_id": f"log-{uuid.uuid4().hex[:8]}",
        "off_chain_metadata": off_chain_metadata(),
    }
    if with_history:
        status = random.choice(STATUSES)
        payload["status"] = status
        payload["milestones"] = seed_milestones(status)
    return payload


def proof_upload(size: int = 2048) -> tuple[bytes, dict]:
    """Build a multipart body with a fake JPEG and a recipient name."""
    content = b"\xff\xd8\xff\xe0" + random.randbytes(size)
    body = (
        f"--{PROOF_BOUNDARY}\r\n"
        'Content-Disposition: form-data; name="recipient_signature_name"\r\n\r\n'
        f"{fake.name()}\r\n"
        f"--{PROOF_BOUNDARY}\r\n"
        'Content-Disposition: form-data; name="file"; filename="proof.jpg"\r\n'
        "Content-Type: image/jpeg\r\n\r\n"
    ).encode() + content + f"\r\n--{PROOF_BOUNDARY}--\r\n".encode()
    return body, {"Content-Type": f"multipart/form-data; boundary={PROOF_BOUNDARY}"}
