import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient
from shipping.api import register_exception_handlers, shipment_router

MANAGER = {"X-User-Id": "mgr-1", "X-User-Role": "MANAGER"}


@pytest.fixture()
def client(_shipping_domain):
    app = FastAPI()

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        with _shipping_domain.domain_context():
            return await call_next(request)

    app.include_router(shipment_router)
    register_exception_handlers(app)
    return TestClient(app)


@pytest.fixture()
def create_shipment(client):
    def _create(**overrides):
        payload = {
            "tracking_number": "TN-001",
            "origin": "Lagos",
            "destination": "Nairobi",
            "enterprise_id": "ent-1",
            "logistics_id": "log-1",
        }
        payload.update(overrides)
        response = client.post("/shipments", json=payload, headers=MANAGER)
        assert response.status_code == 201, response.text
        return response.json()

    return _create
