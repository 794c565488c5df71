"""Shipment load test scenarios.

Two stateful journeys (full delivery lifecycle, cancellation) and a read
heavy browsing user that pages through the listing.
"""

import logging
import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import MANAGER_HEADERS, proof_upload, shipment_data
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import BrowseState, ShipmentState

logger = logging.getLogger("loadtest")


class _ShipmentJourney(SequentialTaskSet):
    def on_start(self):
        self.state = ShipmentState()
        self.driver_headers = {"X-User-Id": f"driver-{random.randint(1, 50)}", "X-User-Role": "DRIVER"}

    def _create(self):
        payload = shipment_data()
        with self.client.post(
            "/shipments",
            json=payload,
            headers=MANAGER_HEADERS,
            catch_response=True,
            name="POST /shipments",
        ) as resp:
            if resp.status_code == 201:
                body = resp.json()
                self.state.shipment_id = body["id"]
                self.state.tracking_number = body["tracking_number"]
                self.state.anchored = body["anchor"] is not None
            else:
                resp.failure(f"Create shipment failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()

    def _move(self, status: str):
        with self.client.patch(
            f"/shipments/{self.state.shipment_id}/status",
            json={"status": status},
            headers=self.driver_headers,
            catch_response=True,
            name="PATCH /shipments/{id}/status",
        ) as resp:
            if resp.status_code == 200:
                body = resp.json()
                self.state.current_status = body["status"]
                self.state.milestone_count = len(body["milestones"])
            else:
                resp.failure(f"Status change to {status} failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()


class ShipmentDeliveryJourney(_ShipmentJourney):
    """Create -> In transit -> Metadata update -> Delivered -> Proof upload -> Read back."""

    @task
    def create_shipment(self):
        self._create()

    @task
    def dispatch(self):
        self._move("IN_TRANSIT")

    @task
    def update_metadata(self):
        with self.client.patch(
            f"/shipments/{self.state.shipment_id}",
            json={"off_chain_metadata": {"checkpoint": random.choice(["hub-a", "hub-b", "border"])}},
            catch_response=True,
            name="PATCH /shipments/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Metadata update failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def deliver(self):
        self._move("DELIVERED")

    @task
    def upload_proof(self):
        body, headers = proof_upload()
        with self.client.post(
            f"/shipments/{self.state.shipment_id}/proof",
            data=body,
            headers=headers,
            catch_response=True,
            name="POST /shipments/{id}/proof",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Proof upload failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def read_back(self):
        with self.client.get(
            f"/shipments/{self.state.shipment_id}",
            catch_response=True,
            name="GET /shipments/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Read back failed: {resp.status_code}: {extract_error_detail(resp)}")
            elif len(resp.json()["milestones"]) != self.state.milestone_count:
                resp.failure("Milestone log length changed between writes")
        self.interrupt()


class ShipmentCancellationJourney(_ShipmentJourney):
    """Create -> Cancelled -> Cancelled again (no-op)."""

    @task
    def create_shipment(self):
        self._create()

    @task
    def cancel(self):
        self._move("CANCELLED")

    @task
    def cancel_again(self):
        self._move("CANCELLED")
        if self.state.milestone_count != 1:
            logger.warning("Repeated cancel appended a milestone to %s", self.state.shipment_id)
        self.interrupt()


class ShipmentLifecycleUser(HttpUser):
    """Writes: full journeys, weighted towards delivery."""

    wait_time = between(1, 3)
    tasks = {ShipmentDeliveryJourney: 4, ShipmentCancellationJourney: 1}


class ShipmentBrowserUser(HttpUser):
    """Reads: pages through the listing, filtered and unfiltered."""

    wait_time = between(0.5, 2)

    def on_start(self):
        self.state = BrowseState()

    @task(3)
    def list_page(self):
        params = {"page": random.randint(1, 5), "limit": random.choice([10, 20, 50])}
        with self.client.get("/shipments", params=params, catch_response=True, name="GET /shipments") as resp:
            if resp.status_code == 200:
                self.state.seen_ids.extend(s["id"] for s in resp.json()["data"])
                self.state.seen_ids = self.state.seen_ids[-200:]
            else:
                resp.failure(f"List failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task(2)
    def list_by_status(self):
        params = {"status": random.choice(["CREATED", "IN_TRANSIT", "DELIVERED", "CANCELLED"])}
        with self.client.get(
            "/shipments", params=params, catch_response=True, name="GET /shipments?status"
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Filtered list failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task(1)
    def get_seen(self):
        if not self.state.seen_ids:
            return
        shipment_id = random.choice(self.state.seen_ids)
        with self.client.get(
            f"/shipments/{shipment_id}", catch_response=True, name="GET /shipments/{id}"
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Get failed: {resp.status_code}: {extract_error_detail(resp)}")
