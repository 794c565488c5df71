"""Shared BDD fixtures and step definitions for the Shipping domain."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then
from shipping.shipment.creation import register_shipment
from shipping.shipment.shipment import Shipment


@pytest.fixture()
def error():
    """Container for captured domain errors."""
    return {"exc": None}


def load(shipment_id):
    return current_domain.repository_for(Shipment).get(shipment_id)


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('user "{user_id}" has wallet "{wallet}" in the directory'))
def user_with_wallet(directory, user_id, wallet):
    directory.register(user_id, wallet_address=wallet)


@given(parsers.cfparse('a shipment "{tracking_number}" has been registered'), target_fixture="shipment_id")
def registered_shipment(tracking_number):
    return register_shipment(
        tracking_number=tracking_number,
        origin="Lagos",
        destination="Nairobi",
        enterprise_id="ent-bdd",
        logistics_id="log-bdd",
    )


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the shipment status is "{status}"'))
def shipment_status_is(shipment_id, status):
    assert load(shipment_id).status == status


@then(parsers.re(r"the shipment has (?P<count>\d+) milestones?"))
def shipment_has_milestones(shipment_id, count):
    assert len(load(shipment_id).milestones) == int(count)
