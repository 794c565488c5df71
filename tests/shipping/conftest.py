import pytest
from shipping.directory import reset_directory, set_directory
from shipping.directory.fake_adapter import FakeUserDirectory
from shipping.ledger import reset_ledger, set_ledger
from shipping.ledger.fake_adapter import FakeLedger
from shipping.storage import reset_proof_storage, set_proof_storage
from shipping.storage.fake_adapter import FakeProofStorage


@pytest.fixture(scope="session")
def _shipping_domain():
    from shipping.domain import shipping

    return shipping


@pytest.fixture(scope="session", autouse=True)
def setup_db(_shipping_domain):
    from shipping.utils.db import drop_db, setup_db

    setup_db(_shipping_domain)

    yield

    drop_db(_shipping_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_shipping_domain):
    """Push domain context before each test, cleanup after."""
    ctx = _shipping_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()


@pytest.fixture(autouse=True)
def ledger():
    fake = FakeLedger()
    set_ledger(fake)
    yield fake
    reset_ledger()


@pytest.fixture(autouse=True)
def proof_storage():
    fake = FakeProofStorage()
    set_proof_storage(fake)
    yield fake
    reset_proof_storage()


@pytest.fixture(autouse=True)
def directory():
    fake = FakeUserDirectory()
    set_directory(fake)
    yield fake
    reset_directory()
