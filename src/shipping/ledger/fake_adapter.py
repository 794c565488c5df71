"""Fake ledger adapter: deterministic anchoring for tests and development.

Configurable success/failure behavior; every call is recorded so tests can
assert on what was sent to the ledger.
"""

from uuid import uuid4

from shipping.ledger.port import (
    AnchorReceipt,
    LedgerError,
    LedgerPort,
    LedgerRejectedError,
    LedgerTransportError,
    LedgerUnavailableError,
    build_anchor_id,
)

_ERRORS_BY_CODE = {
    LedgerUnavailableError.code: LedgerUnavailableError,
    LedgerRejectedError.code: LedgerRejectedError,
    LedgerTransportError.code: LedgerTransportError,
}


class FakeLedger(LedgerPort):
    """Fake ledger that always succeeds by default."""

    def __init__(self):
        self.should_succeed = True
        self.failure_code = LedgerTransportError.code
        self.failure_reason = "Ledger unreachable"
        self.calls: list[dict] = []

    def configure(
        self,
        should_succeed: bool = True,
        failure_code: str = LedgerTransportError.code,
        failure_reason: str = "Ledger unreachable",
    ):
        """Configure the fake ledger behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_code = failure_code
        self.failure_reason = failure_reason

    def anchor(
        self,
        tracking_number: str,
        origin: str,
        destination: str,
        shipment_id: str,
    ) -> AnchorReceipt:
        self.calls.append(
            {
                "tracking_number": tracking_number,
                "origin": origin,
                "destination": destination,
                "shipment_id": shipment_id,
            }
        )

        if not self.should_succeed:
            error_cls = _ERRORS_BY_CODE.get(self.failure_code, LedgerError)
            raise error_cls(self.failure_reason)

        tx_ref = uuid4().hex + uuid4().hex
        return AnchorReceipt(anchor_id=build_anchor_id(shipment_id, tx_ref), anchor_tx_ref=tx_ref)
