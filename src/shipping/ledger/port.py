"""Ledger port: abstract interface for anchoring shipments on a public ledger.

An anchor is a tamper-evident record proving that a shipment's identifying
data was written to the ledger at a point in time. Adapters raise one of the
``LedgerError`` subclasses on failure; callers that treat anchoring as
advisory convert the result into an ``AnchorOutcome`` and inspect it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


class LedgerError(Exception):
    """Base class for anchoring failures."""

    code = "LEDGER_ERROR"


class LedgerUnavailableError(LedgerError):
    """No usable signing credential is configured."""

    code = "LEDGER_UNAVAILABLE"


class LedgerRejectedError(LedgerError):
    """The ledger network refused the submission."""

    code = "LEDGER_REJECTED"


class LedgerTransportError(LedgerError):
    """The ledger network could not be reached."""

    code = "LEDGER_TRANSPORT"


@dataclass(frozen=True)
class AnchorReceipt:
    """Identifiers of a successful anchoring transaction."""

    anchor_id: str
    anchor_tx_ref: str


@dataclass(frozen=True)
class AnchorOutcome:
    """Result of a best-effort anchoring attempt."""

    anchor: AnchorReceipt | None = None
    failure_code: str | None = None
    failure_reason: str | None = None

    @property
    def anchored(self) -> bool:
        return self.anchor is not None

    @classmethod
    def succeeded(cls, anchor: AnchorReceipt) -> "AnchorOutcome":
        return cls(anchor=anchor)

    @classmethod
    def failed(cls, code: str, reason: str) -> "AnchorOutcome":
        return cls(failure_code=code, failure_reason=reason)


def build_anchor_id(shipment_id: str, tx_ref: str) -> str:
    """Derive the public anchor id from the shipment id and transaction reference."""
    return f"anchor:{shipment_id}:{tx_ref[:8]}"


class LedgerPort(ABC):
    """Abstract interface for ledger adapters."""

    @abstractmethod
    def anchor(
        self,
        tracking_number: str,
        origin: str,
        destination: str,
        shipment_id: str,
    ) -> AnchorReceipt:
        """Record the shipment's tracking number and route on the ledger.

        Raises:
            LedgerUnavailableError: no signing credential is configured
            LedgerRejectedError: the network rejected the transaction
            LedgerTransportError: the network could not be reached
        """
        ...
