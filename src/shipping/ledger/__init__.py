"""Ledger adapter factory.

Provides get_ledger() / set_ledger() to swap implementations:
- StellarLedger by default (LEDGER_ADAPTER=stellar)
- FakeLedger for development and testing (LEDGER_ADAPTER=fake)
"""

import os

from shipping.ledger.port import LedgerPort

_current_ledger: LedgerPort | None = None


def get_ledger() -> LedgerPort:
    """Return the configured ledger adapter (singleton)."""
    global _current_ledger
    if _current_ledger is None:
        adapter = os.environ.get("LEDGER_ADAPTER", "stellar")
        if adapter == "stellar":
            from shipping.ledger.stellar_adapter import StellarLedger

            _current_ledger = StellarLedger(
                secret_key=os.environ.get("STELLAR_SECRET_KEY"),
                network=os.environ.get("STELLAR_NETWORK", "testnet"),
                horizon_url=os.environ.get("STELLAR_HORIZON_URL"),
            )
        elif adapter == "fake":
            from shipping.ledger.fake_adapter import FakeLedger

            _current_ledger = FakeLedger()
        else:
            raise ValueError(f"Unknown ledger adapter: {adapter}")
    return _current_ledger


def set_ledger(ledger: LedgerPort) -> None:
    """Override the active ledger adapter (useful for tests)."""
    global _current_ledger
    _current_ledger = ledger


def reset_ledger() -> None:
    """Reset the ledger singleton so the next call re-reads the environment."""
    global _current_ledger
    _current_ledger = None
