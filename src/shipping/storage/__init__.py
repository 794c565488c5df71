"""Proof storage factory.

PROOF_STORAGE_ADAPTER selects the implementation; only ``fake`` ships today.
"""

import os

from shipping.storage.port import ProofStorage

_current_storage: ProofStorage | None = None


def get_proof_storage() -> ProofStorage:
    """Return the configured proof storage adapter (singleton)."""
    global _current_storage
    if _current_storage is None:
        adapter = os.environ.get("PROOF_STORAGE_ADAPTER", "fake")
        if adapter == "fake":
            from shipping.storage.fake_adapter import FakeProofStorage

            _current_storage = FakeProofStorage()
        else:
            raise ValueError(f"Unknown proof storage adapter: {adapter}")
    return _current_storage


def set_proof_storage(storage: ProofStorage) -> None:
    """Override the active proof storage (useful for tests)."""
    global _current_storage
    _current_storage = storage


def reset_proof_storage() -> None:
    global _current_storage
    _current_storage = None
