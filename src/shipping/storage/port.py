"""Proof storage port (abstract interface).

Persists delivery-proof binaries and hands back a retrievable reference,
typically a URL. Adapters raise ``ProofStorageError`` when the binary could
not be stored.
"""

from abc import ABC, abstractmethod

from shipping.uploads.multipart import UploadedFile


class ProofStorageError(Exception):
    """The proof binary could not be stored."""

    code = "STORAGE_FAILURE"


class ProofStorage(ABC):
    """Abstract proof storage interface."""

    @abstractmethod
    def store(self, upload: UploadedFile) -> str:
        """Store the uploaded file and return its reference."""
        ...
