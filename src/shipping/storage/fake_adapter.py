"""Fake proof storage: keeps uploads in memory and returns mock URLs."""

import time
from pathlib import PurePosixPath

from shipping.storage.port import ProofStorage, ProofStorageError
from shipping.uploads.multipart import UploadedFile


class FakeProofStorage(ProofStorage):
    def __init__(self):
        self.should_succeed = True
        self.failure_reason = "Storage unavailable"
        self.stored: dict[str, UploadedFile] = {}

    def configure(self, should_succeed: bool = True, failure_reason: str = "Storage unavailable"):
        """Configure the fake storage behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def store(self, upload: UploadedFile) -> str:
        if not self.should_succeed:
            raise ProofStorageError(self.failure_reason)

        suffix = PurePosixPath(upload.filename).suffix or ".bin"
        reference = f"https://mock-storage.com/proof{time.time_ns() // 1_000_000}{suffix}"
        # Same-millisecond uploads must not overwrite each other
        while reference in self.stored:
            reference = f"https://mock-storage.com/proof{time.time_ns()}{suffix}"
        self.stored[reference] = upload
        return reference
