import pytest
from shipping.directory import get_directory, reset_directory
from shipping.directory.fake_adapter import FakeUserDirectory
from shipping.directory.port import DirectoryError
from shipping.storage import get_proof_storage, reset_proof_storage
from shipping.storage.fake_adapter import FakeProofStorage
from shipping.storage.port import ProofStorageError
from shipping.uploads.multipart import UploadedFile


class TestFakeProofStorage:
    def test_store_returns_mock_url(self):
        storage = FakeProofStorage()
        reference = storage.store(UploadedFile(content=b"img", filename="proof.jpg", content_type="image/jpeg"))
        assert reference.startswith("https://mock-storage.com/proof")
        assert reference.endswith(".jpg")
        assert storage.stored[reference].content == b"img"

    def test_references_unique(self):
        storage = FakeProofStorage()
        upload = UploadedFile(content=b"img", filename="proof.png")
        references = {storage.store(upload) for _ in range(5)}
        assert len(references) == 5

    def test_configured_failure(self):
        storage = FakeProofStorage()
        storage.configure(should_succeed=False, failure_reason="bucket gone")
        with pytest.raises(ProofStorageError, match="bucket gone"):
            storage.store(UploadedFile(content=b"x", filename="x.jpg"))
        assert storage.stored == {}

    def test_factory(self, monkeypatch):
        monkeypatch.setenv("PROOF_STORAGE_ADAPTER", "fake")
        reset_proof_storage()
        assert isinstance(get_proof_storage(), FakeProofStorage)

    def test_factory_unknown_adapter(self, monkeypatch):
        monkeypatch.setenv("PROOF_STORAGE_ADAPTER", "s3")
        reset_proof_storage()
        with pytest.raises(ValueError):
            get_proof_storage()


class TestFakeUserDirectory:
    def test_find_registered_user(self):
        directory = FakeUserDirectory()
        directory.register("u1", wallet_address="0xABC")
        record = directory.find_by_id("u1")
        assert record.user_id == "u1"
        assert record.wallet_address == "0xABC"

    def test_unknown_user(self):
        assert FakeUserDirectory().find_by_id("ghost") is None

    def test_configured_failure(self):
        directory = FakeUserDirectory()
        directory.configure(should_succeed=False)
        with pytest.raises(DirectoryError):
            directory.find_by_id("u1")

    def test_factory(self, monkeypatch):
        monkeypatch.delenv("USER_DIRECTORY_ADAPTER", raising=False)
        reset_directory()
        assert isinstance(get_directory(), FakeUserDirectory)
