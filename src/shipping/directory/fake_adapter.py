"""In-memory user directory for tests and development."""

from shipping.directory.port import DirectoryError, UserDirectory, UserRecord


class FakeUserDirectory(UserDirectory):
    def __init__(self):
        self.users: dict[str, UserRecord] = {}
        self.should_succeed = True
        self.failure_reason = "Directory unavailable"

    def configure(self, should_succeed: bool = True, failure_reason: str = "Directory unavailable"):
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def register(self, user_id: str, wallet_address: str | None = None) -> UserRecord:
        record = UserRecord(user_id=user_id, wallet_address=wallet_address)
        self.users[user_id] = record
        return record

    def find_by_id(self, user_id: str) -> UserRecord | None:
        if not self.should_succeed:
            raise DirectoryError(self.failure_reason)
        return self.users.get(user_id)
