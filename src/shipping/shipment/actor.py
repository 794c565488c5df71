"""Actor resolution: who gets credited with a status transition.

The upstream authentication layer hands us at most a user id. The wallet
address lives in the user directory and is looked up on demand. Resolution
never fails: a missing user or an unreachable directory degrades to an
actor with the user id only.
"""

from dataclasses import dataclass

from shipping.directory import get_directory
from shipping.directory.port import UserDirectory
from shipping.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Actor:
    user_id: str | None = None
    wallet_address: str | None = None


def resolve_actor(user_id: str | None, directory: UserDirectory | None = None) -> Actor:
    """Build the Actor for ``user_id``, enriching it with a wallet address when one is on file."""
    if not user_id:
        return Actor()

    directory = directory or get_directory()
    try:
        record = directory.find_by_id(str(user_id))
    except Exception as exc:
        logger.warning("actor_lookup_failed", user_id=str(user_id), error=str(exc))
        return Actor(user_id=str(user_id))

    if record is None:
        return Actor(user_id=str(user_id))
    return Actor(user_id=str(user_id), wallet_address=record.wallet_address or None)
