"""Stellar ledger adapter.

Anchors a shipment by submitting a transaction with two ``manage_data``
operations on the service account: ``tracking:{id}`` holding the tracking
number and ``route:{id}`` holding ``origin->destination``. The transaction
hash is the anchor's transaction reference.
"""

from stellar_sdk import Keypair, Network, Server, TransactionBuilder
from stellar_sdk.exceptions import (
    BadResponseError,
    BaseHorizonError,
    Ed25519SecretSeedInvalidError,
)
from stellar_sdk.exceptions import ConnectionError as StellarConnectionError

from shipping.ledger.port import (
    AnchorReceipt,
    LedgerPort,
    LedgerRejectedError,
    LedgerTransportError,
    LedgerUnavailableError,
    build_anchor_id,
)
from shipping.utils.logging import get_logger

logger = get_logger(__name__)

BASE_FEE = 100
TX_TIMEOUT_SECONDS = 30

NETWORKS = {
    "testnet": (Network.TESTNET_NETWORK_PASSPHRASE, "https://horizon-testnet.stellar.org"),
    "public": (Network.PUBLIC_NETWORK_PASSPHRASE, "https://horizon.stellar.org"),
}


class StellarLedger(LedgerPort):
    """Anchors shipments on the Stellar network via Horizon."""

    def __init__(
        self,
        secret_key: str | None,
        network: str = "testnet",
        horizon_url: str | None = None,
        server: Server | None = None,
    ):
        if network not in NETWORKS:
            raise ValueError(f"Unknown Stellar network: {network}")

        passphrase, default_url = NETWORKS[network]
        self.secret_key = secret_key
        self.network = network
        self.network_passphrase = passphrase
        self.horizon_url = horizon_url or default_url
        self._server = server

    @property
    def server(self) -> Server:
        if self._server is None:
            self._server = Server(horizon_url=self.horizon_url)
        return self._server

    def _keypair(self) -> Keypair:
        if not self.secret_key:
            raise LedgerUnavailableError("No Stellar secret key configured")
        try:
            return Keypair.from_secret(self.secret_key)
        except (Ed25519SecretSeedInvalidError, ValueError) as exc:
            raise LedgerUnavailableError(f"Invalid Stellar secret key: {exc}") from exc

    def anchor(
        self,
        tracking_number: str,
        origin: str,
        destination: str,
        shipment_id: str,
    ) -> AnchorReceipt:
        keypair = self._keypair()

        try:
            account = self.server.load_account(keypair.public_key)
            transaction = (
                TransactionBuilder(
                    source_account=account,
                    network_passphrase=self.network_passphrase,
                    base_fee=BASE_FEE,
                )
                .append_manage_data_op(data_name=f"tracking:{shipment_id}", data_value=tracking_number)
                .append_manage_data_op(data_name=f"route:{shipment_id}", data_value=f"{origin}->{destination}")
                .set_timeout(TX_TIMEOUT_SECONDS)
                .build()
            )
            transaction.sign(keypair)
            response = self.server.submit_transaction(transaction)
        except (StellarConnectionError, BadResponseError) as exc:
            # Horizon 5xx (gateway timeouts included) counts as transport
            raise LedgerTransportError(str(exc)) from exc
        except BaseHorizonError as exc:
            raise LedgerRejectedError(str(exc)) from exc
        except ValueError as exc:
            # manage_data names and values are capped at 64 bytes
            raise LedgerRejectedError(str(exc)) from exc

        tx_hash = response["hash"]
        logger.debug("stellar_transaction_submitted", shipment_id=shipment_id, tx_hash=tx_hash, network=self.network)
        return AnchorReceipt(anchor_id=build_anchor_id(shipment_id, tx_hash), anchor_tx_ref=tx_hash)
