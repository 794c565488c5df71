import json
from unittest.mock import MagicMock

import pytest
from shipping.ledger import get_ledger, reset_ledger
from shipping.ledger.fake_adapter import FakeLedger
from shipping.ledger.port import (
    AnchorOutcome,
    AnchorReceipt,
    LedgerRejectedError,
    LedgerTransportError,
    LedgerUnavailableError,
    build_anchor_id,
)
from shipping.ledger.stellar_adapter import StellarLedger
from stellar_sdk import Account, Keypair, Network
from stellar_sdk.client.response import Response
from stellar_sdk.exceptions import BadRequestError, BadResponseError, NotFoundError, UnknownRequestError
from stellar_sdk.exceptions import ConnectionError as StellarConnectionError

TX_HASH = "3389e9f0f1a65f19736cacf544c2e825313e8447f569233bb8db39aa607c8889"


def _stellar(keypair=None, **kwargs):
    keypair = keypair or Keypair.random()
    server = MagicMock()
    server.load_account.return_value = Account(keypair.public_key, 1)
    server.submit_transaction.return_value = {"hash": TX_HASH}
    return StellarLedger(secret_key=keypair.secret, server=server, **kwargs), server


def _horizon_response(status, title, **body):
    return Response(
        status_code=status,
        text=json.dumps({"title": title, "status": status, **body}),
        headers={},
        url="https://horizon-testnet.stellar.org/transactions",
    )


def _anchor(ledger, **overrides):
    args = {
        "tracking_number": "TN-001",
        "origin": "Lagos",
        "destination": "Nairobi",
        "shipment_id": "shp-1",
    }
    args.update(overrides)
    return ledger.anchor(**args)


class TestAnchorOutcome:
    def test_succeeded(self):
        outcome = AnchorOutcome.succeeded(AnchorReceipt(anchor_id="anchor:s:12345678", anchor_tx_ref="12345678"))
        assert outcome.anchored is True
        assert outcome.failure_code is None

    def test_failed(self):
        outcome = AnchorOutcome.failed("LEDGER_TRANSPORT", "timeout")
        assert outcome.anchored is False
        assert outcome.failure_code == "LEDGER_TRANSPORT"
        assert outcome.failure_reason == "timeout"

    def test_anchor_id_format(self):
        assert build_anchor_id("shp-1", TX_HASH) == "anchor:shp-1:3389e9f0"


class TestFakeLedger:
    def test_succeeds_by_default(self):
        ledger = FakeLedger()
        receipt = _anchor(ledger)
        assert receipt.anchor_id.startswith("anchor:shp-1:")
        assert len(receipt.anchor_tx_ref) == 64
        assert receipt.anchor_id.endswith(receipt.anchor_tx_ref[:8])

    def test_records_calls(self):
        ledger = FakeLedger()
        _anchor(ledger)
        assert ledger.calls == [
            {"tracking_number": "TN-001", "origin": "Lagos", "destination": "Nairobi", "shipment_id": "shp-1"}
        ]

    @pytest.mark.parametrize(
        "code, error_cls",
        [
            ("LEDGER_UNAVAILABLE", LedgerUnavailableError),
            ("LEDGER_REJECTED", LedgerRejectedError),
            ("LEDGER_TRANSPORT", LedgerTransportError),
        ],
    )
    def test_configured_failure(self, code, error_cls):
        ledger = FakeLedger()
        ledger.configure(should_succeed=False, failure_code=code, failure_reason="boom")
        with pytest.raises(error_cls) as exc:
            _anchor(ledger)
        assert exc.value.code == code
        assert len(ledger.calls) == 1


class TestStellarLedger:
    def test_anchor_submits_signed_transaction(self):
        ledger, server = _stellar()
        receipt = _anchor(ledger)

        assert receipt.anchor_tx_ref == TX_HASH
        assert receipt.anchor_id == "anchor:shp-1:3389e9f0"
        server.submit_transaction.assert_called_once()

        envelope = server.submit_transaction.call_args[0][0]
        assert len(envelope.signatures) == 1
        names = [op.data_name for op in envelope.transaction.operations]
        assert names == ["tracking:shp-1", "route:shp-1"]

    def test_uses_testnet_by_default(self):
        ledger, _ = _stellar()
        assert ledger.network_passphrase == Network.TESTNET_NETWORK_PASSPHRASE
        assert ledger.horizon_url == "https://horizon-testnet.stellar.org"

    def test_public_network(self):
        ledger, _ = _stellar(network="public")
        assert ledger.network_passphrase == Network.PUBLIC_NETWORK_PASSPHRASE
        assert ledger.horizon_url == "https://horizon.stellar.org"

    def test_horizon_url_override(self):
        ledger, _ = _stellar(horizon_url="http://localhost:8000")
        assert ledger.horizon_url == "http://localhost:8000"

    def test_unknown_network_rejected(self):
        with pytest.raises(ValueError):
            StellarLedger(secret_key=None, network="futurenet-x")

    def test_missing_secret_is_unavailable(self):
        server = MagicMock()
        ledger = StellarLedger(secret_key=None, server=server)
        with pytest.raises(LedgerUnavailableError):
            _anchor(ledger)
        server.load_account.assert_not_called()

    def test_invalid_secret_is_unavailable(self):
        ledger = StellarLedger(secret_key="not-a-stellar-secret", server=MagicMock())
        with pytest.raises(LedgerUnavailableError):
            _anchor(ledger)

    def test_connection_failure_is_transport_error(self):
        ledger, server = _stellar()
        server.load_account.side_effect = StellarConnectionError("connection refused")
        with pytest.raises(LedgerTransportError):
            _anchor(ledger)

    def test_horizon_rejection(self):
        ledger, server = _stellar()
        server.submit_transaction.side_effect = BadRequestError(
            _horizon_response(400, "Transaction Failed", extras={"result_codes": {}})
        )
        with pytest.raises(LedgerRejectedError):
            _anchor(ledger)

    def test_horizon_server_error_is_transport_error(self):
        ledger, server = _stellar()
        server.load_account.side_effect = BadResponseError(_horizon_response(504, "Gateway Timeout"))
        with pytest.raises(LedgerTransportError) as exc:
            _anchor(ledger)
        assert exc.value.code == "LEDGER_TRANSPORT"

    def test_unexpected_horizon_status_is_rejected(self):
        ledger, server = _stellar()
        server.load_account.side_effect = UnknownRequestError(_horizon_response(429, "Rate Limit Exceeded"))
        with pytest.raises(LedgerRejectedError) as exc:
            _anchor(ledger)
        assert exc.value.code == "LEDGER_REJECTED"

    def test_unfunded_account_is_rejected(self):
        ledger, server = _stellar()
        server.load_account.side_effect = NotFoundError(_horizon_response(404, "Resource Missing"))
        with pytest.raises(LedgerRejectedError):
            _anchor(ledger)
        server.submit_transaction.assert_not_called()

    def test_oversized_route_rejected(self):
        ledger, server = _stellar()
        with pytest.raises(LedgerRejectedError):
            _anchor(ledger, origin="O" * 40, destination="D" * 40)
        server.submit_transaction.assert_not_called()


class TestLedgerFactory:
    def test_fake_selected_by_env(self, monkeypatch):
        monkeypatch.setenv("LEDGER_ADAPTER", "fake")
        reset_ledger()
        assert isinstance(get_ledger(), FakeLedger)

    def test_stellar_selected_by_env(self, monkeypatch):
        monkeypatch.setenv("LEDGER_ADAPTER", "stellar")
        monkeypatch.setenv("STELLAR_NETWORK", "public")
        monkeypatch.delenv("STELLAR_SECRET_KEY", raising=False)
        reset_ledger()
        ledger = get_ledger()
        assert isinstance(ledger, StellarLedger)
        assert ledger.network == "public"
        assert ledger.secret_key is None

    def test_unknown_adapter(self, monkeypatch):
        monkeypatch.setenv("LEDGER_ADAPTER", "carrier-pigeon")
        reset_ledger()
        with pytest.raises(ValueError):
            get_ledger()

    def test_singleton(self, monkeypatch):
        monkeypatch.setenv("LEDGER_ADAPTER", "fake")
        reset_ledger()
        assert get_ledger() is get_ledger()
