"""Deploy, transfer/approve and event history workflows on the simulated ledger."""

import unittest

from distribution.units import parse_units
from event_decoder.decoder import EventDecoder
from event_decoder.models import ApprovalEvent, GenericEvent, TransferEvent
from inspector.inspector import BalanceInspector
from ledger_adapter.ethereum.config import DeploymentSettings
from ledger_adapter.ethereum.errors import ConfigurationError, RevertError
from ledger_adapter.ethereum.models import TransactionHandle, TransactionReceipt
from ledger_adapter.ethereum.simulator import SimulatedLedger

from orchestrator.signing import SigningIdentityLock
from orchestrator.workflows import (
    DEFAULT_RECIPIENT,
    deploy_token,
    recent_events,
    transfer_and_approve,
)

SIGNER = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"


class DeployTokenTests(unittest.TestCase):
    def setUp(self) -> None:
        self.ledger = SimulatedLedger(SIGNER)
        self.lock = SigningIdentityLock()

    def test_deploys_with_default_settings(self) -> None:
        result = deploy_token(self.ledger, "0x6080", identity_lock=self.lock)

        self.assertEqual(result.block_number, 1)
        self.assertGreater(result.gas_used, 0)
        token = result.contract_address
        self.assertEqual(self.ledger.read_state(token, "name"), "CampusCredit")
        self.assertEqual(self.ledger.read_state(token, "symbol"), "CAMP")
        self.assertEqual(self.ledger.read_state(token, "cap"), parse_units("2000000"))
        self.assertEqual(
            self.ledger.read_state(token, "balanceOf", (SIGNER,)), parse_units("1000000")
        )

    def test_initial_mint_above_cap_is_rejected_before_submission(self) -> None:
        settings = DeploymentSettings(cap="10", initial_mint="11")
        with self.assertRaises(ConfigurationError):
            deploy_token(self.ledger, "0x6080", settings, identity_lock=self.lock)
        self.assertEqual(self.ledger.current_block_height(), 0)

    def test_unparseable_supply_is_a_configuration_error(self) -> None:
        settings = DeploymentSettings(cap="lots")
        with self.assertRaises(ConfigurationError):
            deploy_token(self.ledger, "0x6080", settings, identity_lock=self.lock)

    def test_receipt_without_contract_address_is_a_revert(self) -> None:
        class NoAddressLedger:
            signer_address = SIGNER

            def deploy_contract(self, bytecode, args, fees):
                return TransactionHandle(tx_hash="0x01")

            def wait_for_receipt(self, handle, timeout):
                return TransactionReceipt(tx_hash=handle.tx_hash, block_number=1, gas_used=1, status=1)

        with self.assertRaises(RevertError):
            deploy_token(NoAddressLedger(), "0x6080", identity_lock=self.lock)


class TransferAndApproveTests(unittest.TestCase):
    def setUp(self) -> None:
        self.ledger = SimulatedLedger(SIGNER)
        self.token = self.ledger.install_token(initial_mint=parse_units("1000"))
        self.inspector = BalanceInspector(self.ledger, self.token)

    def test_default_amounts_and_snapshots(self) -> None:
        result = transfer_and_approve(
            self.ledger, self.inspector, identity_lock=SigningIdentityLock()
        )

        self.assertEqual(result.before.balance(DEFAULT_RECIPIENT), 0)
        self.assertEqual(result.after.balance(DEFAULT_RECIPIENT), parse_units("100"))
        self.assertEqual(result.after.balance(SIGNER), parse_units("900"))
        self.assertEqual(result.allowance, parse_units("50"))
        self.assertLess(
            result.transfer_receipt.block_number, result.approve_receipt.block_number
        )
        self.assertEqual(result.before.label, "Before")
        self.assertEqual(result.after.label, "After")

    def test_insufficient_balance_reverts_before_approve(self) -> None:
        with self.assertRaises(RevertError):
            transfer_and_approve(
                self.ledger,
                self.inspector,
                transfer_amount=parse_units("5000"),
                identity_lock=SigningIdentityLock(),
            )
        self.assertEqual(self.inspector.allowance(SIGNER, DEFAULT_RECIPIENT), 0)

    def test_negative_amount_is_rejected(self) -> None:
        with self.assertRaises(ConfigurationError):
            transfer_and_approve(self.ledger, self.inspector, approve_amount=-1)


class RecentEventsTests(unittest.TestCase):
    def setUp(self) -> None:
        self.ledger = SimulatedLedger(SIGNER)
        self.token = self.ledger.install_token(initial_mint=parse_units("1000"))
        transfer_and_approve(
            self.ledger,
            BalanceInspector(self.ledger, self.token),
            identity_lock=SigningIdentityLock(),
        )
        self.decoder = EventDecoder()

    def test_decodes_every_log_in_window(self) -> None:
        history = recent_events(self.ledger, self.decoder, self.token)

        self.assertEqual(history.from_block, 0)
        self.assertEqual(history.to_block, 3)
        kinds = [type(event) for event in history.events]
        self.assertEqual(kinds, [GenericEvent, TransferEvent, TransferEvent, ApprovalEvent])
        self.assertEqual(history.events[0].name, "RoleGranted")
        self.assertEqual(history.events[2].args["value"], parse_units("100"))

    def test_lookback_limits_window(self) -> None:
        history = recent_events(self.ledger, self.decoder, self.token, lookback=1)

        self.assertEqual(history.from_block, 2)
        self.assertEqual([event.block_number for event in history.events], [2, 3])

    def test_negative_lookback_is_rejected(self) -> None:
        with self.assertRaises(ConfigurationError):
            recent_events(self.ledger, self.decoder, self.token, lookback=-1)


if __name__ == "__main__":
    unittest.main()
