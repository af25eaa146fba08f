"""Behaviour tests for the in-memory token ledger."""

import unittest

from ledger_adapter.ethereum.errors import ConfirmationTimeoutError, RevertError, SubmissionError
from ledger_adapter.ethereum.models import FeeParams, TransactionRequest
from ledger_adapter.ethereum.simulator import GasSchedule, SimulatedLedger, SimulationError

SIGNER = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
ALICE = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"
BOB = "0x3C44CdDdB6a900fa2b585dd299e03d12FA4293BC"
TOKEN = 10**18


class SimulatedLedgerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.ledger = SimulatedLedger(SIGNER)
        self.token = self.ledger.install_token(initial_mint=1_000 * TOKEN, cap=2_000 * TOKEN)
        self.fees = FeeParams.from_gwei(2, 22)

    def _send(self, function, *args):
        handle = self.ledger.submit_transaction(
            TransactionRequest(target=self.token, function=function, args=args, fees=self.fees)
        )
        return self.ledger.wait_for_receipt(handle, timeout=5)

    def test_install_token_mints_to_signer(self) -> None:
        self.assertEqual(self.ledger.read_state(self.token, "balanceOf", (SIGNER,)), 1_000 * TOKEN)
        self.assertEqual(self.ledger.read_state(self.token, "totalSupply"), 1_000 * TOKEN)
        self.assertEqual(self.ledger.read_state(self.token, "cap"), 2_000 * TOKEN)
        self.assertEqual(self.ledger.read_state(self.token, "symbol"), "CAMP")
        self.assertEqual(self.ledger.current_block_height(), 1)

    def test_transfer_moves_balance_and_charges_gas(self) -> None:
        receipt = self._send("transfer", ALICE, 10 * TOKEN)

        schedule = GasSchedule()
        self.assertTrue(receipt.succeeded)
        self.assertEqual(receipt.gas_used, schedule.base + schedule.transfer)
        self.assertEqual(receipt.block_number, 2)
        self.assertEqual(self.ledger.read_state(self.token, "balanceOf", (ALICE,)), 10 * TOKEN)
        self.assertGreater(receipt.cost_wei, 0)

    def test_airdrop_mints_for_each_recipient(self) -> None:
        receipt = self._send("airdrop", [ALICE, BOB, ALICE], [1 * TOKEN, 2 * TOKEN, 3 * TOKEN])

        schedule = GasSchedule()
        expected_gas = schedule.base + schedule.airdrop_base + 3 * schedule.airdrop_per_recipient
        self.assertEqual(receipt.gas_used, expected_gas)
        self.assertEqual(self.ledger.read_state(self.token, "balanceOf", (ALICE,)), 4 * TOKEN)
        self.assertEqual(self.ledger.read_state(self.token, "balanceOf", (BOB,)), 2 * TOKEN)

    def test_insufficient_balance_reverts_with_receipt(self) -> None:
        with self.assertRaises(RevertError) as ctx:
            self._send("transfer", ALICE, 5_000 * TOKEN)
        self.assertIsNotNone(ctx.exception.receipt)
        self.assertEqual(ctx.exception.receipt.status, 0)
        self.assertEqual(self.ledger.read_state(self.token, "balanceOf", (ALICE,)), 0)

    def test_airdrop_over_cap_reverts(self) -> None:
        with self.assertRaises(RevertError):
            self._send("airdrop", [ALICE], [1_500 * TOKEN])

    def test_paused_token_rejects_transfers(self) -> None:
        self._send("pause")
        with self.assertRaises(RevertError):
            self._send("transfer", ALICE, 1)
        self._send("unpause")
        self.assertTrue(self._send("transfer", ALICE, 1).succeeded)

    def test_unconfirmed_transaction_blocks_next_submission(self) -> None:
        request = TransactionRequest(
            target=self.token, function="transfer", args=(ALICE, 1), fees=self.fees
        )
        first = self.ledger.submit_transaction(request)
        with self.assertRaises(SubmissionError):
            self.ledger.submit_transaction(request)
        self.ledger.wait_for_receipt(first, timeout=5)
        self.ledger.submit_transaction(request)

    def test_low_priority_fee_rejected_before_inclusion(self) -> None:
        ledger = SimulatedLedger(SIGNER, min_priority_fee_per_gas=3 * 10**9)
        token = ledger.install_token(initial_mint=100)
        height = ledger.current_block_height()
        with self.assertRaises(SubmissionError):
            ledger.submit_transaction(
                TransactionRequest(target=token, function="transfer", args=(ALICE, 1), fees=self.fees)
            )
        self.assertEqual(ledger.current_block_height(), height)

    def test_withheld_receipt_times_out(self) -> None:
        self.ledger.withhold_receipts = True
        handle = self.ledger.submit_transaction(
            TransactionRequest(target=self.token, function="transfer", args=(ALICE, 1), fees=self.fees)
        )
        with self.assertRaises(ConfirmationTimeoutError) as ctx:
            self.ledger.wait_for_receipt(handle, timeout=3)
        self.assertIsInstance(ctx.exception, TimeoutError)
        self.assertEqual(ctx.exception.tx_hash, handle.tx_hash)

    def test_logs_are_filtered_by_block_range(self) -> None:
        self._send("transfer", ALICE, 1)
        self._send("approve", BOB, 2)

        all_logs = self.ledger.fetch_logs(self.token, 0, self.ledger.current_block_height())
        self.assertEqual(len(all_logs), 4)
        latest = self.ledger.fetch_logs(self.token, 3, 3)
        self.assertEqual(len(latest), 1)
        self.assertEqual(latest[0].block_number, 3)

    def test_unknown_contract_and_reads_fail(self) -> None:
        with self.assertRaises(SubmissionError):
            self.ledger.submit_transaction(
                TransactionRequest(target=ALICE, function="transfer", args=(BOB, 1), fees=self.fees)
            )
        with self.assertRaises(SimulationError):
            self.ledger.read_state(self.token, "owner")


if __name__ == "__main__":
    unittest.main()
