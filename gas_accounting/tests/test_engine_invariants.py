"""Invariant tests for the gas accounting engine."""

import random
import unittest
from decimal import Decimal

from gas_accounting.engine import GasAccountingError, compare_gas, compare_receipts
from ledger_adapter.ethereum.models import TransactionReceipt


class GasAccountingInvariantTests(unittest.TestCase):
    def test_batched_saves_a_quarter(self) -> None:
        report = compare_gas(150_000, [50_000, 50_000, 50_000, 50_000])

        self.assertEqual(report.individual_total, 200_000)
        self.assertEqual(report.saved, 50_000)
        self.assertEqual(report.percent_saved, Decimal(25))
        self.assertEqual(report.percent_saved_display, "25.00")

    def test_zero_individual_total(self) -> None:
        report = compare_gas(0, [])
        self.assertEqual(report.individual_total, 0)
        self.assertEqual(report.percent_saved_display, "0.00")

        report = compare_gas(21_000, [0, 0])
        self.assertEqual(report.saved, -21_000)
        self.assertEqual(report.percent_saved, Decimal(0))
        self.assertEqual(report.percent_saved_display, "0.00")

    def test_negative_savings_not_clamped(self) -> None:
        report = compare_gas(225_000, [50_000, 50_000, 50_000, 50_000])

        self.assertEqual(report.saved, -25_000)
        self.assertEqual(report.percent_saved_display, "-12.50")

    def test_display_rounds_to_two_places(self) -> None:
        report = compare_gas(200_000, [100_000, 200_000])
        self.assertEqual(report.percent_saved_display, "33.33")
        report = compare_gas(1, [3])
        self.assertEqual(report.percent_saved_display, "66.67")

    def test_random_inputs_hold_report_identities(self) -> None:
        rng = random.Random(20240611)
        for _ in range(500):
            batched = rng.randint(0, 2_000_000)
            individual = [rng.randint(0, 500_000) for _ in range(rng.randint(0, 12))]
            if rng.random() < 0.1:
                individual = [0] * len(individual)

            report = compare_gas(batched, individual)

            total = sum(individual)
            self.assertEqual(report.individual_total, total)
            self.assertEqual(report.saved, total - batched)
            if total == 0:
                self.assertEqual(report.percent_saved, 0)
                self.assertEqual(report.percent_saved_display, "0.00")
            else:
                self.assertEqual(report.percent_saved, Decimal(total - batched) * 100 / total)
                self.assertEqual(report.saved < 0, report.percent_saved < 0)

    def test_invalid_inputs_rejected(self) -> None:
        with self.assertRaises(GasAccountingError):
            compare_gas(-1, [10])
        with self.assertRaises(GasAccountingError):
            compare_gas(10, [5, -5])
        with self.assertRaises(GasAccountingError):
            compare_gas(10.5, [5])

    def test_receipts_contribute_costs(self) -> None:
        batch = TransactionReceipt(
            tx_hash="0x01", block_number=1, gas_used=100, status=1, effective_gas_price=3
        )
        singles = [
            TransactionReceipt(
                tx_hash=f"0x0{index}", block_number=index, gas_used=60, status=1, effective_gas_price=2
            )
            for index in (2, 3)
        ]

        report = compare_receipts(batch, singles)

        self.assertEqual(report.individual_total, 120)
        self.assertEqual(report.saved, 20)
        self.assertEqual(report.batched_cost_wei, 300)
        self.assertEqual(report.individual_cost_wei, 240)
        self.assertEqual(report.cost_saved_wei, -60)
        self.assertEqual(report.to_dict()["percent_saved"], "16.67")


if __name__ == "__main__":
    unittest.main()
