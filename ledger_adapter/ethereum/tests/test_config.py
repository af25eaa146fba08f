"""Configuration loading must fail fast and never touch the network."""

import json
import tempfile
import unittest
from pathlib import Path

from ledger_adapter.ethereum.abi import load_artifact
from ledger_adapter.ethereum.config import DeploymentSettings, load_config
from ledger_adapter.ethereum.errors import ConfigurationError
from ledger_adapter.ethereum.models import FeeParams

KEY = "ac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"


class LoadConfigTests(unittest.TestCase):
    def _environ(self, **overrides):
        environ = {
            "RPC_URL": "http://127.0.0.1:8545",
            "CHAIN_ID": "31337",
            "PRIVATE_KEY": "0x" + KEY,
            "TOKEN_ADDRESS": "0x5fbdb2315678afecb367f032d93f642f64180aa3",
        }
        environ.update(overrides)
        return {key: value for key, value in environ.items() if value is not None}

    def test_complete_environment(self) -> None:
        config = load_config(self._environ())
        self.assertEqual(config.chain_id, 31337)
        self.assertEqual(config.private_key, KEY)
        self.assertEqual(config.token_address, "0x5FbDB2315678afecb367f032d93F642f64180aa3")
        self.assertEqual(config.chain_name, "didlab-31337")
        self.assertEqual(config.receipt_timeout, 120.0)

    def test_missing_values_are_listed(self) -> None:
        with self.assertRaises(ConfigurationError) as ctx:
            load_config(self._environ(RPC_URL=None, PRIVATE_KEY=None))
        self.assertIn("RPC_URL", str(ctx.exception))
        self.assertIn("PRIVATE_KEY", str(ctx.exception))

    def test_token_optional_for_deployment(self) -> None:
        config = load_config(self._environ(TOKEN_ADDRESS=None), require_token=False)
        self.assertIsNone(config.token_address)
        with self.assertRaises(ConfigurationError):
            config.require_token()
        with self.assertRaises(ConfigurationError):
            load_config(self._environ(TOKEN_ADDRESS=None))

    def test_invalid_values_rejected(self) -> None:
        with self.assertRaises(ConfigurationError):
            load_config(self._environ(CHAIN_ID="didlab"))
        with self.assertRaises(ConfigurationError):
            load_config(self._environ(PRIVATE_KEY="1234"))
        with self.assertRaises(ConfigurationError):
            load_config(self._environ(TOKEN_ADDRESS="0x1234"))
        with self.assertRaises(ConfigurationError):
            load_config(self._environ(RECEIPT_TIMEOUT="-1"))

    def test_deployment_settings_defaults(self) -> None:
        settings = DeploymentSettings.from_env({"TOKEN_SYMBOL": "CRED"})
        self.assertEqual(settings.name, "CampusCredit")
        self.assertEqual(settings.symbol, "CRED")
        self.assertEqual(settings.cap, "2000000")
        self.assertEqual(settings.initial_mint, "1000000")


class FeeParamsTests(unittest.TestCase):
    def test_fee_ordering_enforced(self) -> None:
        fees = FeeParams.from_gwei(2, 22)
        self.assertEqual(fees.max_fee_per_gas, 22 * 10**9)
        with self.assertRaises(ConfigurationError):
            FeeParams(max_priority_fee_per_gas=5, max_fee_per_gas=4)
        with self.assertRaises(ConfigurationError):
            FeeParams(max_priority_fee_per_gas=-1, max_fee_per_gas=4)

    def test_from_gwei_converts_exactly(self) -> None:
        fees = FeeParams.from_gwei("1.5", 20)
        self.assertEqual(fees.max_priority_fee_per_gas, 1_500_000_000)
        self.assertEqual(fees.max_fee_per_gas, 20_000_000_000)
        with self.assertRaises(ValueError):
            FeeParams.from_gwei(-1, 20)


class ArtifactTests(unittest.TestCase):
    def test_load_artifact(self) -> None:
        with tempfile.TemporaryDirectory() as tempdir:
            path = Path(tempdir) / "CampusCreditV2.json"
            path.write_text(json.dumps({"abi": [], "bytecode": "0x6080"}))
            abi, bytecode = load_artifact(path)
            self.assertEqual(abi, [])
            self.assertEqual(bytecode, "0x6080")

            path.write_text(json.dumps({"abi": [], "bytecode": "0x"}))
            with self.assertRaises(ConfigurationError):
                load_artifact(path)
            with self.assertRaises(ConfigurationError):
                load_artifact(Path(tempdir) / "missing.json")


if __name__ == "__main__":
    unittest.main()
