"""Interface schema of the capped, pausable campus token."""

from pathlib import Path
from typing import Dict, List, Tuple
import json

from .errors import ConfigurationError


def _param(name: str, abi_type: str, indexed: bool = False) -> Dict[str, object]:
    return {"name": name, "type": abi_type, "indexed": indexed, "internalType": abi_type}


def _function(
    name: str,
    inputs: List[Tuple[str, str]],
    outputs: List[str],
    mutability: str,
) -> Dict[str, object]:
    return {
        "type": "function",
        "name": name,
        "inputs": [{"name": arg, "type": kind, "internalType": kind} for arg, kind in inputs],
        "outputs": [{"name": "", "type": kind, "internalType": kind} for kind in outputs],
        "stateMutability": mutability,
    }


def _event(name: str, inputs: List[Dict[str, object]]) -> Dict[str, object]:
    return {"type": "event", "name": name, "inputs": inputs, "anonymous": False}


TOKEN_ABI: List[Dict[str, object]] = [
    {
        "type": "constructor",
        "inputs": [
            {"name": "name_", "type": "string", "internalType": "string"},
            {"name": "symbol_", "type": "string", "internalType": "string"},
            {"name": "cap_", "type": "uint256", "internalType": "uint256"},
            {"name": "admin", "type": "address", "internalType": "address"},
            {"name": "initialMint", "type": "uint256", "internalType": "uint256"},
        ],
        "stateMutability": "nonpayable",
    },
    _function("name", [], ["string"], "view"),
    _function("symbol", [], ["string"], "view"),
    _function("decimals", [], ["uint8"], "view"),
    _function("totalSupply", [], ["uint256"], "view"),
    _function("cap", [], ["uint256"], "view"),
    _function("paused", [], ["bool"], "view"),
    _function("balanceOf", [("account", "address")], ["uint256"], "view"),
    _function("allowance", [("owner", "address"), ("spender", "address")], ["uint256"], "view"),
    _function("transfer", [("to", "address"), ("value", "uint256")], ["bool"], "nonpayable"),
    _function("approve", [("spender", "address"), ("value", "uint256")], ["bool"], "nonpayable"),
    _function(
        "transferFrom",
        [("from", "address"), ("to", "address"), ("value", "uint256")],
        ["bool"],
        "nonpayable",
    ),
    _function(
        "airdrop",
        [("to", "address[]"), ("amounts", "uint256[]")],
        [],
        "nonpayable",
    ),
    _function("pause", [], [], "nonpayable"),
    _function("unpause", [], [], "nonpayable"),
    _event(
        "Transfer",
        [
            _param("from", "address", indexed=True),
            _param("to", "address", indexed=True),
            _param("value", "uint256"),
        ],
    ),
    _event(
        "Approval",
        [
            _param("owner", "address", indexed=True),
            _param("spender", "address", indexed=True),
            _param("value", "uint256"),
        ],
    ),
    _event("Paused", [_param("account", "address")]),
    _event("Unpaused", [_param("account", "address")]),
    _event(
        "RoleGranted",
        [
            _param("role", "bytes32", indexed=True),
            _param("account", "address", indexed=True),
            _param("sender", "address", indexed=True),
        ],
    ),
]


def event_abis(abi: List[Dict[str, object]]) -> Tuple[Dict[str, object], ...]:
    return tuple(entry for entry in abi if entry.get("type") == "event")


def load_artifact(path: Path) -> Tuple[List[Dict[str, object]], str]:
    """Read a Hardhat artifact and return its ABI and deployment bytecode."""

    if not path.exists():
        raise ConfigurationError(f"Artifact not found: {path}")
    data = json.loads(path.read_text())
    abi = data.get("abi")
    bytecode = data.get("bytecode")
    if not isinstance(abi, list) or not bytecode or bytecode == "0x":
        raise ConfigurationError(f"Artifact {path} must include an ABI and bytecode.")
    return abi, bytecode
