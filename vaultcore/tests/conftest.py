"""
Pytest configuration and fixtures for vaultcore tests.
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Iterator

import pytest
from loguru import logger

from vaultcore.models import InscriptionMarker, UnspentOutput


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """CLI commands replace loguru sinks; restore a plain stderr sink afterwards."""
    yield
    logger.remove()
    logger.add(sys.stderr, level="INFO")


@pytest.fixture
def make_utxo() -> Callable[..., UnspentOutput]:
    def _make(txid: str, vout: int, value: int, script_pubkey: str = "0014abc123") -> UnspentOutput:
        return UnspentOutput(txid=txid, vout=vout, value=value, script_pubkey=script_pubkey)

    return _make


@pytest.fixture
def make_marker() -> Callable[[str, int], InscriptionMarker]:
    def _make(txid: str, vout: int) -> InscriptionMarker:
        return InscriptionMarker(txid=txid, vout=vout)

    return _make


@pytest.fixture
def sample_txid() -> str:
    return "4a5e1e4baab89f3a32518a88c31bc87f618f76673e2cc77ab2127b7afdeda33b"
