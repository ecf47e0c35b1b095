"""
Core data models for collateral selection and fee estimation.

Wallet-sourced records (outputs, inscription markers) are plain frozen
dataclasses and are not validated: the wallet or indexer that produced them owns
that. Caller-constructed inputs (deposits, fee requests) use Pydantic.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, Field, PositiveInt


class VaultCoreError(Exception):
    """Base class for contract violations raised by vaultcore."""

    pass


class InvalidAmountError(VaultCoreError, ValueError):
    """Raised when a satoshi amount is negative, zero where forbidden, or not an integer."""

    pass


class InvalidFeeRateError(VaultCoreError, ValueError):
    """Raised when a fee rate is not a finite positive number."""

    pass


class EmptyInputsError(VaultCoreError, ValueError):
    """Raised when a fee estimate is requested without any inputs."""

    pass


class TooManyDepositsError(VaultCoreError, ValueError):
    """Raised when subset enumeration is asked to cover more deposits than allowed."""

    pass


class InvalidStepCountError(VaultCoreError, ValueError):
    """Raised when a step sequence cannot keep both endpoints."""

    pass


class InsufficientFundsError(VaultCoreError):
    """Raised when the available outputs cannot cover an amount plus its fee."""

    def __init__(self, needed: int, available: int):
        self.needed = needed
        self.available = available
        super().__init__(f"Insufficient funds: need {needed} sats, have {available} sats")


@dataclass(frozen=True)
class UnspentOutput:
    """A spendable unit of Bitcoin value as reported by a wallet or indexer"""

    txid: str
    vout: int
    value: int
    script_pubkey: str = ""

    @property
    def outpoint(self) -> str:
        return f"{self.txid}:{self.vout}"

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> UnspentOutput:
        """
        Build from a mempool/esplora style JSON record.

        Accepts both ``scriptPubKey`` (wallet providers) and ``scriptpubkey``
        (esplora) spellings; the script is optional.
        """
        script = record.get("scriptPubKey", record.get("scriptpubkey", ""))
        return cls(
            txid=record["txid"],
            vout=int(record["vout"]),
            value=int(record["value"]),
            script_pubkey=script or "",
        )


@dataclass(frozen=True)
class InscriptionMarker:
    """Identifies an output carrying an inscription that must not be spent"""

    txid: str
    vout: int

    @property
    def key(self) -> str:
        return f"{self.txid}:{self.vout}"

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> InscriptionMarker:
        return cls(txid=record["txid"], vout=int(record["vout"]))


@dataclass
class InscriptionPartition:
    """Outputs split by inscription membership, each list in input order"""

    available: list[UnspentOutput] = field(default_factory=list)
    inscribed: list[UnspentOutput] = field(default_factory=list)


@dataclass
class InputSelection:
    """Result of input selection"""

    selected: list[UnspentOutput]
    total_value: int
    fee: int
    change_amount: int


@dataclass
class CollateralPlan:
    """Achievable collateral totals for a set of deposits"""

    sums: list[int]
    steps: list[int]
    max_value: int


class DepositAmount(BaseModel):
    """Confirmed value held by one vault. Included or excluded as a whole."""

    value: PositiveInt
    source_id: str = Field(default="", description="Opaque identifier, e.g. the peg-in txid")

    model_config = {"frozen": True}


class FeeEstimationRequest(BaseModel):
    target_amount: PositiveInt
    input_values: list[PositiveInt] = Field(..., min_length=1)
    fee_rate: float = Field(..., gt=0, allow_inf_nan=False, description="sat/vB")


class FeeEstimationResult(BaseModel):
    fee: int = Field(..., ge=0, description="Fee in sats, safety margin included")
    has_change: bool
    change_amount: int = Field(default=0, ge=0)
    vsize: int = Field(..., gt=0)
