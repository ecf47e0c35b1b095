"""
UTXO classification: dust removal and inscription protection.

None of these functions raise. Values are taken as reported by the wallet;
negative or otherwise malformed records are passed through untouched.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from loguru import logger

from vaultcore.constants import LOW_VALUE_UTXO_THRESHOLD
from vaultcore.models import InscriptionMarker, InscriptionPartition, UnspentOutput


def filter_dust(
    outputs: Sequence[UnspentOutput], threshold: int = LOW_VALUE_UTXO_THRESHOLD
) -> list[UnspentOutput]:
    """Keep outputs strictly above threshold, preserving order."""
    return [utxo for utxo in outputs if utxo.value > threshold]


def build_inscription_index(markers: Iterable[InscriptionMarker]) -> set[str]:
    """Build a lookup set of "txid:vout" keys. Duplicates collapse."""
    return {marker.key for marker in markers}


def is_inscription_output(output: UnspentOutput, index: set[str]) -> bool:
    """Match on txid and vout together. txid comparison is case-sensitive."""
    return output.outpoint in index


def partition_by_inscription(
    outputs: Sequence[UnspentOutput], markers: Iterable[InscriptionMarker]
) -> InscriptionPartition:
    """
    Split outputs into available and inscribed.

    Both lists keep the relative order of the input. Markers that match no
    output are ignored.
    """
    index = build_inscription_index(markers)
    partition = InscriptionPartition()

    for utxo in outputs:
        if is_inscription_output(utxo, index):
            partition.inscribed.append(utxo)
        else:
            partition.available.append(utxo)

    return partition


def spendable_outputs(
    outputs: Sequence[UnspentOutput],
    markers: Iterable[InscriptionMarker],
    dust_threshold: int = LOW_VALUE_UTXO_THRESHOLD,
) -> list[UnspentOutput]:
    """
    Outputs safe to spend: non-dust and not carrying an inscription.

    Dust is removed first so that only the remaining outputs are checked
    against the inscription index.
    """
    non_dust = filter_dust(outputs, dust_threshold)
    partition = partition_by_inscription(non_dust, markers)

    logger.debug(
        f"Spendable outputs: {len(partition.available)}/{len(outputs)} "
        f"({len(outputs) - len(non_dust)} dust, {len(partition.inscribed)} inscribed)"
    )
    return partition.available


def calculate_balance(outputs: Iterable[UnspentOutput]) -> int:
    """Total value of outputs in satoshis."""
    return sum(utxo.value for utxo in outputs)
