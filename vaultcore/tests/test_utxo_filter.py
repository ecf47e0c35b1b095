"""
Tests for vaultcore.utxo_filter
"""

from __future__ import annotations

from vaultcore.constants import LOW_VALUE_UTXO_THRESHOLD
from vaultcore.utxo_filter import (
    build_inscription_index,
    calculate_balance,
    filter_dust,
    is_inscription_output,
    partition_by_inscription,
    spendable_outputs,
)


class TestFilterDust:
    """Tests for dust filtering."""

    def test_filters_below_default_threshold(self, make_utxo) -> None:
        """Values at or below 10,000 sats are dust."""
        utxos = [
            make_utxo("tx1", 0, 5000),
            make_utxo("tx2", 0, 10000),
            make_utxo("tx3", 0, 10001),
            make_utxo("tx4", 0, 50000),
        ]

        result = filter_dust(utxos)

        assert [u.txid for u in result] == ["tx3", "tx4"]

    def test_custom_threshold(self, make_utxo) -> None:
        utxos = [make_utxo("tx1", 0, 500), make_utxo("tx2", 0, 1000), make_utxo("tx3", 0, 1001)]

        result = filter_dust(utxos, 1000)

        assert [u.txid for u in result] == ["tx3"]

    def test_zero_threshold(self, make_utxo) -> None:
        utxos = [make_utxo("tx1", 0, 1), make_utxo("tx2", 0, 0)]

        result = filter_dust(utxos, 0)

        assert len(result) == 1
        assert result[0].value == 1

    def test_boundary(self, make_utxo) -> None:
        """Exactly at threshold is excluded, one above is kept."""
        at = make_utxo("tx1", 0, 10000)
        above = make_utxo("tx2", 0, 10001)

        assert filter_dust([at], 10000) == []
        assert filter_dust([above], 10000) == [above]

    def test_all_dust(self, make_utxo) -> None:
        utxos = [make_utxo("tx1", 0, 100), make_utxo("tx2", 0, 9999)]
        assert filter_dust(utxos) == []

    def test_empty(self) -> None:
        assert filter_dust([]) == []

    def test_negative_values_treated_as_dust(self, make_utxo) -> None:
        """Malformed values are not rejected, they simply fail the comparison."""
        assert filter_dust([make_utxo("tx1", 0, -5)]) == []

    def test_default_threshold_constant(self) -> None:
        assert LOW_VALUE_UTXO_THRESHOLD == 10_000


class TestInscriptionIndex:
    """Tests for inscription index construction and lookup."""

    def test_keys(self, make_marker) -> None:
        index = build_inscription_index(
            [make_marker("abc123", 0), make_marker("def456", 1), make_marker("ghi789", 2)]
        )
        assert index == {"abc123:0", "def456:1", "ghi789:2"}

    def test_duplicates_collapse(self, make_marker) -> None:
        index = build_inscription_index([make_marker("abc123", 0), make_marker("abc123", 0)])
        assert len(index) == 1

    def test_same_txid_different_vouts(self, make_marker) -> None:
        index = build_inscription_index([make_marker("abc123", v) for v in range(3)])
        assert len(index) == 3

    def test_empty(self) -> None:
        assert build_inscription_index([]) == set()

    def test_match(self, make_utxo, make_marker) -> None:
        index = build_inscription_index([make_marker("abc123", 0)])
        assert is_inscription_output(make_utxo("abc123", 0, 10000), index)

    def test_no_match_other_txid(self, make_utxo, make_marker) -> None:
        index = build_inscription_index([make_marker("def456", 0)])
        assert not is_inscription_output(make_utxo("abc123", 0, 10000), index)

    def test_matches_txid_and_vout_together(self, make_utxo, make_marker) -> None:
        """Shared txid with a different vout must not match."""
        index = build_inscription_index([make_marker("abc", 0)])
        assert not is_inscription_output(make_utxo("abc", 1, 10000), index)

    def test_case_sensitive_txid(self, make_utxo, make_marker) -> None:
        index = build_inscription_index([make_marker("abc123", 0)])
        assert not is_inscription_output(make_utxo("ABC123", 0, 10000), index)

    def test_empty_index(self, make_utxo) -> None:
        assert not is_inscription_output(make_utxo("abc123", 0, 10000), set())


class TestPartitionByInscription:
    """Tests for splitting outputs into available and inscribed."""

    def test_separates(self, make_utxo, make_marker) -> None:
        utxos = [make_utxo("tx1", 0, 10000), make_utxo("tx2", 0, 20000), make_utxo("tx3", 0, 30000)]

        result = partition_by_inscription(utxos, [make_marker("tx1", 0), make_marker("tx3", 0)])

        assert [u.txid for u in result.available] == ["tx2"]
        assert [u.txid for u in result.inscribed] == ["tx1", "tx3"]

    def test_no_markers(self, make_utxo) -> None:
        utxos = [make_utxo("tx1", 0, 10000), make_utxo("tx2", 0, 20000)]

        result = partition_by_inscription(utxos, [])

        assert result.available == utxos
        assert result.inscribed == []

    def test_all_inscribed(self, make_utxo, make_marker) -> None:
        utxos = [make_utxo("tx1", 0, 10000), make_utxo("tx2", 0, 20000)]

        result = partition_by_inscription(utxos, [make_marker("tx1", 0), make_marker("tx2", 0)])

        assert result.available == []
        assert len(result.inscribed) == 2

    def test_unmatched_markers_ignored(self, make_utxo, make_marker) -> None:
        utxos = [make_utxo("tx1", 0, 10000)]
        markers = [make_marker("tx1", 0), make_marker("tx2", 0), make_marker("tx3", 0)]

        result = partition_by_inscription(utxos, markers)

        assert result.available == []
        assert len(result.inscribed) == 1

    def test_empty_inputs(self, make_marker) -> None:
        result = partition_by_inscription([], [make_marker("tx1", 0)])
        assert result.available == []
        assert result.inscribed == []

    def test_preserves_order(self, make_utxo, make_marker) -> None:
        utxos = [make_utxo(f"tx{i}", 0, 10000 * i) for i in range(1, 5)]

        result = partition_by_inscription(utxos, [make_marker("tx2", 0)])

        assert [u.txid for u in result.available] == ["tx1", "tx3", "tx4"]
        assert [u.txid for u in result.inscribed] == ["tx2"]

    def test_completeness_large_set(self, make_utxo, make_marker) -> None:
        utxos = [make_utxo(f"tx{i}", 0, 50000 + i) for i in range(1000)]
        markers = [make_marker(f"tx{i * 10}", 0) for i in range(100)]

        result = partition_by_inscription(utxos, markers)

        assert len(result.available) + len(result.inscribed) == len(utxos)
        assert len(result.inscribed) == 100
        assert not set(result.available) & set(result.inscribed)
        assert set(result.available) | set(result.inscribed) == set(utxos)

    def test_same_txid_different_vouts(self, make_utxo, make_marker) -> None:
        utxos = [make_utxo("tx1", v, 10000 * (v + 1)) for v in range(3)]

        result = partition_by_inscription(utxos, [make_marker("tx1", 1)])

        assert len(result.available) == 2
        assert [u.vout for u in result.inscribed] == [1]

    def test_idempotent(self, make_utxo, make_marker) -> None:
        utxos = [make_utxo(f"tx{i}", i, 20000 + i) for i in range(10)]
        markers = [make_marker("tx3", 3), make_marker("tx7", 7)]

        assert partition_by_inscription(utxos, markers) == partition_by_inscription(utxos, markers)


class TestSpendableOutputs:
    """Tests for the dust + inscription composition."""

    def test_filters_dust_and_inscriptions(self, make_utxo, make_marker) -> None:
        utxos = [
            make_utxo("tx1", 0, 5000),
            make_utxo("tx2", 0, 50000),
            make_utxo("tx3", 0, 100000),
            make_utxo("tx4", 0, 200000),
        ]

        result = spendable_outputs(utxos, [make_marker("tx2", 0)])

        assert [u.txid for u in result] == ["tx3", "tx4"]

    def test_custom_dust_threshold(self, make_utxo) -> None:
        utxos = [make_utxo("tx1", 0, 500), make_utxo("tx2", 0, 1500)]

        result = spendable_outputs(utxos, [], 1000)

        assert [u.txid for u in result] == ["tx2"]

    def test_all_dust_or_inscribed(self, make_utxo, make_marker) -> None:
        utxos = [make_utxo("tx1", 0, 5000), make_utxo("tx2", 0, 50000)]
        assert spendable_outputs(utxos, [make_marker("tx2", 0)]) == []

    def test_inscribed_dust_is_just_dust(self, make_utxo, make_marker) -> None:
        utxos = [make_utxo("tx1", 0, 100), make_utxo("tx2", 0, 50000)]

        result = spendable_outputs(utxos, [make_marker("tx1", 0)])

        assert [u.txid for u in result] == ["tx2"]

    def test_empty(self, make_marker) -> None:
        assert spendable_outputs([], []) == []
        assert spendable_outputs([], [make_marker("tx1", 0)]) == []


def test_calculate_balance(make_utxo) -> None:
    utxos = [make_utxo("tx1", 0, 15000), make_utxo("tx2", 1, 25000)]
    assert calculate_balance(utxos) == 40000
    assert calculate_balance([]) == 0
