"""
Bitcoin and vault collateral constants.

Two dust thresholds are kept apart on purpose:
- LOW_VALUE_UTXO_THRESHOLD: wallet-level filter for outputs not worth offering
  as spendable balance (application policy)
- DUST_THRESHOLD: protocol-level limit below which a change output is never
  created (relay policy)
"""

from __future__ import annotations

from decimal import Decimal

# Wallet display filter: outputs at or below this value are hidden from the
# spendable set. This is an application policy, not a Bitcoin protocol rule.
LOW_VALUE_UTXO_THRESHOLD = 10_000  # satoshis

# Standard dust limit in Bitcoin Core. A change output at or below this value
# is not created; the leftover goes to miners instead.
DUST_THRESHOLD = 546  # satoshis

# Transaction size components in vbytes (P2TR inputs and outputs)
# Input: outpoint (36) + scriptSig len (1) + sequence (4) + witness (~16)
INPUT_VSIZE = 58
# Output: value (8) + scriptPubKey len (1) + OP_1 <32-byte key> (34)
OUTPUT_VSIZE = 43
# Version (4) + input count (1) + output count (1) + locktime (4) + segwit marker (1)
FIXED_OVERHEAD_VSIZE = 11

# 10% buffer applied to the final fee to absorb size estimation error and
# fee market movement between estimation and broadcast
FEE_SAFETY_MARGIN = Decimal("1.10")

# Upper bound on the number of deposits fed to subset enumeration (2^n sums)
MAX_DEPOSIT_COUNT = 20

SATS_PER_BTC = 100_000_000
