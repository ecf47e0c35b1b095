"""
vaultcore - Collateral selection and fee estimation for BTC vaults

Decides which UTXOs are spendable, which collateral totals whole vaults can
form, and what fee a spending transaction must carry.
"""

__version__ = "0.1.0"

from vaultcore.constants import (
    DUST_THRESHOLD,
    FEE_SAFETY_MARGIN,
    FIXED_OVERHEAD_VSIZE,
    INPUT_VSIZE,
    LOW_VALUE_UTXO_THRESHOLD,
    MAX_DEPOSIT_COUNT,
    OUTPUT_VSIZE,
)
from vaultcore.fees import (
    estimate_fee,
    estimate_fee_detailed,
    estimate_fee_for_request,
    max_possible_fee,
    max_spendable_amount,
    select_inputs,
    should_add_change_output,
)
from vaultcore.models import (
    CollateralPlan,
    DepositAmount,
    EmptyInputsError,
    FeeEstimationRequest,
    FeeEstimationResult,
    InputSelection,
    InscriptionMarker,
    InscriptionPartition,
    InsufficientFundsError,
    InvalidAmountError,
    InvalidFeeRateError,
    InvalidStepCountError,
    TooManyDepositsError,
    UnspentOutput,
    VaultCoreError,
)
from vaultcore.subset_sum import (
    btc_to_sats,
    find_deposits_for_amount,
    max_combinable_value,
    plan_collateral,
    sats_to_btc,
    subset_sums,
    to_bounded_steps,
)
from vaultcore.utxo_filter import (
    build_inscription_index,
    calculate_balance,
    filter_dust,
    is_inscription_output,
    partition_by_inscription,
    spendable_outputs,
)

__all__ = [
    "CollateralPlan",
    "DepositAmount",
    "DUST_THRESHOLD",
    "EmptyInputsError",
    "FEE_SAFETY_MARGIN",
    "FIXED_OVERHEAD_VSIZE",
    "FeeEstimationRequest",
    "FeeEstimationResult",
    "INPUT_VSIZE",
    "InputSelection",
    "InscriptionMarker",
    "InscriptionPartition",
    "InsufficientFundsError",
    "InvalidAmountError",
    "InvalidFeeRateError",
    "InvalidStepCountError",
    "LOW_VALUE_UTXO_THRESHOLD",
    "MAX_DEPOSIT_COUNT",
    "OUTPUT_VSIZE",
    "TooManyDepositsError",
    "UnspentOutput",
    "VaultCoreError",
    "btc_to_sats",
    "build_inscription_index",
    "calculate_balance",
    "estimate_fee",
    "estimate_fee_detailed",
    "estimate_fee_for_request",
    "filter_dust",
    "find_deposits_for_amount",
    "is_inscription_output",
    "max_combinable_value",
    "max_possible_fee",
    "max_spendable_amount",
    "partition_by_inscription",
    "plan_collateral",
    "sats_to_btc",
    "select_inputs",
    "should_add_change_output",
    "spendable_outputs",
    "subset_sums",
    "to_bounded_steps",
]
