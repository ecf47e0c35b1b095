"""
Fee estimation for transactions spending known-value P2TR inputs.

Transaction shape:
- N P2TR inputs
- 1 P2TR payment output
- Optionally 1 P2TR change output (only if change stays above dust)

All satoshi quantities are integers. Products with the fee rate and the safety
margin are computed in Decimal and rounded up, so an estimate never underfunds
the transaction.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from decimal import ROUND_CEILING, Decimal

from loguru import logger

from vaultcore.constants import (
    DUST_THRESHOLD,
    FEE_SAFETY_MARGIN,
    FIXED_OVERHEAD_VSIZE,
    INPUT_VSIZE,
    OUTPUT_VSIZE,
)
from vaultcore.models import (
    EmptyInputsError,
    FeeEstimationRequest,
    FeeEstimationResult,
    InputSelection,
    InsufficientFundsError,
    InvalidAmountError,
    InvalidFeeRateError,
    UnspentOutput,
)


def _check_fee_rate(fee_rate: float) -> Decimal:
    if isinstance(fee_rate, bool) or not isinstance(fee_rate, (int, float)):
        raise InvalidFeeRateError(f"Fee rate must be a number, got {fee_rate!r}")
    if not math.isfinite(fee_rate) or fee_rate <= 0:
        raise InvalidFeeRateError(f"Fee rate must be positive, got {fee_rate}")
    # str() gives the shortest repr, so 2.1 becomes Decimal("2.1") not 2.100000000000000088...
    return Decimal(str(fee_rate))


def _check_positive(value: int, name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidAmountError(f"{name} must be a positive integer, got {value!r}")


def _ceil(value: Decimal) -> int:
    return int(value.to_integral_value(rounding=ROUND_CEILING))


def _fee_for_vsize(vsize: int, rate: Decimal) -> int:
    return _ceil(vsize * rate)


def _apply_margin(fee: int) -> int:
    return _ceil(fee * FEE_SAFETY_MARGIN)


def should_add_change_output(change_amount: int) -> bool:
    """Change is only worth an output if it stays above the dust threshold."""
    return change_amount > DUST_THRESHOLD


def estimate_fee_detailed(
    target_amount: int, input_values: Sequence[int], fee_rate: float
) -> FeeEstimationResult:
    """
    Estimate the fee for paying target_amount from the given inputs.

    Algorithm:
    1. Base fee for N inputs + 1 output + overhead
    2. If leftover after base fee is above dust, add the fee for a change output
    3. If that extra fee pushes the change to dust or below, revert to the base
       fee; the leftover goes to miners instead of becoming a dust output
    4. Apply the 10% safety margin

    Args:
        target_amount: Payment amount in satoshis
        input_values: Values of the inputs being spent, in satoshis
        fee_rate: Fee rate in sat/vB

    Returns:
        FeeEstimationResult with the margined fee and the change decision

    Raises:
        EmptyInputsError: If input_values is empty
        InvalidAmountError: If target or any input value is not a positive integer
        InvalidFeeRateError: If fee_rate is not a finite positive number
    """
    if not input_values:
        raise EmptyInputsError("At least one input is required to estimate a fee")
    _check_positive(target_amount, "Target amount")
    for value in input_values:
        _check_positive(value, "Input value")
    rate = _check_fee_rate(fee_rate)

    base_vsize = len(input_values) * INPUT_VSIZE + OUTPUT_VSIZE + FIXED_OVERHEAD_VSIZE
    base_fee = _fee_for_vsize(base_vsize, rate)
    total_input = sum(input_values)

    fee = base_fee
    vsize = base_vsize
    with_change = False

    if should_add_change_output(total_input - target_amount - base_fee):
        fee_with_change = base_fee + _fee_for_vsize(OUTPUT_VSIZE, rate)
        if should_add_change_output(total_input - target_amount - fee_with_change):
            fee = fee_with_change
            vsize = base_vsize + OUTPUT_VSIZE
            with_change = True
        else:
            logger.debug(
                f"Change output fee would leave dust "
                f"({total_input - target_amount - fee_with_change} sats), "
                f"absorbing leftover into fee"
            )

    final_fee = _apply_margin(fee)

    change_amount = 0
    if with_change:
        change_amount = total_input - target_amount - final_fee
        if not should_add_change_output(change_amount):
            # Margin ate into the change; leftover goes to miners
            with_change = False
            change_amount = 0
            vsize = base_vsize

    return FeeEstimationResult(
        fee=final_fee, has_change=with_change, change_amount=change_amount, vsize=vsize
    )


def estimate_fee(target_amount: int, input_values: Sequence[int], fee_rate: float) -> int:
    """Fee in satoshis (safety margin included). See estimate_fee_detailed."""
    return estimate_fee_detailed(target_amount, input_values, fee_rate).fee


def estimate_fee_for_request(request: FeeEstimationRequest) -> FeeEstimationResult:
    return estimate_fee_detailed(request.target_amount, request.input_values, request.fee_rate)


def max_possible_fee(fee_rate: float) -> int:
    """
    Worst-case fee for a single-input transaction: payment plus change output.

    Use it to pre-filter inputs (value >= amount + max_possible_fee) before
    running estimate_fee on the chosen one; the precise fee is never larger.
    """
    rate = _check_fee_rate(fee_rate)
    # Rounded per component like estimate_fee_detailed, so this stays an upper bound
    # for fractional rates
    base_fee = _fee_for_vsize(INPUT_VSIZE + OUTPUT_VSIZE + FIXED_OVERHEAD_VSIZE, rate)
    return _apply_margin(base_fee + _fee_for_vsize(OUTPUT_VSIZE, rate))


def max_spendable_amount(input_values: Sequence[int], fee_rate: float) -> int:
    """
    Largest payment that spending all inputs can fund.

    Spending everything leaves no change, so the fee is deterministic:
    all inputs + 1 output + overhead. No safety margin is applied.
    """
    rate = _check_fee_rate(fee_rate)
    if not input_values:
        return 0

    total = sum(input_values)
    vsize = len(input_values) * INPUT_VSIZE + OUTPUT_VSIZE + FIXED_OVERHEAD_VSIZE
    return max(0, total - _fee_for_vsize(vsize, rate))


def select_inputs(
    outputs: Sequence[UnspentOutput], target_amount: int, fee_rate: float
) -> InputSelection:
    """
    Select outputs to pay target_amount, largest first.

    The fee is re-estimated after every added input since each input grows the
    transaction. Selection stops as soon as the inputs cover amount plus fee.
    The result always balances: total_value == target_amount + fee + change_amount.
    When no change output is made, fee is the full leftover.

    Raises:
        InsufficientFundsError: If all outputs together cannot cover amount plus fee
    """
    _check_positive(target_amount, "Target amount")
    _check_fee_rate(fee_rate)

    candidates = sorted(
        (utxo for utxo in outputs if utxo.value > 0), key=lambda u: u.value, reverse=True
    )
    if not candidates:
        raise InsufficientFundsError(needed=target_amount, available=0)

    selected: list[UnspentOutput] = []
    total = 0
    fee = 0

    for utxo in candidates:
        selected.append(utxo)
        total += utxo.value

        estimate = estimate_fee_detailed(target_amount, [u.value for u in selected], fee_rate)
        fee = estimate.fee
        if total >= target_amount + fee:
            change_amount = estimate.change_amount
            if not estimate.has_change:
                # Without a change output the whole leftover is paid to miners
                fee = total - target_amount
                change_amount = 0
            logger.debug(
                f"Selected {len(selected)} inputs totalling {total} sats, "
                f"fee {fee} sats, change {change_amount} sats"
            )
            return InputSelection(
                selected=selected,
                total_value=total,
                fee=fee,
                change_amount=change_amount,
            )

    raise InsufficientFundsError(needed=target_amount + fee, available=total)
