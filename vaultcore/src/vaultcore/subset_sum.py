"""
Collateral combination planning over indivisible vault deposits.

Each vault is either used whole or not at all, so the amounts a user can post
as collateral are the subset sums of the vault values. Enumeration is exact and
exponential in the number of vaults; callers must stay within MAX_DEPOSIT_COUNT.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal, InvalidOperation
from itertools import combinations

from loguru import logger

from vaultcore.constants import MAX_DEPOSIT_COUNT, SATS_PER_BTC
from vaultcore.models import (
    CollateralPlan,
    DepositAmount,
    InvalidAmountError,
    InvalidStepCountError,
    TooManyDepositsError,
)


def _validate_amounts(amounts: Sequence[int], max_count: int) -> None:
    if len(amounts) > max_count:
        raise TooManyDepositsError(
            f"Cannot combine {len(amounts)} deposits, maximum is {max_count}"
        )
    for amount in amounts:
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise InvalidAmountError(f"Deposit amount must be an integer, got {amount!r}")
        if amount < 0:
            raise InvalidAmountError(f"Deposit amount cannot be negative: {amount}")


def subset_sums(amounts: Sequence[int], max_count: int = MAX_DEPOSIT_COUNT) -> list[int]:
    """
    Every total reachable by including or excluding each amount.

    Args:
        amounts: Deposit values in satoshis
        max_count: Largest number of amounts accepted

    Returns:
        Sorted, de-duplicated sums. Always starts with 0.

    Raises:
        InvalidAmountError: If an amount is negative or not an integer
        TooManyDepositsError: If len(amounts) exceeds max_count
    """
    _validate_amounts(amounts, max_count)

    sums = {0}
    for amount in amounts:
        sums |= {s + amount for s in sums}

    return sorted(sums)


def to_bounded_steps(sums: Sequence[int], max_step_count: int) -> list[int]:
    """
    Reduce achievable sums to at most max_step_count slider stops.

    The smallest and largest sums are always kept. Intermediate stops are
    sampled evenly by position in the sorted set, so every returned value is an
    achievable sum and the result is strictly increasing.
    """
    ordered = sorted(set(sums))
    if not ordered:
        return []
    if max_step_count < 1:
        raise InvalidStepCountError(f"Step count must be positive, got {max_step_count}")
    if len(ordered) <= max_step_count:
        return ordered
    if max_step_count < 2:
        raise InvalidStepCountError("At least 2 steps are needed to keep minimum and maximum")

    last = len(ordered) - 1
    intervals = max_step_count - 1
    # Rounded integer positions; spacing is > 1 so positions never repeat
    positions = [(i * last + intervals // 2) // intervals for i in range(max_step_count)]
    return [ordered[pos] for pos in positions]


def max_combinable_value(amounts: Sequence[int], max_count: int = MAX_DEPOSIT_COUNT) -> int:
    """Sum of all deposits, i.e. the largest achievable subset sum."""
    _validate_amounts(amounts, max_count)
    return sum(amounts)


def find_deposits_for_amount(
    amounts: Sequence[int], target: int, max_count: int = MAX_DEPOSIT_COUNT
) -> list[int] | None:
    """
    Find which deposits add up to exactly target.

    Returns:
        Indices into amounts of the smallest matching subset (lowest indices
        first among subsets of equal size), [] for a zero target, or None if
        no subset matches.
    """
    _validate_amounts(amounts, max_count)
    if isinstance(target, bool) or not isinstance(target, int) or target < 0:
        raise InvalidAmountError(f"Target must be a non-negative integer, got {target!r}")

    if target == 0:
        return []
    if target > sum(amounts):
        return None

    for size in range(1, len(amounts) + 1):
        for indices in combinations(range(len(amounts)), size):
            if sum(amounts[i] for i in indices) == target:
                return list(indices)

    return None


def plan_collateral(
    deposits: Sequence[DepositAmount],
    max_step_count: int,
    max_count: int = MAX_DEPOSIT_COUNT,
) -> CollateralPlan:
    """Achievable sums and slider steps for a list of vault deposits."""
    amounts = [deposit.value for deposit in deposits]
    sums = subset_sums(amounts, max_count)
    steps = to_bounded_steps(sums, max_step_count)

    logger.debug(
        f"Planned collateral for {len(deposits)} deposits: "
        f"{len(sums)} achievable sums, {len(steps)} steps, max {sums[-1]} sats"
    )
    return CollateralPlan(sums=sums, steps=steps, max_value=sums[-1])


def btc_to_sats(btc: Decimal | int | float | str) -> int:
    """
    Convert a BTC amount to satoshis without rounding.

    Raises:
        InvalidAmountError: On negative values or sub-satoshi precision
    """
    try:
        sats = Decimal(str(btc)) * SATS_PER_BTC
    except InvalidOperation as e:
        raise InvalidAmountError(f"Invalid BTC amount: {btc!r}") from e

    if not sats.is_finite() or sats < 0:
        raise InvalidAmountError(f"Invalid BTC amount: {btc!r}")
    if sats != sats.to_integral_value():
        raise InvalidAmountError(f"BTC amount has sub-satoshi precision: {btc!r}")
    return int(sats)


def sats_to_btc(sats: int) -> Decimal:
    """Convert satoshis to an exact BTC Decimal."""
    return Decimal(sats) / SATS_PER_BTC
