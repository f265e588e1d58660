"""Amount allocation between a plan's total and its installments.

Two entry points mirror the two ways a user sizes a plan: pick a duration
(the count drives the amount) or type a payout amount (the amount drives the
count). Both are pure.

Known limitation of the even split: ``allocate_by_count`` rounds to cents
without reconciling, so ``count * payout_amount`` may differ from the total
by up to ``count * 0.01``. ``installment_amounts`` can let the last
installment absorb that difference.
"""

import logging
from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal

from . import constants
from .exceptions import InvalidAllocation

logger = logging.getLogger(__name__)


def round2(amount: Decimal) -> Decimal:
    """Round an amount to cents, half up."""
    return amount.quantize(constants.CENTS_PRECISION, rounding=ROUND_HALF_UP)


def allocate_by_count(total_amount: Decimal, installment_count: int) -> Decimal:
    """
    Split a total evenly across a number of installments.

    Args:
        total_amount: Sum locked into the plan
        installment_count: Number of installments

    Returns:
        Per-installment amount rounded to cents

    Raises:
        InvalidAllocation: If total_amount is not positive or installment_count < 1
    """
    if total_amount <= 0:
        raise InvalidAllocation(f"total_amount must be positive, got {total_amount}")
    if installment_count < constants.MIN_INSTALLMENTS:
        raise InvalidAllocation(f"installment_count must be at least 1, got {installment_count}")

    payout_amount = round2(Decimal(total_amount) / Decimal(installment_count))
    logger.debug(
        "Allocated %s over %d installments: %s each",
        total_amount,
        installment_count,
        payout_amount,
    )
    return payout_amount


def allocate_by_amount(total_amount: Decimal, payout_amount: Decimal) -> int:
    """
    Derive how many whole installments of payout_amount fit in the total.

    Any remainder is not scheduled; see ``unallocated_remainder``.

    Raises:
        InvalidAllocation: If an amount is not positive or not even one
            installment fits
    """
    if payout_amount <= 0:
        raise InvalidAllocation(f"payout_amount must be positive, got {payout_amount}")
    if total_amount <= 0:
        raise InvalidAllocation(f"total_amount must be positive, got {total_amount}")

    installment_count = int(
        (Decimal(total_amount) / Decimal(payout_amount)).to_integral_value(rounding=ROUND_DOWN)
    )
    if installment_count == 0:
        raise InvalidAllocation(
            f"payout_amount {payout_amount} exceeds total_amount {total_amount}"
        )

    logger.debug(
        "Payout amount %s fits %d times into %s",
        payout_amount,
        installment_count,
        total_amount,
    )
    return installment_count


def unallocated_remainder(
    total_amount: Decimal,
    payout_amount: Decimal,
    installment_count: int,
) -> Decimal:
    """Return the part of the total not covered by the scheduled installments."""
    return total_amount - payout_amount * installment_count


def installment_amounts(
    total_amount: Decimal,
    payout_amount: Decimal,
    installment_count: int,
    absorb_remainder: bool = True,
) -> list[Decimal]:
    """
    List the amount paid at each installment.

    With absorb_remainder the final installment is adjusted so the amounts
    sum exactly to total_amount. Only use it for an even split; an
    overridden payout amount leaves its remainder unscheduled.
    """
    if installment_count < constants.MIN_INSTALLMENTS:
        raise InvalidAllocation(f"installment_count must be at least 1, got {installment_count}")

    amounts = [payout_amount] * installment_count
    if absorb_remainder:
        amounts[-1] = total_amount - payout_amount * (installment_count - 1)
    return amounts
