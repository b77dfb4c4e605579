"""
Compliance pooling (Article 21).

Ships pool their compliance balances for a year so that surplus covers
deficit across the group. A pool is admissible when:

1. the sum of member balances is not negative;
2. no deficit ship exits with a larger deficit than it entered;
3. no surplus ship exits with a deficit.

Allocation is a greedy sweep: members sorted by balance (surplus first),
each donor pays the largest remaining deficits from the bottom of the list
until it is exhausted. ``allocate`` is pure; ``PoolAllocator.create_pool``
persists a pool only once every rule holds.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .errors import Reason
from .ports import LedgerStore
from .results import Pool, PoolMember, PoolMemberInput, PoolResult, PoolValidation
from .rounding import round5

logger = logging.getLogger(__name__)


@dataclass
class PoolMemberAllocation:
    ship_id: str
    cb_before: float
    cb_after: float


def validate_members(members: Sequence[PoolMemberInput]) -> PoolValidation:
    """Pre-allocation checks on the member list."""
    if not members:
        return PoolValidation(
            is_valid=False,
            message="Pool must have at least one member.",
            reason=Reason.INVALID_MEMBERS,
        )

    seen = set()
    for m in members:
        if m.ship_id in seen:
            return PoolValidation(
                is_valid=False,
                message=f"Ship {m.ship_id} appears more than once in the pool.",
                reason=Reason.INVALID_MEMBERS,
            )
        seen.add(m.ship_id)

    total = round5(sum(m.cb_before for m in members))
    if total < 0:
        return PoolValidation(
            is_valid=False,
            message=f"Pool total CB is negative ({total}). Cannot create pool.",
            reason=Reason.POOL_NEGATIVE,
        )

    return PoolValidation(is_valid=True)


def allocate(members: Sequence[PoolMemberInput]) -> List[PoolMemberAllocation]:
    """
    Redistribute balances from surplus to deficit members.

    Members are stably sorted by cb_before, descending. For each donor i
    with a positive balance, receivers j are scanned from the end of the
    list (j > i) and paid min(donor, |receiver|) until the donor is empty.

    Returns:
        Allocations in sorted order
    """
    ordered = sorted(members, key=lambda m: m.cb_before, reverse=True)
    allocations = [
        PoolMemberAllocation(ship_id=m.ship_id, cb_before=m.cb_before, cb_after=m.cb_before)
        for m in ordered
    ]

    for i, donor in enumerate(allocations):
        if donor.cb_after <= 0:
            continue

        for j in range(len(allocations) - 1, i, -1):
            receiver = allocations[j]
            if receiver.cb_after >= 0:
                continue

            transfer = min(donor.cb_after, abs(receiver.cb_after))
            donor.cb_after = round5(donor.cb_after - transfer)
            receiver.cb_after = round5(receiver.cb_after + transfer)

            if donor.cb_after <= 0:
                break

    return allocations


def check_allocation(allocations: Sequence[PoolMemberAllocation]) -> PoolValidation:
    """Post-allocation rules; any violation invalidates the whole pool."""
    for a in allocations:
        if a.cb_before < 0 and a.cb_after < a.cb_before:
            return PoolValidation(
                is_valid=False,
                message=(
                    f"Deficit ship {a.ship_id} would exit worse than entry "
                    f"({a.cb_before} -> {a.cb_after})."
                ),
                reason=Reason.DEFICIT_WORSENED,
            )
        if a.cb_before > 0 and a.cb_after < 0:
            return PoolValidation(
                is_valid=False,
                message=(
                    f"Surplus ship {a.ship_id} would exit with deficit "
                    f"({a.cb_before} -> {a.cb_after})."
                ),
                reason=Reason.SURPLUS_NEGATIVE,
            )
    return PoolValidation(is_valid=True)


class PoolAllocator:
    """Validates, allocates and persists compliance pools."""

    def __init__(self, store: LedgerStore):
        self.store = store

    def validate(self, members: Sequence[PoolMemberInput]) -> PoolValidation:
        return validate_members(members)

    def create_pool(self, year: int, members: Sequence[PoolMemberInput]) -> PoolResult:
        total_before = round5(sum(m.cb_before for m in members))

        validation = validate_members(members)
        if not validation.is_valid:
            return self._rejected(year, total_before, validation)

        allocations = allocate(members)
        check = check_allocation(allocations)
        if not check.is_valid:
            return self._rejected(year, total_before, check)

        pool_members = [
            PoolMember(ship_id=a.ship_id, cb_before=a.cb_before, cb_after=a.cb_after)
            for a in allocations
        ]
        total_after = round5(sum(a.cb_after for a in allocations))

        with self.store.transaction():
            pool = self.store.create_pool(year, total_before, total_after, pool_members)

        logger.info(
            "Created pool %s for %s with %d members (total CB %s -> %s)",
            pool.id, year, len(pool.members), total_before, total_after,
        )
        return PoolResult(
            is_valid=True,
            year=year,
            total_cb_before=pool.total_cb_before,
            total_cb_after=pool.total_cb_after,
            members=pool.members,
            pool_id=pool.id,
        )

    def get_pool(self, pool_id: str) -> Optional[Pool]:
        return self.store.get_pool(pool_id)

    @staticmethod
    def _rejected(year: int, total_before: float, validation: PoolValidation) -> PoolResult:
        logger.warning("Pool for %s rejected: %s", year, validation.message)
        return PoolResult(
            is_valid=False,
            year=year,
            total_cb_before=total_before,
            total_cb_after=0.0,
            message=validation.message,
            reason=validation.reason,
        )
