"""Governor registry and governor-gated parameter changes.

The governor set is stored as a list plus an index map. Membership checks
are a dict lookup and removal swaps the departing entry with the last one
before popping, so both are O(1). Order carries no meaning.

The registry does not stop the last governor from removing themselves; once
empty, every gated operation is permanently unreachable.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

import structlog

from cpamm.constants import MAX_FEE_BPS
from cpamm.errors import (
    DuplicateGovernor,
    InvalidFee,
    InvalidGovernorAddress,
    InvalidTwapInterval,
    NotGovernor,
    UnknownGovernor,
    require_int,
)
from cpamm.interfaces import Clock
from cpamm.models.events import (
    EventRecord,
    FeeChanged,
    GovernorAdded,
    GovernorRemoved,
    TwapIntervalChanged,
)
from cpamm.models.types import is_valid_address, is_zero_address, normalize_address
from cpamm.params import PoolParameters

logger = structlog.get_logger()


@dataclass(frozen=True)
class GovernorState:
    """Registry contents, used for rollback."""

    members: tuple[str, ...]


class GovernorRegistry:
    """Set of accounts allowed to change protocol parameters."""

    def __init__(
        self,
        deployer: str,
        params: PoolParameters,
        clock: Clock,
        emit: Callable[[EventRecord], None],
    ) -> None:
        deployer = normalize_address(deployer)
        if not is_valid_address(deployer) or is_zero_address(deployer):
            raise InvalidGovernorAddress(f"Invalid deployer address: {deployer}")
        self._members: list[str] = [deployer]
        self._index: dict[str, int] = {deployer: 0}
        self._params = params
        self._clock = clock
        self._emit = emit

    def __len__(self) -> int:
        return len(self._members)

    def __contains__(self, account: object) -> bool:
        return isinstance(account, str) and self.is_governor(account)

    def is_governor(self, account: str) -> bool:
        return normalize_address(account) in self._index

    def governors(self) -> list[str]:
        """Current governors (unordered)."""
        return list(self._members)

    def require_governor(self, caller: str) -> str:
        """Return the normalized caller, or raise NotGovernor."""
        caller = normalize_address(caller)
        if caller not in self._index:
            raise NotGovernor(f"{caller} is not a governor")
        return caller

    # --- Membership ---

    def add_governor(self, caller: str, account: str) -> None:
        """Grant governor rights to ``account``.

        Raises:
            NotGovernor: If caller is not a governor
            InvalidGovernorAddress: If account is malformed or the zero address
            DuplicateGovernor: If account is already a governor
        """
        caller = self.require_governor(caller)
        account = normalize_address(account)
        if not is_valid_address(account) or is_zero_address(account):
            raise InvalidGovernorAddress(f"Invalid governor address: {account}")
        if account in self._index:
            raise DuplicateGovernor(f"{account} is already a governor")

        self._index[account] = len(self._members)
        self._members.append(account)

        logger.info("governor_added", governor=caller, account=account)
        self._emit(GovernorAdded(timestamp=self._clock.now(), governor=caller, account=account))

    def remove_governor(self, caller: str, account: str) -> None:
        """Revoke governor rights from ``account``.

        Raises:
            NotGovernor: If caller is not a governor
            UnknownGovernor: If account is not a governor
        """
        caller = self.require_governor(caller)
        account = normalize_address(account)
        position = self._index.get(account)
        if position is None:
            raise UnknownGovernor(f"{account} is not a governor")

        last = self._members[-1]
        self._members[position] = last
        self._index[last] = position
        self._members.pop()
        del self._index[account]

        if not self._members:
            logger.warning("governor_set_empty", removed=account)
        logger.info("governor_removed", governor=caller, account=account)
        self._emit(GovernorRemoved(timestamp=self._clock.now(), governor=caller, account=account))

    # --- Gated parameters ---

    def set_fee(self, caller: str, fee_bps: int) -> None:
        """Change the swap fee.

        Raises:
            NotGovernor: If caller is not a governor
            InvalidFee: If fee_bps is outside [0, 10000)
        """
        caller = self.require_governor(caller)
        require_int(fee_bps, "fee_bps", InvalidFee)
        if not (0 <= fee_bps <= MAX_FEE_BPS):
            raise InvalidFee(f"fee_bps must be in [0, {MAX_FEE_BPS}]: {fee_bps}")

        old = self._params.fee_bps
        self._params.fee_bps = fee_bps

        logger.info("fee_changed", governor=caller, old_fee_bps=old, new_fee_bps=fee_bps)
        self._emit(
            FeeChanged(
                timestamp=self._clock.now(),
                governor=caller,
                old_fee_bps=old,
                new_fee_bps=fee_bps,
            )
        )

    def set_twap_interval(self, caller: str, seconds: int) -> None:
        """Change the minimum spacing between TWAP samples.

        Raises:
            NotGovernor: If caller is not a governor
            InvalidTwapInterval: If seconds is negative
        """
        caller = self.require_governor(caller)
        require_int(seconds, "seconds", InvalidTwapInterval)
        if seconds < 0:
            raise InvalidTwapInterval(f"TWAP interval must be non-negative: {seconds}")

        old = self._params.twap_interval_seconds
        self._params.twap_interval_seconds = seconds

        logger.info("twap_interval_changed", governor=caller, old=old, new=seconds)
        self._emit(
            TwapIntervalChanged(
                timestamp=self._clock.now(),
                governor=caller,
                old_interval_seconds=old,
                new_interval_seconds=seconds,
            )
        )

    # --- Rollback support ---

    def snapshot(self) -> GovernorState:
        return GovernorState(members=tuple(self._members))

    def restore(self, state: GovernorState) -> None:
        self._members = list(state.members)
        self._index = {account: i for i, account in enumerate(self._members)}
