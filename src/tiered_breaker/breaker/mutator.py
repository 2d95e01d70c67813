"""State mutator: the hysteresis state machine over the shared record.

Applies FAILURE, SUCCESS and RESET transitions. Callers share nothing but
the database, so every transition is atomic at the storage layer:

- FAILURE: one upsert that increments the error count and clears the
  recovery streak, then, if a threshold was crossed, a guarded write that
  only ever raises the tier. Two racing failures may both decide to raise
  the tier; the second write finds it already there and does nothing.
- SUCCESS: read, decide and write inside one IMMEDIATE transaction, so a
  concurrent writer waits for the commit instead of being overwritten.
- RESET: one unconditional upsert back to full capacity.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Callable

from ..breaker_config import DEFAULT_CONFIG, HysteresisConfig, Tier, Transition
from ..exceptions import StorageUnavailable, UnknownOperation
from ..models import BreakerRecord, TransitionResult
from .hysteresis import SuccessDecision, degrade_on_failure, evaluate_success
from .reader import StateReader

if TYPE_CHECKING:
    from ..database import BreakerDB

logger = logging.getLogger(__name__)

RESET_MESSAGE = "System reset to Full Capacity"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class StateMutator:
    """Applies breaker transitions against the shared record.

    Usage:
        mutator = StateMutator(db)
        result = await mutator.apply_failure()
        if result.changed:
            logger.warning("now at tier %d", result.tier.value)

    Attributes:
        config: Threshold configuration.
    """

    def __init__(
        self,
        db: BreakerDB,
        config: HysteresisConfig | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the mutator.

        Args:
            db: Database holding the breaker record.
            config: Threshold configuration. Uses DEFAULT_CONFIG if None.
            clock: Source of mutation timestamps. Defaults to UTC now.
        """
        self._db = db
        self._reader = StateReader(db)
        self.config = config or DEFAULT_CONFIG
        self._clock = clock or _utc_now

    def _now(self) -> str:
        return self._clock().isoformat()

    async def apply(
        self,
        action: Transition | str,
        *,
        had_error_flag: bool = False,
    ) -> TransitionResult:
        """Apply a transition by name.

        Args:
            action: FAILURE, SUCCESS or RESET (case-insensitive).
            had_error_flag: Passed to apply_success for SUCCESS.

        Raises:
            UnknownOperation: If action names no known transition.
        """
        if isinstance(action, Transition):
            transition = action
        else:
            try:
                transition = Transition(str(action).upper())
            except ValueError:
                raise UnknownOperation(action) from None

        if transition is Transition.FAILURE:
            return await self.apply_failure()
        if transition is Transition.SUCCESS:
            return await self.apply_success(had_error_flag=had_error_flag)
        return await self.reset()

    async def apply_failure(self) -> TransitionResult:
        """Count a failure and degrade if a threshold was crossed."""
        now = self._now()
        row = await self._db.increment_error_count(now)
        previous = self._row_tier(row["tier"])
        error_count = int(row["error_count"])

        new_tier = degrade_on_failure(previous, error_count, self.config)
        changed = new_tier is not previous
        if changed:
            applied = await self._db.raise_tier(new_tier.value, now)
            if applied:
                await self._record_event(Transition.FAILURE, previous, new_tier, error_count, 0, now)
                logger.warning(
                    "Breaker degraded: tier %d -> %d (error_count=%d)",
                    previous.value,
                    new_tier.value,
                    error_count,
                )
            else:
                logger.debug("Tier %d already stored by a concurrent failure", new_tier.value)
        else:
            logger.debug("Failure recorded at tier %d (error_count=%d)", previous.value, error_count)

        return TransitionResult(
            action=Transition.FAILURE,
            tier=new_tier,
            error_count=error_count,
            recovery_points=0,
            changed=changed,
            last_updated=now,
            previous_tier=previous,
        )

    async def apply_success(self, had_error_flag: bool = False) -> TransitionResult:
        """Record a success and promote once the recovery streak is long enough.

        Args:
            had_error_flag: True if the request asked for a failure that a
                degraded tier absorbed (protected success).
        """
        now = self._now()
        decisions: list[tuple[BreakerRecord, SuccessDecision]] = []

        def decide(row: dict[str, Any]) -> tuple[int, int, int]:
            try:
                record = BreakerRecord.from_row(row)
            except ValueError as e:
                raise StorageUnavailable("apply_success", str(e)) from e
            decision = evaluate_success(record, had_error_flag, self.config)
            decisions.append((record, decision))
            return decision.tier.value, decision.error_count, decision.recovery_points

        before, _ = await self._db.apply_success_state(decide, now)

        if before is None:
            logger.debug("Breaker record initialized by first success")
            return TransitionResult(
                action=Transition.SUCCESS,
                tier=Tier.FULL_CAPACITY,
                error_count=0,
                recovery_points=0,
                changed=False,
                last_updated=now,
                previous_tier=Tier.FULL_CAPACITY,
            )

        record, decision = decisions[-1]
        changed = decision.tier is not record.tier
        if changed:
            await self._record_event(
                Transition.SUCCESS,
                record.tier,
                decision.tier,
                decision.error_count,
                decision.recovery_points,
                now,
            )
            self._log_success_change(record, decision.tier, decision.error_count)
        else:
            logger.debug(
                "Success recorded at tier %d (protected=%s, error_count=%d, recovery_points=%d)",
                record.tier.value,
                had_error_flag,
                decision.error_count,
                decision.recovery_points,
            )

        return TransitionResult(
            action=Transition.SUCCESS,
            tier=decision.tier,
            error_count=decision.error_count,
            recovery_points=decision.recovery_points,
            changed=changed,
            last_updated=now,
            previous_tier=record.tier,
        )

    async def reset(self) -> TransitionResult:
        """Force the breaker back to full capacity with cleared counters."""
        previous = (await self._reader.read()).tier
        now = self._now()
        row = await self._db.reset_breaker_state(now)
        await self._record_event(Transition.RESET, previous, Tier.FULL_CAPACITY, 0, 0, now)
        logger.info("Breaker manually reset to full capacity (was tier %d)", previous.value)

        return TransitionResult(
            action=Transition.RESET,
            tier=Tier.FULL_CAPACITY,
            error_count=0,
            recovery_points=0,
            changed=True,
            last_updated=str(row["last_updated"]),
            previous_tier=previous,
            message=RESET_MESSAGE,
        )

    @staticmethod
    def _row_tier(value: object) -> Tier:
        try:
            return Tier(int(value))  # type: ignore[call-overload]
        except (TypeError, ValueError) as e:
            raise StorageUnavailable("apply_failure", f"invalid stored tier {value!r}") from e

    @staticmethod
    def _log_success_change(record: BreakerRecord, new_tier: Tier, error_count: int) -> None:
        if new_tier.value < record.tier.value:
            logger.info(
                "Breaker promoted: tier %d -> %d after %d consecutive successes",
                record.tier.value,
                new_tier.value,
                record.recovery_points + 1,
            )
        else:
            logger.warning(
                "Breaker degraded by protected successes: tier %d -> %d (error_count=%d)",
                record.tier.value,
                new_tier.value,
                error_count,
            )

    async def _record_event(
        self,
        action: Transition,
        from_tier: Tier,
        to_tier: Tier,
        error_count: int,
        recovery_points: int,
        created_at: str,
    ) -> None:
        await self._db.record_breaker_event(
            action=action.value,
            from_tier=from_tier.value,
            to_tier=to_tier.value,
            error_count=error_count,
            recovery_points=recovery_points,
            created_at=created_at,
        )
