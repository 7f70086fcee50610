"""Bounded polling until the instance reaches the planned status."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from ec2dev.constants import POLL_INTERVAL_SECONDS, POLL_MAX_ATTEMPTS, InstanceStatus
from ec2dev.core.models import Instance
from ec2dev.core.transition import InstanceInspector

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Converged:
    """The instance reached the target status."""

    instance: Instance
    attempts: int

    converged = True


@dataclass(frozen=True)
class TimedOut:
    """Attempts ran out; ``instance`` is the last observed snapshot."""

    instance: Instance
    attempts: int

    converged = False


PollResult = Converged | TimedOut


class ConvergencePoller:
    """Re-inspect the instance until it reaches a target status.

    The first attempt runs immediately and consecutive attempts are separated
    by ``interval`` seconds, so ``n`` attempts sleep ``n - 1`` times. Errors
    from the inspector are not retried.

    Parameters
    ----------
    inspector : InstanceInspector
        Source of fresh instance snapshots
    max_attempts : int
        Number of describe calls before giving up
    interval : float
        Seconds to sleep between attempts
    sleep : Callable[[float], None]
        Sleep function, replaceable in tests
    """

    def __init__(
        self,
        inspector: InstanceInspector,
        max_attempts: int = POLL_MAX_ATTEMPTS,
        interval: float = POLL_INTERVAL_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        self.inspector = inspector
        self.max_attempts = max_attempts
        self.interval = interval
        self.sleep = sleep

    def wait(self, instance_id: str, target: InstanceStatus) -> PollResult:
        """Poll until ``target`` is observed or attempts are exhausted.

        Returns
        -------
        Converged | TimedOut
            Tagged outcome carrying the last observed instance
        """
        instance = None

        for attempt in range(1, self.max_attempts + 1):
            if attempt > 1:
                self.sleep(self.interval)

            instance = self.inspector.inspect(instance_id)
            logger.debug(
                "Poll %d/%d: %s is %s",
                attempt,
                self.max_attempts,
                instance_id,
                instance.state,
            )

            if instance.status is target:
                return Converged(instance=instance, attempts=attempt)

        logger.warning(
            "Instance %s did not reach %s after %d attempts (last state: %s)",
            instance_id,
            target.value,
            self.max_attempts,
            instance.state,
        )
        return TimedOut(instance=instance, attempts=self.max_attempts)
