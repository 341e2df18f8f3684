"""A minimal in-process runner for assembled units.

Runs every case of every unit in order and records the outcome. Used by the
``contractsuite run`` command and by functional tests; the pytest plugin is
the full-featured engine.
"""

from __future__ import annotations

import enum
import logging
import traceback
from collections.abc import Iterable
from dataclasses import dataclass, field

from contractsuite.logging import running_case
from contractsuite.service_layer.units import RunnableUnit

logger = logging.getLogger(__name__)


class Outcome(enum.Enum):
    """Result kind of one case."""

    PASSED = "passed"
    FAILED = "failed"  # an assertion did not hold
    ERROR = "error"  # anything else was raised


@dataclass(frozen=True)
class CaseResult:
    """The recorded result of one case."""

    unit: str
    name: str
    outcome: Outcome
    error: BaseException | None = field(default=None, compare=False)

    @property
    def passed(self) -> bool:
        return self.outcome is Outcome.PASSED

    @property
    def nodeid(self) -> str:
        """``unit::case`` identifier, pytest style."""
        return f"{self.unit}::{self.name}"

    def format_error(self) -> str:
        """Return the formatted traceback of the error, or an empty string."""
        if self.error is None:
            return ""
        return "".join(traceback.format_exception(self.error))


def run_units(units: Iterable[RunnableUnit]) -> list[CaseResult]:
    """Run every case of `units`, in order.

    Exceptions raised by a case are recorded, never propagated, except for
    `KeyboardInterrupt` and `SystemExit`.

    Returns:
        One result per case, in execution order.
    """
    results: list[CaseResult] = []
    for unit in units:
        for case in unit.cases():
            nodeid = f"{case.unit}::{case.name}"
            try:
                with running_case(nodeid):
                    case.run()
            except AssertionError as e:
                outcome, error = Outcome.FAILED, e
            except Exception as e:  # pylint: disable=broad-except
                outcome, error = Outcome.ERROR, e
            else:
                outcome, error = Outcome.PASSED, None
            logger.debug("%s %s", nodeid, outcome.value)
            results.append(CaseResult(case.unit, case.name, outcome, error))
    return results


def summarize(results: Iterable[CaseResult]) -> dict[Outcome, int]:
    """Count results per outcome; every outcome is present."""
    counts = {outcome: 0 for outcome in Outcome}
    for result in results:
        counts[result.outcome] += 1
    return counts
