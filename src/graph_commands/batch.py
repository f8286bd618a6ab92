"""Run a command over many targets, one at a time, without letting one bad item stop the rest."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

from .errors import (
    AmbiguousMimeTypeError,
    GraphCommandError,
    MissingTargetError,
    TransportError,
    UnresolvableTargetError,
)

logger = logging.getLogger(__name__)

# reported and skipped; ParameterError aborts the batch. A 404 is a
# TransportError like any other here; update and delete handle theirs earlier.
SKIPPABLE = (MissingTargetError, UnresolvableTargetError, AmbiguousMimeTypeError)


@dataclass
class BatchReport:
    results: list = field(default_factory=list)
    warnings: list[GraphCommandError] = field(default_factory=list)
    errors: list[TransportError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def run_batch(items: Iterable[Any], func: Callable[[Any], Any], label: str = "item") -> BatchReport:
    """Call ``func`` on each item in order and collect what came back.

    ``func`` may return a single result, a list of results, or None. An
    empty ``items`` raises MissingTargetError before anything runs.
    """
    items = list(items)
    if not items:
        raise MissingTargetError(f"No {label} given")

    report = BatchReport()
    for index, item in enumerate(items):
        try:
            result = func(item)
        except SKIPPABLE as exc:
            logger.warning("Skipping %s %d: %s", label, index, exc)
            report.warnings.append(exc)
            continue
        except TransportError as exc:
            logger.error("Failed on %s %d: %s", label, index, exc)
            report.errors.append(exc)
            continue

        if result is None:
            continue
        if isinstance(result, list):
            report.results.extend(result)
        else:
            report.results.append(result)
    return report
