"""Decide what to do about destination files that already exist.

Batches get one decision for all conflicts: overwrite everything or abort
everything. Single-item generation asks about its one file and skips it on
a "no".
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable

from .models import BatchDecision

logger = logging.getLogger(__name__)

# exists(path) -> bool; pure predicate.
ExistenceCheck = Callable[[str], bool]
# confirm_overwrite(conflicting_paths) -> True to overwrite. May block on a human.
OverwriteConfirm = Callable[[list[str]], bool]


def find_conflicts(paths: Iterable[str], exists: ExistenceCheck) -> list[str]:
    """Return the planned paths that already exist, in planned order, once each."""
    return [path for path in dict.fromkeys(paths) if exists(path)]


def evaluate(
    planned_paths: Iterable[str],
    exists: ExistenceCheck,
    confirm_overwrite: OverwriteConfirm,
) -> BatchDecision:
    """One overwrite-or-abort decision for a whole batch."""
    return decide(find_conflicts(planned_paths, exists), confirm_overwrite)


def decide(conflicts: list[str], confirm_overwrite: OverwriteConfirm) -> BatchDecision:
    """Turn already-found conflicts into a batch decision. Asks at most once."""
    if not conflicts:
        return BatchDecision.OVERWRITE_ALL

    logger.info("%d destination(s) already exist", len(conflicts))
    if confirm_overwrite(conflicts):
        return BatchDecision.OVERWRITE_ALL
    return BatchDecision.ABORT


def should_write(
    path: str,
    exists: ExistenceCheck,
    confirm_overwrite: OverwriteConfirm,
) -> bool:
    """Single-item rule: write new files, ask once about an existing one."""
    if not exists(path):
        return True
    return bool(confirm_overwrite([path]))
