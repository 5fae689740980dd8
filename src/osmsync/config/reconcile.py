"""Reconciliation behaviour settings."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_flag


@dataclass(frozen=True, slots=True)
class ReconcileConfig:
    """Knobs for the element reconciler.

    ``match_points_by_position`` controls whether interchange points that carry no
    OSM id are reused when a stored node sits at exactly the same position.
    """

    match_points_by_position: bool = True


def get_reconcile_config() -> ReconcileConfig:
    return ReconcileConfig(
        match_points_by_position=env_flag("OSMSYNC_MATCH_POINTS_BY_POSITION", default=True),
    )
