"""Linear interpolation of late price updates.

When a feed is poked later than its update tolerance allows, the fresh oracle
price is blended with the last stored value so the stored series stays evenly
spaced instead of jumping. The blend weights are time based:

    interpolated = (new * interval + previous * late_by) // (interval + late_by)

where ``late_by`` is the time elapsed since the update *should* have landed
and ``interval + late_by`` is the time since the previous stored point.
Division floors, matching the integer semantics used everywhere else.
"""

from __future__ import annotations


def is_update_late(now: int, next_available_update: int, update_tolerance: int) -> bool:
    """True when ``now`` is past the scheduled update by more than the tolerance."""
    return now > next_available_update + update_tolerance


def interpolate_delayed_price_update(
    current_price: int,
    update_interval: int,
    time_from_expected_update: int,
    previous_logged_price: int,
) -> int:
    """Time-weighted blend of the fresh price and the last stored price.

    ``time_from_expected_update == 0`` returns ``current_price`` exactly.
    """
    if update_interval <= 0:
        raise ValueError(f"update_interval must be positive: {update_interval}")
    if time_from_expected_update < 0:
        raise ValueError(
            f"time_from_expected_update must be non-negative: {time_from_expected_update}"
        )
    time_from_last_update = time_from_expected_update + update_interval
    return (
        current_price * update_interval + previous_logged_price * time_from_expected_update
    ) // time_from_last_update
