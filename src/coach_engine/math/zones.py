"""Power and pace zone calculations.

Zone model: Coggan 7-zone power levels anchored on FTP, mirrored onto
running pace through threshold pace / Critical Speed.
Reference: Coggan & Allen (2010), Training and Racing with a Power Meter.
"""

from __future__ import annotations

from coach_engine.models.enums import TrainingZone

# Power bounds as fraction of FTP: Coggan & Allen (2010)
POWER_ZONE_BOUNDS: dict[TrainingZone, tuple[float, float]] = {
    TrainingZone.ENDURANCE: (0.56, 0.75),
    TrainingZone.TEMPO: (0.76, 0.90),
    TrainingZone.THRESHOLD: (0.91, 1.05),
    TrainingZone.VO2MAX: (1.06, 1.20),
    TrainingZone.ANAEROBIC: (1.21, 1.50),
}


def zone_for_power_fraction(fraction: float) -> TrainingZone | None:
    """Zone containing a power fraction of FTP, None below endurance."""
    for zone, (low, high) in POWER_ZONE_BOUNDS.items():
        if low <= fraction <= high + 0.005:
            return zone
    if fraction > POWER_ZONE_BOUNDS[TrainingZone.ANAEROBIC][1]:
        return TrainingZone.ANAEROBIC
    return None


def format_pace(seconds_per_km: float) -> str:
    """Format a pace as m:ss."""
    total = int(round(seconds_per_km))
    return f"{total // 60}:{total % 60:02d}"
