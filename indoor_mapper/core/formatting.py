"""Human-readable formatting of route distances and walking durations."""

from indoor_mapper.constants import RoutingConfig


def format_distance(meters: float) -> str:
    """Format a distance: centimeters below 1 m, otherwise meters with one decimal."""
    if meters < 1:
        return f"{round(meters * 100)} cm"
    return f"{meters:.1f} m"


def format_duration(meters: float, speed_mps: float = RoutingConfig.WALKING_SPEED_MPS) -> str:
    """Format the walking time for a distance.

    Args:
        meters: Distance to walk
        speed_mps: Walking speed in meters per second

    Returns:
        "<s> sec" below one minute, otherwise "<m>m <s>s".
    """
    seconds = meters / speed_mps
    if seconds < 60:
        return f"{round(seconds)} sec"
    minutes = int(seconds // 60)
    remaining = round(seconds % 60)
    return f"{minutes}m {remaining}s"
