"""Internal constants shared across the library."""

DEFAULT_STEP_MINUTES = 10
DEFAULT_OPACITY = 0.4
DEFAULT_REQUEST_TIMEOUT = 30.0

BURN_LAYER_PREFIX = "phoenix"
ACTOR_LAYER_PREFIX = "pop"

# Paint key pushed on opacity changes. The surface maps it onto its own
# fill/extrusion property.
OPACITY_PAINT_KEY = "opacity"

# ------------------------------------------------------------------
# Burn styling
# ------------------------------------------------------------------

INTENSITY_PROPERTY = "E_INTSTY"
FLAME_HEIGHT_PROPERTY = "FLAME_HT"
FIRE_INTENSITY_LEVELS: tuple[tuple[int, str], ...] = ((0, "#ffc107"), (100000, "#dc3545"))
FLAME_HEIGHT_STOPS: tuple[tuple[int, int], ...] = ((0, 1), (300, 1000))

# ------------------------------------------------------------------
# Actor styling
# ------------------------------------------------------------------

ACTOR_RADIUS_STOPS: tuple[tuple[int, int], ...] = ((12, 2), (22, 180))
ACTOR_COLOR_PROPERTY = "color"

# ------------------------------------------------------------------
# Scenario clock  (HHMM -> minutes since midnight)
# ------------------------------------------------------------------


def hhmm_to_minutes(value: str | int) -> int:
    """Convert an ``HHMM`` clock value (``"0800"`` or ``800``) to minutes.

    Computed as ``floor(HHMM / 100) * 60 + HHMM % 100``.

    Raises :class:`ValueError` when *value* is not a non-negative integer.
    """
    if isinstance(value, bool):
        raise ValueError(f"HHMM must be an integer clock value, got {value!r}")
    text = str(value).strip()
    if not text.isdigit():
        raise ValueError(f"HHMM must be an integer clock value, got {value!r}")
    number = int(text)
    return (number // 100) * 60 + number % 100
