import logging
from typing import Callable, List, Optional, Tuple

from busseats.schemas.layout import Layout, LayoutConfig, Seat, SeatPosition, SideGroup

logger = logging.getLogger(__name__)

# (config field, seat number prefix, side, level), in emission order
SEAT_GROUPS: Tuple[Tuple[str, str, str, str], ...] = (
    ("left_upper_seats", "LU", "left", "upper"),
    ("left_lower_seats", "LL", "left", "lower"),
    ("right_upper_seats", "RU", "right", "upper"),
    ("right_lower_seats", "RL", "right", "lower"),
)

LAYOUT_FIELDS = ("rows",) + tuple(group[0] for group in SEAT_GROUPS)

SLEEPER_CLASSES = ("sleeper", "semi-sleeper")


def seat_number_for(prefix: str, row: int, seat: int, seats_in_group: int) -> str:
    if seats_in_group > 1:
        return f"{prefix}{row}-{seat}"
    return f"{prefix}{row}"


def total_seats_in_layout(config: LayoutConfig) -> int:
    return config.configured_total


def matches_expected(config: LayoutConfig, expected_total: int) -> bool:
    """True when the config accounts for exactly ``expected_total`` seats."""
    return config.configured_total == expected_total and config.configured_total > 0


def default_config(bus_type: Optional[str] = None) -> LayoutConfig:
    if bus_type in SLEEPER_CLASSES:
        return LayoutConfig(rows=10, left_upper_seats=1, left_lower_seats=1, right_upper_seats=1, right_lower_seats=1)
    return LayoutConfig(rows=10, left_upper_seats=0, left_lower_seats=2, right_upper_seats=0, right_lower_seats=2)


def _check_counts(config: LayoutConfig):
    for field in LAYOUT_FIELDS:
        if getattr(config, field) < 0:
            raise ValueError(f"{field} must not be negative, got {getattr(config, field)}")


def generate(config: LayoutConfig) -> Layout:
    """Build the full seat map for ``config``.

    Numbering is positional (``LU3``, ``RL3-2``) so the same config always
    yields the same seats in the same order. Totals are not checked here;
    callers gate acceptance on :func:`matches_expected`.
    """
    _check_counts(config)
    groups = {(side, level): [] for _, _, side, level in SEAT_GROUPS}
    for row in range(1, config.rows + 1):
        for field, prefix, side, level in SEAT_GROUPS:
            count = getattr(config, field)
            for seat in range(1, count + 1):
                groups[(side, level)].append(
                    Seat(
                        seat_number=seat_number_for(prefix, row, seat, count),
                        seat_type=level,
                        position=SeatPosition(row=row, side=side, level=level, seat=seat),
                    )
                )
    return Layout(
        left=SideGroup(upper=groups[("left", "upper")], lower=groups[("left", "lower")]),
        right=SideGroup(upper=groups[("right", "upper")], lower=groups[("right", "lower")]),
        total_rows=config.rows,
    )


class SeatLayoutBuilder:
    """Operator editing session for a vehicle's seat structure.

    Every change to the row count or a per-group count re-runs the
    generator, but only while the configured total matches the vehicle's
    declared seat count. Until then the builder stays in ``mismatch``.
    """

    def __init__(
        self,
        expected_total: int,
        config: Optional[LayoutConfig] = None,
        bus_type: Optional[str] = None,
        on_layout_change: Optional[Callable[[Layout], None]] = None,
    ):
        self.expected_total = expected_total
        self.config = config or default_config(bus_type)
        self.on_layout_change = on_layout_change
        self.layout: Optional[Layout] = None
        self._regenerate()

    @property
    def configured_total(self) -> int:
        return total_seats_in_layout(self.config)

    @property
    def status(self) -> str:
        return "match" if matches_expected(self.config, self.expected_total) else "mismatch"

    def update(self, **changes) -> Optional[Layout]:
        """Apply field changes; returns the new layout if one was generated."""
        unknown = set(changes) - set(LAYOUT_FIELDS)
        if unknown:
            raise ValueError(f"unknown layout fields: {sorted(unknown)}")
        new_config = self.config.model_copy(update={k: int(v or 0) for k, v in changes.items()})
        if new_config == self.config:
            return None
        self.config = new_config
        return self._regenerate()

    def _regenerate(self) -> Optional[Layout]:
        if not matches_expected(self.config, self.expected_total):
            logger.info(
                "Seat layout not ready: configured %s of %s seats",
                self.configured_total,
                self.expected_total,
            )
            return None
        self.layout = generate(self.config)
        if self.on_layout_change:
            self.on_layout_change(self.layout)
        return self.layout
