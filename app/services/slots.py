from dataclasses import dataclass

from app.services.conflicts import has_conflict
from app.services.exceptions import InvalidRangeError
from app.utils.time_utils import format_display, format_storage


@dataclass(frozen=True)
class SlotGrid:
    """The daily booking grid: [start, end) in minutes, stepped by `step`."""
    start: int
    end: int
    step: int

    @classmethod
    def from_config(cls, config):
        return cls(
            start=config['WORKING_HOURS_START'] * 60,
            end=config['WORKING_HOURS_END'] * 60,
            step=config['SLOT_STEP_MINUTES'],
        )

    def points(self):
        return grid_points(self.start, self.end, self.step)

    def validate(self, start: int, end: int):
        """Raise InvalidRangeError unless [start, end) is a non-empty range inside the grid."""
        slots_occupied(start, end, self.start, self.step, self.end)


def grid_points(grid_start: int, grid_end: int, step: int) -> list:
    """Every slot start of the day."""
    if step <= 0:
        raise InvalidRangeError("Slot step must be positive.")
    return list(range(grid_start, grid_end, step))


def slots_occupied(start: int, end: int, grid_start: int, grid_step: int, grid_end: int = None) -> list:
    """
    Grid-aligned slot starts whose [slot, slot + step) intersects [start, end).

    Out-of-grid intervals are rejected rather than clamped.
    """
    if grid_step <= 0:
        raise InvalidRangeError("Slot step must be positive.")
    if start >= end:
        raise InvalidRangeError("Start time must be before end time.")
    if start < grid_start or (grid_end is not None and end > grid_end):
        raise InvalidRangeError(
            "Booking must be within the booking hours "
            f"{format_display(grid_start)}"
            + (f" - {format_display(grid_end)}." if grid_end is not None else ".")
        )

    # Snap down to the slot containing `start`
    first = grid_start + ((start - grid_start) // grid_step) * grid_step
    return list(range(first, end, grid_step))


def slot_availability(grid: SlotGrid, occupied) -> list:
    """One entry per grid slot; a slot is free when its interval overlaps no occupied interval."""
    entries = []
    for slot in grid.points():
        slot_end = min(slot + grid.step, grid.end)
        entries.append({
            'slot': format_display(slot),
            'time': format_storage(slot),
            'available': not has_conflict((slot, slot_end), occupied),
        })
    return entries


def valid_end_times(start: int, grid: SlotGrid, occupied) -> list:
    """
    End times (grid points after `start`, up to the grid end) that keep
    [start, end) conflict-free. Stops at the first end that would conflict,
    since every later end would include the same overlap.
    """
    if start < grid.start or start >= grid.end:
        raise InvalidRangeError("Start time is outside the booking hours.")

    candidates = [p for p in grid.points() if p > start] + [grid.end]
    ends = []
    for end in candidates:
        if has_conflict((start, end), occupied):
            break
        ends.append(end)
    return ends
