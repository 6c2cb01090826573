"""Seat space and seat selection rules"""

from .constants import BusinessRules


class InvalidSeatSelectionError(Exception):
    """Raised when a seat selection does not fit the schedule's seat space"""
    pass


def seat_labels(total_seats):
    """
    Seat labels for a bus, row-major in rows of four: 1A 1B 1C 1D 2A ...

    The list is truncated to exactly total_seats labels.
    """
    labels = []
    row = 1
    while len(labels) < total_seats:
        for col in range(BusinessRules.SEATS_PER_ROW):
            if len(labels) >= total_seats:
                break
            labels.append(f"{row}{chr(ord('A') + col)}")
        row += 1
    return labels


def validate_selection(total_seats, booked_seats, seats, passengers):
    """
    Server-side check of a finalized selection.

    Raises:
        InvalidSeatSelectionError: wrong count, duplicates, unknown labels
            or seats that are already booked
    """
    if passengers < 1:
        raise InvalidSeatSelectionError("At least one passenger is required")
    if len(seats) != passengers:
        raise InvalidSeatSelectionError(f"Exactly {passengers} seat(s) must be selected")
    if len(set(seats)) != len(seats):
        raise InvalidSeatSelectionError("Duplicate seats in selection")

    space = set(seat_labels(total_seats))
    unknown = [s for s in seats if s not in space]
    if unknown:
        raise InvalidSeatSelectionError(f"Unknown seats: {', '.join(unknown)}")

    taken = [s for s in seats if s in set(booked_seats)]
    if taken:
        raise InvalidSeatSelectionError(f"Seats already booked: {', '.join(taken)}")


class SeatSelector:
    """Interactive selection of exactly `passengers` seats on one schedule"""

    def __init__(self, total_seats, booked_seats, passengers):
        self.space = seat_labels(total_seats)
        self.booked_seats = set(booked_seats or [])
        self.passengers = passengers
        self.selected = []
        self.error = ''

    def toggle(self, seat):
        """Click on a seat. Returns the current selection."""
        if seat not in self.space or seat in self.booked_seats:
            return self.selection

        if seat in self.selected:
            self.selected.remove(seat)
            self.error = ''
        elif len(self.selected) < self.passengers:
            self.selected.append(seat)
            self.error = ''
        else:
            plural = 's' if self.passengers > 1 else ''
            self.error = f"You can only select {self.passengers} seat{plural}"
        return self.selection

    @property
    def selection(self):
        return list(self.selected)

    @property
    def is_complete(self):
        return len(self.selected) == self.passengers

    def available_seats(self):
        return [s for s in self.space if s not in self.booked_seats]
