"""Tests for seat space and seat selection rules"""

from django.test import SimpleTestCase

from ..utils.seating import seat_labels, validate_selection, SeatSelector, InvalidSeatSelectionError


class SeatLabelsTest(SimpleTestCase):
    def test_rows_of_four(self):
        self.assertEqual(seat_labels(8), ['1A', '1B', '1C', '1D', '2A', '2B', '2C', '2D'])

    def test_truncated_to_total_seats(self):
        labels = seat_labels(10)
        self.assertEqual(len(labels), 10)
        self.assertEqual(labels[-2:], ['3A', '3B'])

    def test_zero_seats(self):
        self.assertEqual(seat_labels(0), [])


class ValidateSelectionTest(SimpleTestCase):
    def test_valid_selection(self):
        validate_selection(8, ['1A'], ['1B', '2C'], 2)

    def test_wrong_count(self):
        with self.assertRaises(InvalidSeatSelectionError):
            validate_selection(8, [], ['1A'], 2)

    def test_duplicates(self):
        with self.assertRaises(InvalidSeatSelectionError):
            validate_selection(8, [], ['1A', '1A'], 2)

    def test_unknown_label(self):
        with self.assertRaises(InvalidSeatSelectionError):
            validate_selection(4, [], ['2A'], 1)

    def test_already_booked(self):
        with self.assertRaises(InvalidSeatSelectionError):
            validate_selection(4, ['1A'], ['1A'], 1)

    def test_no_passengers(self):
        with self.assertRaises(InvalidSeatSelectionError):
            validate_selection(4, [], [], 0)


class SeatSelectorTest(SimpleTestCase):
    def test_select_and_deselect(self):
        selector = SeatSelector(8, [], 2)
        selector.toggle('1A')
        selector.toggle('1B')
        self.assertEqual(selector.selection, ['1A', '1B'])
        self.assertTrue(selector.is_complete)

        selector.toggle('1A')
        self.assertEqual(selector.selection, ['1B'])
        self.assertFalse(selector.is_complete)

    def test_never_exceeds_passenger_count(self):
        selector = SeatSelector(8, [], 1)
        selector.toggle('1A')
        selector.toggle('1B')
        self.assertEqual(selector.selection, ['1A'])
        self.assertEqual(selector.error, 'You can only select 1 seat')

    def test_error_message_plural(self):
        selector = SeatSelector(8, [], 2)
        for seat in ('1A', '1B', '1C'):
            selector.toggle(seat)
        self.assertEqual(selector.error, 'You can only select 2 seats')

    def test_booked_seat_is_noop(self):
        selector = SeatSelector(8, ['1A'], 2)
        selector.toggle('1A')
        self.assertEqual(selector.selection, [])
        self.assertEqual(selector.error, '')

    def test_unknown_seat_ignored(self):
        selector = SeatSelector(4, [], 1)
        selector.toggle('9Z')
        self.assertEqual(selector.selection, [])

    def test_available_seats(self):
        selector = SeatSelector(4, ['1B', '1D'], 1)
        self.assertEqual(selector.available_seats(), ['1A', '1C'])
