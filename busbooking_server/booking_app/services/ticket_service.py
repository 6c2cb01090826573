"""Ticket service - PDF tickets, QR verification URLs and ticket checks"""

import logging
from datetime import timedelta, timezone as dt_timezone
from io import BytesIO
from urllib.parse import urlencode, urlsplit, parse_qs

import qrcode
from qrcode import constants
from django.conf import settings
from django.utils import timezone
from django.utils.dateparse import parse_datetime
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer, Image

from ..models import Booking
from ..utils.constants import BookingStatus, BusinessRules

logger = logging.getLogger(__name__)


class InvalidTicketError(Exception):
    """Raised when a verification URL cannot be parsed"""
    pass


def qr_expiry(schedule):
    return schedule.arrival_time + timedelta(hours=BusinessRules.QR_EXPIRY_HOURS_AFTER_ARRIVAL)


def format_expiry(value):
    """ISO-8601 in UTC with millisecond precision and a Z suffix"""
    return value.astimezone(dt_timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def build_verification_url(booking):
    query = urlencode({
        'bookingId': booking.id,
        'seats': ','.join(booking.seat_numbers),
        'expires': format_expiry(qr_expiry(booking.schedule)),
    })
    return f"{settings.TICKET_VERIFY_URL}?{query}"


def parse_verification_url(url):
    """
    Recover the booking id, seats and expiry carried by a verification URL

    Raises:
        InvalidTicketError: If a field is missing or malformed
    """
    return parse_verification_params(parse_qs(urlsplit(url).query))


def parse_verification_params(params):
    def first(key):
        value = params.get(key)
        if isinstance(value, (list, tuple)):
            value = value[0] if value else None
        return value

    booking_id = first('bookingId')
    seats = first('seats')
    expires = first('expires')
    if not booking_id or seats is None or not expires:
        raise InvalidTicketError("bookingId, seats and expires are required")

    try:
        booking_id = int(booking_id)
    except (TypeError, ValueError):
        raise InvalidTicketError("bookingId must be a number")

    try:
        expires_at = parse_datetime(expires)
    except ValueError:
        expires_at = None
    if expires_at is None or timezone.is_naive(expires_at):
        raise InvalidTicketError("expires must be an ISO-8601 timestamp with a timezone")

    return {
        'booking_id': booking_id,
        'seats': [s for s in seats.split(',') if s],
        'expires': expires_at,
    }


def verify_ticket(booking_id, seats, expires, now=None):
    """
    Check a scanned ticket against the stored booking

    Returns:
        dict with valid flag, a reason and the booking id
    """
    now = now or timezone.now()
    booking = Booking.objects.select_related('schedule').filter(id=booking_id).first()

    if booking is None:
        reason = 'not_found'
    elif booking.booking_status != BookingStatus.CONFIRMED:
        reason = 'not_confirmed'
    elif sorted(seats) != sorted(booking.seat_numbers):
        reason = 'seat_mismatch'
    elif abs((qr_expiry(booking.schedule) - expires).total_seconds()) >= 1:
        reason = 'tampered'
    elif now > expires:
        reason = 'expired'
    else:
        reason = 'valid'

    if reason != 'valid':
        logger.info(f'[TICKET] Verification of booking {booking_id} failed: {reason}')
    return {'valid': reason == 'valid', 'reason': reason, 'booking_id': booking_id}


def make_qr_png(data):
    qr = qrcode.QRCode(
        version=1,
        error_correction=constants.ERROR_CORRECT_M,
        box_size=10,
        border=4,
    )
    qr.add_data(data)
    qr.make(fit=True)

    buffer = BytesIO()
    qr.make_image(fill_color="black", back_color="white").save(buffer, format='PNG')
    buffer.seek(0)
    return buffer


def _section(rows, background):
    table = Table(rows, colWidths=[130, 330])
    table.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, -1), background),
        ('TEXTCOLOR', (0, 0), (-1, -1), colors.black),
        ('ALIGN', (0, 0), (-1, -1), 'LEFT'),
        ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
        ('FONTNAME', (1, 0), (1, -1), 'Helvetica'),
        ('FONTSIZE', (0, 0), (-1, -1), 10),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 6),
    ]))
    return table


def render_ticket_pdf(booking, include_qr=False):
    """Render a booking as a one-page PDF ticket. Returns the PDF bytes."""
    schedule = booking.schedule
    route = schedule.route
    bus = schedule.bus
    company = booking.company

    buffer = BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=A4, title=f"Ticket {booking.id}")
    styles = getSampleStyleSheet()
    story = []

    story.append(Paragraph(company.name, styles['Title']))
    story.append(Paragraph(f"Booking #{booking.id}", styles['Heading2']))
    story.append(Spacer(1, 12))

    departure = timezone.localtime(schedule.departure_time)
    arrival = timezone.localtime(schedule.arrival_time)
    hours, minutes = divmod(route.duration, 60)
    story.append(Paragraph("Trip Details", styles['Heading3']))
    story.append(_section([
        ["Route:", f"{route.origin} - {route.destination}"],
        ["Stops:", ', '.join(route.stops) or 'Direct'],
        ["Date:", schedule.date.strftime('%Y-%m-%d')],
        ["Departure:", departure.strftime('%H:%M')],
        ["Arrival:", arrival.strftime('%H:%M')],
        ["Duration:", f"{hours}h {minutes}m"],
    ], colors.lightblue))
    story.append(Spacer(1, 10))

    story.append(Paragraph("Bus Details", styles['Heading3']))
    story.append(_section([
        ["Bus Type:", bus.bus_type],
        ["Bus Number:", bus.bus_number],
        ["Amenities:", ', '.join(bus.amenities) or '-'],
        ["Seats:", ', '.join(booking.seat_numbers)],
        ["Seat Status:", booking.seat_status],
    ], colors.lightgrey))
    story.append(Spacer(1, 10))

    story.append(Paragraph("Passengers", styles['Heading3']))
    passenger_rows = [["Name", "Age", "Gender", "Seat"]]
    for passenger in booking.passenger_details:
        passenger_rows.append([
            passenger.get('name', ''),
            str(passenger.get('age', '')),
            passenger.get('gender', ''),
            passenger.get('seat_number', ''),
        ])
    passenger_table = Table(passenger_rows, colWidths=[200, 60, 100, 100])
    passenger_table.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), colors.grey),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 10),
        ('BACKGROUND', (0, 1), (-1, -1), colors.beige),
        ('GRID', (0, 0), (-1, -1), 1, colors.black),
    ]))
    story.append(passenger_table)
    story.append(Spacer(1, 10))

    story.append(Paragraph("Payment", styles['Heading3']))
    story.append(_section([
        ["Total Amount:", f"{settings.CURRENCY} {booking.total_amount:,}"],
        ["Payment Status:", booking.payment_status],
        ["Payment Service:", booking.payment_service or '-'],
        ["Transaction ID:", booking.transaction_id or '-'],
    ], colors.lightgrey))

    if include_qr and booking.booking_status == BookingStatus.CONFIRMED:
        story.append(Spacer(1, 20))
        story.append(Image(make_qr_png(build_verification_url(booking)), width=150, height=150))
        story.append(Paragraph(
            f"Valid until {format_expiry(qr_expiry(schedule))}",
            styles['Italic']
        ))

    doc.build(story)
    return buffer.getvalue()
