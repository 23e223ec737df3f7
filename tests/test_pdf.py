from datetime import date

from orders.pdf_generator import (
    CALENDAR_END,
    CALENDAR_IN_RANGE,
    CALENDAR_START,
    OrderPdfGenerator,
    build_delivery_calendar,
)


def _markers(weeks):
    return {day: marker for week in weeks for day, marker in week if day is not None and marker}


def test_calendar_is_monday_first():
    # May 2024 starts on a Wednesday
    weeks = build_delivery_calendar(date(2024, 5, 10), date(2024, 5, 14))
    assert [day for day, _ in weeks[0]] == [None, None, 1, 2, 3, 4, 5]
    assert all(len(week) == 7 for week in weeks)
    assert weeks[-1][4][0] == 31


def test_calendar_marks_window():
    weeks = build_delivery_calendar(date(2024, 5, 10), date(2024, 5, 14))
    assert _markers(weeks) == {
        10: CALENDAR_START,
        11: CALENDAR_IN_RANGE,
        12: CALENDAR_IN_RANGE,
        13: CALENDAR_IN_RANGE,
        14: CALENDAR_END,
    }


def test_calendar_window_spilling_into_next_month():
    weeks = build_delivery_calendar(date(2024, 5, 29), date(2024, 6, 3))
    assert _markers(weeks) == {29: CALENDAR_START, 30: CALENDAR_IN_RANGE, 31: CALENDAR_IN_RANGE}


def test_single_day_window():
    weeks = build_delivery_calendar(date(2024, 5, 10), date(2024, 5, 10))
    assert _markers(weeks) == {10: CALENDAR_START}


def test_title_and_filename(make_order):
    generator = OrderPdfGenerator()
    cash = make_order(site_name='Torre  Norte & Co')
    credit = make_order(payment_type='credit')

    assert generator.get_title(cash) == 'Purchase Ticket (Cash Payment)'
    assert generator.get_title(credit) == 'Order Summary'
    assert generator.get_pdf_filename(cash) == f'order_Torre__Norte_&_Co_{str(cash.id)[:5]}.pdf'
    assert cash.get_reference() == f'TICKET-{cash.id.hex[:8].upper()}'
    assert credit.get_reference().startswith('ORDER-')


def test_generates_pdf_with_markup_characters(make_order):
    order = make_order(site_name='Obra <Norte> & Sur')
    buffer = OrderPdfGenerator().generate_pdf(order)
    assert buffer.getvalue().startswith(b'%PDF')
