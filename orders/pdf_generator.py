"""
Order summary PDF generation using ReportLab
"""
from io import BytesIO
import calendar
import re
from xml.sax.saxutils import escape

from django.conf import settings
from django.utils import timezone


CALENDAR_START = 'start'
CALENDAR_END = 'end'
CALENDAR_IN_RANGE = 'in_range'

WEEKDAY_HEADERS = ['Mo', 'Tu', 'We', 'Th', 'Fr', 'Sa', 'Su']


def build_delivery_calendar(start, end):
    """
    Monday-first weeks of the month containing `start`.

    Returns:
        list of weeks, each a list of 7 (day, marker) tuples. day is None for
        padding cells, marker is CALENDAR_START, CALENDAR_END, CALENDAR_IN_RANGE
        or None.
    """
    weeks = []
    for week in calendar.Calendar(firstweekday=calendar.MONDAY).monthdatescalendar(start.year, start.month):
        row = []
        for day in week:
            if day.month != start.month:
                row.append((None, None))
                continue
            if day == start:
                marker = CALENDAR_START
            elif day == end:
                marker = CALENDAR_END
            elif start < day < end:
                marker = CALENDAR_IN_RANGE
            else:
                marker = None
            row.append((day.day, marker))
        weeks.append(row)
    return weeks


def _make_numbered_canvas(footer_text):
    """Canvas class that stamps "Page i of n" and a copyright line on every page"""
    from reportlab.lib import colors
    from reportlab.pdfgen import canvas

    class NumberedCanvas(canvas.Canvas):
        def __init__(self, *args, **kwargs):
            super().__init__(*args, **kwargs)
            self._saved_page_states = []

        def showPage(self):
            self._saved_page_states.append(dict(self.__dict__))
            self._startPage()

        def save(self):
            page_count = len(self._saved_page_states)
            for state in self._saved_page_states:
                self.__dict__.update(state)
                self._draw_footer(page_count)
                super().showPage()
            super().save()

        def _draw_footer(self, page_count):
            width, _ = self._pagesize
            self.setFont('Helvetica', 9)
            self.setFillColor(colors.grey)
            self.drawCentredString(width / 2, 28, f"Page {self._pageNumber} of {page_count}")
            self.drawString(40, 28, footer_text)

    return NumberedCanvas


class OrderPdfGenerator:
    """Generate a printable PDF summary for an order"""

    GREEN = '#229954'
    RED = '#CB4335'
    GREY = '#F3F3F3'
    BLUE = '#2980B9'

    def __init__(self):
        # Styles will be initialized when needed
        self.styles = None

    def _setup_custom_styles(self):
        """Setup custom paragraph styles"""
        # Import reportlab at function level to reduce initial memory footprint
        from reportlab.lib import colors
        from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
        from reportlab.lib.enums import TA_RIGHT

        self.styles = getSampleStyleSheet()

        self.styles.add(ParagraphStyle(
            name='OrderTitle',
            parent=self.styles['Heading1'],
            fontSize=20,
            textColor=colors.HexColor('#1f2937'),
            spaceAfter=6
        ))

        self.styles.add(ParagraphStyle(
            name='Reference',
            parent=self.styles['Normal'],
            fontName='Helvetica-Bold',
            fontSize=12,
            alignment=TA_RIGHT
        ))

        self.styles.add(ParagraphStyle(
            name='SectionHeader',
            parent=self.styles['Heading3'],
            fontSize=14,
            textColor=colors.HexColor('#1f2937'),
            spaceAfter=6
        ))

        self.styles.add(ParagraphStyle(
            name='SmallText',
            parent=self.styles['Normal'],
            fontSize=9,
        ))

    def get_title(self, order):
        return 'Purchase Ticket (Cash Payment)' if order.is_cash_payment else 'Order Summary'

    def generate_pdf(self, order):
        """
        Generate the PDF summary for an order

        Args:
            order: Order instance

        Returns:
            BytesIO buffer containing the PDF
        """
        from reportlab.lib.pagesizes import letter
        from reportlab.lib.units import inch
        from reportlab.platypus import SimpleDocTemplate, Spacer

        if self.styles is None:
            self._setup_custom_styles()

        buffer = BytesIO()

        doc = SimpleDocTemplate(
            buffer,
            pagesize=letter,
            rightMargin=0.6*inch,
            leftMargin=0.6*inch,
            topMargin=0.6*inch,
            bottomMargin=0.8*inch,
            title=f"{self.get_title(order)} {order.get_reference()}",
        )

        story = []
        story.extend(self._build_header(order))
        story.append(Spacer(1, 0.15*inch))
        story.extend(self._build_order_details(order))
        story.append(Spacer(1, 0.25*inch))
        story.extend(self._build_items_table(order))
        story.append(Spacer(1, 0.3*inch))
        story.extend(self._build_calendar(order))

        footer = f"© {timezone.localdate().year} {settings.COMPANY_NAME}"
        doc.build(story, canvasmaker=_make_numbered_canvas(footer))

        buffer.seek(0)
        return buffer

    def _build_header(self, order):
        """Title on the left, order reference on the right"""
        from reportlab.lib.units import inch
        from reportlab.platypus import Table, TableStyle, Paragraph

        header = Table(
            [[Paragraph(self.get_title(order), self.styles['OrderTitle']),
              Paragraph(order.get_reference(), self.styles['Reference'])]],
            colWidths=[5*inch, 2.3*inch]
        )
        header.setStyle(TableStyle([
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
            ('LEFTPADDING', (0, 0), (-1, -1), 0),
            ('RIGHTPADDING', (0, 0), (-1, -1), 0),
        ]))

        return [
            header,
            Paragraph(f"Order for the site: {escape(order.site_name)}", self.styles['Normal']),
        ]

    def _build_order_details(self, order):
        from reportlab.lib import colors
        from reportlab.lib.units import inch
        from reportlab.platypus import Table, TableStyle, Paragraph

        start = order.delivery_window_start.strftime('%d/%m/%Y')
        end = order.delivery_window_end.strftime('%d/%m/%Y')

        details = [
            ['Requester:', Paragraph(escape(order.requester_name), self.styles['Normal'])],
            ['Delivery Address:', Paragraph(escape(order.get_full_address()), self.styles['Normal'])],
            ['Delivery Dates:', f"From {start} to {end}"],
            ['Payment:', order.get_payment_terms_display()],
        ]

        details_table = Table(details, colWidths=[1.7*inch, 5.6*inch])
        details_table.setStyle(TableStyle([
            ('ALIGN', (0, 0), (0, -1), 'RIGHT'),
            ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, -1), 10),
            ('TEXTCOLOR', (0, 0), (-1, -1), colors.HexColor('#374151')),
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 3),
            ('TOPPADDING', (0, 0), (-1, -1), 1),
        ]))

        return [details_table]

    def _build_items_table(self, order):
        """Materials table followed by the order total"""
        from reportlab.lib import colors
        from reportlab.lib.units import inch
        from reportlab.platypus import Table, TableStyle, Paragraph, Spacer

        elements = [
            Paragraph("Requested Materials", self.styles['SectionHeader']),
            Spacer(1, 0.05*inch),
        ]

        table_data = [['Description', 'Quantity', 'Unit Price', 'Subtotal']]
        for item in order.items.all():
            table_data.append([
                Paragraph(escape(item.description), self.styles['Normal']),
                str(item.quantity),
                f"${item.unit_price:,.2f}",
                f"${item.get_subtotal():,.2f}",
            ])
        table_data.append(['', '', 'Order Total:', f"${order.total_amount:,.2f} MXN"])

        items_table = Table(table_data, colWidths=[3.5*inch, 1*inch, 1.3*inch, 1.5*inch], repeatRows=1)
        items_table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor(self.BLUE)),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, 0), 11),
            ('BOTTOMPADDING', (0, 0), (-1, 0), 8),
            ('TOPPADDING', (0, 0), (-1, 0), 8),

            ('FONTSIZE', (0, 1), (-1, -2), 10),
            ('ALIGN', (1, 1), (1, -2), 'CENTER'),
            ('ALIGN', (2, 1), (-1, -1), 'RIGHT'),
            ('VALIGN', (0, 1), (-1, -2), 'MIDDLE'),
            ('ROWBACKGROUNDS', (0, 1), (-1, -2), [colors.white, colors.HexColor('#F3F4F6')]),

            ('FONTNAME', (0, -1), (-1, -1), 'Helvetica-Bold'),
            ('FONTSIZE', (0, -1), (-1, -1), 12),
            ('LINEABOVE', (0, -1), (-1, -1), 1, colors.HexColor(self.BLUE)),
            ('TOPPADDING', (0, -1), (-1, -1), 10),
        ]))

        elements.append(items_table)
        return elements

    def _build_calendar(self, order):
        """Delivery calendar for the month of the earliest delivery date, with a legend"""
        from reportlab.lib import colors
        from reportlab.lib.units import inch
        from reportlab.platypus import Table, TableStyle, Paragraph, KeepTogether

        start = order.delivery_window_start
        weeks = build_delivery_calendar(start, order.delivery_window_end)

        data = [WEEKDAY_HEADERS]
        style = [
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, -1), 10),
            ('ALIGN', (0, 0), (-1, -1), 'CENTER'),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
        ]
        fills = {
            CALENDAR_START: colors.HexColor(self.GREEN),
            CALENDAR_END: colors.HexColor(self.RED),
            CALENDAR_IN_RANGE: colors.HexColor(self.GREY),
        }

        for row_index, week in enumerate(weeks, start=1):
            data.append(['' if day is None else str(day) for day, _ in week])
            for col_index, (day, marker) in enumerate(week):
                if marker is None:
                    continue
                cell = (col_index, row_index)
                style.append(('BACKGROUND', cell, cell, fills[marker]))
                if marker in (CALENDAR_START, CALENDAR_END):
                    style.append(('TEXTCOLOR', cell, cell, colors.white))

        month_table = Table(data, colWidths=[0.55*inch] * 7, rowHeights=[0.35*inch] * len(data))
        month_table.setStyle(TableStyle(style))

        legend = Table(
            [['', 'Earliest delivery date'], ['', 'Latest delivery date']],
            colWidths=[0.15*inch, 2*inch]
        )
        legend.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (0, 0), colors.HexColor(self.GREEN)),
            ('BACKGROUND', (0, 1), (0, 1), colors.HexColor(self.RED)),
            ('FONTSIZE', (0, 0), (-1, -1), 9),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
        ]))

        layout = Table([[month_table, legend]], colWidths=[4.1*inch, 3.2*inch])
        layout.setStyle(TableStyle([
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
            ('LEFTPADDING', (0, 0), (-1, -1), 0),
        ]))

        return [KeepTogether([
            Paragraph("Delivery Calendar", self.styles['SectionHeader']),
            Paragraph(start.strftime('%B %Y'), self.styles['Normal']),
            layout,
        ])]

    def get_pdf_filename(self, order):
        """
        Args:
            order: Order instance

        Returns:
            str: Filename for the PDF
        """
        site = re.sub(r'\s', '_', order.site_name)
        return f"order_{site}_{str(order.id)[:5]}.pdf"
