import io
import textwrap

from reportlab.lib.pagesizes import LETTER
from reportlab.pdfgen import canvas

from .terms import NON_REFUNDABLE_NOTICE, PRODUCER_ALIAS

MARGIN = 50
BODY_FONT = ('Helvetica', 10)
BODY_LEADING = 13
# Helvetica 10pt across LETTER minus margins
MAX_CHARS = 100
PARAGRAPH_GAP = 8


def render_text_contract_pdf(pdf_title, header_title, header_subtitle, lines):
    """Lay out a plain-text contract on LETTER pages and return the PDF bytes."""
    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=LETTER, invariant=1)
    c.setTitle(pdf_title)
    c.setAuthor(PRODUCER_ALIAS)
    width, height = LETTER
    y = height - MARGIN

    def next_line(step):
        nonlocal y
        y -= step
        if y < MARGIN:
            c.showPage()
            y = height - MARGIN

    c.setFont('Helvetica-Bold', 16)
    for part in textwrap.wrap(header_title, 60) or ['']:
        c.drawString(MARGIN, y - 16, part)
        next_line(20)
    c.setFont('Helvetica', 11)
    c.drawString(MARGIN, y - 11, header_subtitle)
    next_line(14 + 14)

    for line in lines:
        if not line.strip():
            next_line(PARAGRAPH_GAP)
            continue
        font = 'Helvetica-Bold' if line == NON_REFUNDABLE_NOTICE else BODY_FONT[0]
        for part in textwrap.wrap(line, MAX_CHARS):
            # showPage resets the font
            c.setFont(font, BODY_FONT[1])
            c.drawString(MARGIN, y - BODY_FONT[1], part)
            next_line(BODY_LEADING)

    c.save()
    return buffer.getvalue()
