import re

from ..tiers import CONTRACT_TITLES, LEASE_LABELS, lookup
from .pdf import render_text_contract_pdf
from .terms import (
    ContractInput,
    PRODUCER_ALIAS,
    build_contract_lines,
    header_subtitle,
    header_title,
)

_UNSAFE_FILENAME_CHARS = re.compile(r'[^a-zA-Z0-9_-]')
MAX_SLUG_LENGTH = 60


def slugify_track_name(track_name):
    slug = _UNSAFE_FILENAME_CHARS.sub('_', track_name or '')[:MAX_SLUG_LENGTH]
    # nothing but replaced characters left
    if not slug.strip('_'):
        return 'track'
    return slug


def contract_filename(tier, track_name):
    return f'jjaholics-{slugify_track_name(track_name)}-{lookup(LEASE_LABELS, tier)}.pdf'


def format_contract_date(moment):
    """January 5, 2025"""
    return f'{moment:%B} {moment.day}, {moment.year}'


def contract_text(tier, data):
    """Full contract text, header included, as rendered into the PDF."""
    lines = [header_title(tier, data.track_name), header_subtitle(data.order_number), '']
    return '\n'.join(lines + build_contract_lines(tier, data))


def render_contract(tier, data):
    """Render the tier's license agreement. Returns (pdf_bytes, filename)."""
    pdf = render_text_contract_pdf(
        pdf_title=f'{PRODUCER_ALIAS} - {data.track_name}: {lookup(CONTRACT_TITLES, tier)}',
        header_title=header_title(tier, data.track_name),
        header_subtitle=header_subtitle(data.order_number),
        lines=build_contract_lines(tier, data),
    )
    return pdf, contract_filename(tier, data.track_name)
