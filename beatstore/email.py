# beatstore/email.py
from collections import namedtuple

from flask import current_app
from flask_mail import Message

from .tiers import CONTRACT_TITLES, TYPE_LABELS, lookup
from .contracts import PRODUCER_ALIAS

Attachment = namedtuple('Attachment', ['filename', 'content_type', 'data'])


def send_email(mailer, to, subject, body, attachments=()):
    """Send a plain-text email and wait for the SMTP server to accept it.

    Unlike a background send, failures surface to the caller.
    """
    msg = Message(
        subject,
        sender=current_app.config['MAIL_DEFAULT_SENDER'],
        recipients=[to],
    )
    msg.body = body
    for attachment in attachments:
        msg.attach(attachment.filename, attachment.content_type, attachment.data)
    mailer.send(msg)


def contract_email_subject(tier, track_title):
    return f'{PRODUCER_ALIAS} - {track_title}: {lookup(CONTRACT_TITLES, tier)}'


def contract_email_body(tier, download_url, order_number, track_title, link_hours=24):
    return (
        'thanks for your purchase!\n\n'
        f'attached is your {lookup(TYPE_LABELS, tier)} contract.\n\n'
        f'your download link (valid for {link_hours} hours):\n{download_url}\n\n'
        f'order: {order_number}\n'
        f'beat: {track_title}\n'
    )


def send_contract_email(mailer, to, tier, track_title, order_number, download_url, pdf, filename, link_hours=24):
    """Sends the license PDF and the download link to the customer."""
    send_email(
        mailer,
        to,
        contract_email_subject(tier, track_title),
        contract_email_body(tier, download_url, order_number, track_title, link_hours),
        attachments=[Attachment(filename, 'application/pdf', pdf)],
    )
