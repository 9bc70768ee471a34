# beatstore/commands.py
import click
from flask.cli import with_appcontext

from app import db
from . import store
from .tiers import PurchaseTier, price_cents


@click.group(name='beatstore')
def beatstore_cli():
    """Commands for the beat store."""
    pass


@beatstore_cli.command('init-db')
@with_appcontext
def init_db_command():
    """Creates the beat store database tables."""
    # Also done by db.create_all() in app.py
    db.create_all()
    click.echo('Initialized the beat store database.')


@beatstore_cli.command('add-beat')
@with_appcontext
@click.option('--title', prompt=True, help='Title of the beat.')
@click.option('--artist', 'artists', multiple=True, help='Artist name; repeat for several, in display order.')
@click.option('--bpm', prompt=True, type=int, help='Tempo in beats per minute.')
@click.option('--key', 'beat_key', default=None, help='Musical key, e.g. "F# minor".')
@click.option('--mp3', 's3_key_mp3', prompt=True, help='S3 key of the MP3 file.')
@click.option('--wav', 's3_key_wav', prompt=True, help='S3 key of the WAV file.')
@click.option('--mp3-price', prompt=True, type=click.IntRange(min=1), help='MP3 lease price in cents.')
@click.option('--wav-price', prompt=True, type=click.IntRange(min=1), help='WAV lease price in cents.')
@click.option('--exclusive-price', prompt=True, type=click.IntRange(min=1), help='Exclusive price in cents.')
def add_beat_command(title, artists, bpm, beat_key, s3_key_mp3, s3_key_wav, mp3_price, wav_price, exclusive_price):
    """Adds a new beat to the store."""
    if s3_key_mp3 == s3_key_wav:
        raise click.BadParameter('MP3 and WAV keys must differ.', param_hint='--wav')
    beat = store.add_beat(
        title=title,
        artists=list(artists),
        bpm=bpm,
        beat_key=beat_key,
        s3_key_mp3=s3_key_mp3,
        s3_key_wav=s3_key_wav,
        price_mp3_lease_cents=mp3_price,
        price_wav_lease_cents=wav_price,
        price_exclusive_cents=exclusive_price,
    )
    click.echo(f'Successfully added beat: {title} ({beat.id})')


@beatstore_cli.command('list-beats')
@with_appcontext
def list_beats_command():
    """Prints the catalog, newest first."""
    for beat in store.list_beats():
        prices = ' / '.join(f'{tier.value} {price_cents(beat, tier)}c' for tier in PurchaseTier)
        click.echo(f'{beat.id}  {beat.title}  {beat.bpm} bpm  {prices}')


def init_app(app):
    """Register CLI commands with the Flask app."""
    app.cli.add_command(beatstore_cli)
