# beatstore/storage.py
import re
from collections import namedtuple

import boto3

from .exceptions import NotFoundError

# ~251 KB per ranged read
DEFAULT_CHUNK_BYTES = 257024

_RANGE_RE = re.compile(r'bytes=(\d*)-(\d*)')

RangedObject = namedtuple('RangedObject', ['body', 'content_type', 'content_range', 'content_length'])


def parse_range_header(range_header):
    """Return (start, end) from a `bytes=S-E` header; missing parts are None."""
    if not range_header:
        return None, None
    match = _RANGE_RE.search(range_header)
    if not match:
        return None, None
    start = int(match.group(1)) if match.group(1) else None
    end = int(match.group(2)) if match.group(2) else None
    return start, end


def normalize_range(range_header, max_chunk=DEFAULT_CHUNK_BYTES):
    """Turn the client's Range header into one no larger than `max_chunk` bytes."""
    start, end = parse_range_header(range_header)
    start = start or 0
    if end is not None and end >= start:
        if end - start + 1 > max_chunk:
            end = start + max_chunk - 1
    else:
        end = start + max_chunk - 1
    return f'bytes={start}-{end}'


class MediaStorage:
    """Audio files in S3: presigned links and chunked ranged reads."""

    def __init__(self, bucket, region=None, preview_expiry=300, chunk_bytes=DEFAULT_CHUNK_BYTES, client=None):
        self.bucket = bucket
        self.preview_expiry = preview_expiry
        self.chunk_bytes = chunk_bytes
        self.client = client or boto3.client('s3', region_name=region)

    def _require_bucket(self):
        if not self.bucket:
            raise RuntimeError('S3_BUCKET is not configured')

    def signed_url(self, key, expires_in=None):
        self._require_bucket()
        return self.client.generate_presigned_url(
            'get_object',
            Params={'Bucket': self.bucket, 'Key': key},
            ExpiresIn=expires_in or self.preview_expiry,
        )

    def ranged_stream(self, key, range_header=None):
        self._require_bucket()
        obj = self.client.get_object(
            Bucket=self.bucket,
            Key=key,
            Range=normalize_range(range_header, self.chunk_bytes),
        )
        body = obj.get('Body')
        if body is None:
            raise NotFoundError(f'Empty object body for {key}')
        return RangedObject(
            body=body,
            content_type=obj.get('ContentType') or 'audio/mpeg',
            content_range=obj.get('ContentRange'),
            content_length=obj.get('ContentLength'),
        )
