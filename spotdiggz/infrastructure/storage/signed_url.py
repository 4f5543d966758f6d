from __future__ import annotations

from spotdiggz.infrastructure.storage.canonical import STORAGE_HOST
from spotdiggz.infrastructure.storage.encoding import encode_path


def build_signed_url(
    canonical_uri: str, canonical_query: str, signature_hex: str, *, host: str = STORAGE_HOST
) -> str:
    # signature is hex so it is appended without encoding
    return f"https://{host}{canonical_uri}?{canonical_query}&X-Goog-Signature={signature_hex}"


def build_object_url(bucket: str, object_name: str, *, host: str = STORAGE_HOST) -> str:
    return f"https://{host}/{bucket}/{encode_path(object_name)}"
