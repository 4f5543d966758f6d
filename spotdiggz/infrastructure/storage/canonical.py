from __future__ import annotations

import hashlib
from dataclasses import dataclass
from datetime import datetime

from spotdiggz.infrastructure.storage.encoding import encode_path, encode_query
from spotdiggz.utils.datetime_tz import to_utc

STORAGE_HOST = "storage.googleapis.com"
SIGNING_ALGORITHM = "GOOG4-RSA-SHA256"
SIGNED_HEADERS = "content-type;host"
UNSIGNED_PAYLOAD = "UNSIGNED-PAYLOAD"
# region and service are fixed by the protocol
SCOPE_SUFFIX = "auto/storage/goog4_request"


@dataclass(frozen=True, slots=True)
class CredentialScope:
    timestamp: str
    datestamp: str
    scope: str
    credential: str

    @classmethod
    def from_instant(cls, now: datetime, signer_identity: str) -> CredentialScope:
        timestamp = to_utc(now).strftime("%Y%m%dT%H%M%SZ")
        datestamp = timestamp[:8]
        scope = f"{datestamp}/{SCOPE_SUFFIX}"
        return cls(
            timestamp=timestamp,
            datestamp=datestamp,
            scope=scope,
            credential=f"{signer_identity}/{scope}",
        )


@dataclass(frozen=True, slots=True)
class CanonicalRequest:
    method: str
    canonical_uri: str
    canonical_query: str
    canonical_headers: str
    signed_headers: str

    def render(self) -> str:
        return "\n".join(
            [
                self.method,
                self.canonical_uri,
                self.canonical_query,
                self.canonical_headers,
                self.signed_headers,
                UNSIGNED_PAYLOAD,
            ]
        )

    def hexdigest(self) -> str:
        return sha256_hex(self.render())


def sha256_hex(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def build_query_params(scope: CredentialScope, expires_in: int) -> list[tuple[str, str]]:
    return [
        ("X-Goog-Algorithm", SIGNING_ALGORITHM),
        ("X-Goog-Credential", scope.credential),
        ("X-Goog-Date", scope.timestamp),
        ("X-Goog-Expires", str(expires_in)),
        ("X-Goog-SignedHeaders", SIGNED_HEADERS),
    ]


def build_canonical_query(params: list[tuple[str, str]]) -> str:
    # str ordering compares code points, matching the verifier's byte ordering for ASCII keys
    ordered = sorted(params)
    return "&".join(f"{encode_query(key)}={encode_query(value)}" for key, value in ordered)


def build_canonical_uri(bucket: str, object_name: str) -> str:
    return encode_path(f"/{bucket}/{object_name}")


def build_canonical_headers(content_type: str, host: str = STORAGE_HOST) -> str:
    return f"content-type:{content_type}\nhost:{host}\n"


def build_canonical_request(
    *,
    bucket: str,
    object_name: str,
    content_type: str,
    scope: CredentialScope,
    expires_in: int,
    host: str = STORAGE_HOST,
) -> CanonicalRequest:
    """Build the canonical form of the PUT the client will later send.

    ``content_type`` must already be validated; it is signed verbatim.
    """
    return CanonicalRequest(
        method="PUT",
        canonical_uri=build_canonical_uri(bucket, object_name),
        canonical_query=build_canonical_query(build_query_params(scope, expires_in)),
        canonical_headers=build_canonical_headers(content_type, host),
        signed_headers=SIGNED_HEADERS,
    )


def build_string_to_sign(scope: CredentialScope, canonical_request: CanonicalRequest) -> str:
    return "\n".join(
        [SIGNING_ALGORITHM, scope.timestamp, scope.scope, canonical_request.hexdigest()]
    )
