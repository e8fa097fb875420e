from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, IntEnum
from typing import List, Optional


OID_OCSP_BASIC = "1.3.6.1.5.5.7.48.1.1"
OID_OCSP_NONCE = "1.3.6.1.5.5.7.48.1.2"

OID_SHA1 = "1.3.14.3.2.26"
OID_SHA256 = "2.16.840.1.101.3.4.2.1"
OID_SHA384 = "2.16.840.1.101.3.4.2.2"
OID_SHA512 = "2.16.840.1.101.3.4.2.3"


class ResponseStatus(IntEnum):
    SUCCESSFUL = 0
    MALFORMED_REQUEST = 1
    INTERNAL_ERROR = 2
    TRY_LATER = 3
    # 4 is not used
    SIG_REQUIRED = 5
    UNAUTHORIZED = 6


class RevocationReason(IntEnum):
    UNSPECIFIED = 0
    KEY_COMPROMISE = 1
    CA_COMPROMISE = 2
    AFFILIATION_CHANGED = 3
    SUPERSEDED = 4
    CESSATION_OF_OPERATION = 5
    CERTIFICATE_HOLD = 6
    # 7 is not used
    REMOVE_FROM_CRL = 8
    PRIVILEGE_WITHDRAWN = 9
    AA_COMPROMISE = 10


class CertStatus(Enum):
    GOOD = "good"
    REVOKED = "revoked"
    UNKNOWN = "unknown"


class ResponderIdKind(Enum):
    BY_NAME = "by_name"
    BY_KEY = "by_key"


@dataclass(frozen=True)
class AlgorithmIdentifier:
    algorithm: str
    # Raw DER of the parameters element, e.g. b"\x05\x00" for NULL
    parameters: Optional[bytes] = None


@dataclass
class Extension:
    oid: str
    value: bytes
    critical: bool = False


@dataclass(frozen=True)
class CertID:
    """Names the certificate a request or response is about"""
    hash_algorithm: AlgorithmIdentifier
    issuer_name_hash: bytes
    issuer_key_hash: bytes
    serial_number: int


@dataclass
class Request:
    cert_id: CertID
    extensions: List[Extension] = field(default_factory=list)


@dataclass
class RequestSignature:
    algorithm: AlgorithmIdentifier
    signature: bytes
    # DER encoded certificates, kept as received
    certs: List[bytes] = field(default_factory=list)


@dataclass
class OcspRequest:
    requests: List[Request]
    version: int = 0
    # DER encoded GeneralName
    requestor_name: Optional[bytes] = None
    extensions: List[Extension] = field(default_factory=list)
    signature: Optional[RequestSignature] = None


@dataclass
class ResponseBytes:
    response_type: str
    response: bytes


@dataclass
class OcspResponse:
    status: ResponseStatus
    response_bytes: Optional[ResponseBytes] = None


@dataclass
class RevokedInfo:
    revocation_time: Optional[datetime] = None
    revocation_reason: Optional[int] = None

    def is_empty(self) -> bool:
        return self.revocation_time is None


@dataclass
class SingleResponse:
    """
    Status of one certificate.

    The certStatus CHOICE is held in three slots (good, revoked, unknown) that
    producers set independently. A well-formed value has exactly one of them
    set; normalization resolves the other combinations before encoding.

    Times are written in UTC at whole seconds and decode as aware UTC
    datetimes, so naive or sub-second values do not survive a round trip.
    """
    cert_id: CertID
    this_update: datetime
    good: bool = False
    revoked: RevokedInfo = field(default_factory=RevokedInfo)
    unknown: bool = False
    next_update: Optional[datetime] = None
    extensions: List[Extension] = field(default_factory=list)

    @property
    def status(self) -> Optional[CertStatus]:
        """The certStatus alternative, or None when not exactly one slot is set"""
        chosen = []
        if self.good:
            chosen.append(CertStatus.GOOD)
        if not self.revoked.is_empty():
            chosen.append(CertStatus.REVOKED)
        if self.unknown:
            chosen.append(CertStatus.UNKNOWN)
        if len(chosen) != 1:
            return None
        return chosen[0]


@dataclass(frozen=True)
class ResponderId:
    kind: ResponderIdKind
    # DER encoded Name for BY_NAME, SHA-1 hash of the responder key for BY_KEY
    value: bytes

    @classmethod
    def by_name(cls, name_der: bytes) -> ResponderId:
        return cls(ResponderIdKind.BY_NAME, name_der)

    @classmethod
    def by_key(cls, key_hash: bytes) -> ResponderId:
        return cls(ResponderIdKind.BY_KEY, key_hash)


@dataclass
class ResponseData:
    """Signed part of a basic response; producedAt follows the SingleResponse time rules"""
    responder_id: ResponderId
    produced_at: datetime
    responses: List[SingleResponse]
    version: int = 0
    extensions: List[Extension] = field(default_factory=list)


@dataclass
class BasicResponse:
    response_data: ResponseData
    signature_algorithm: AlgorithmIdentifier
    signature: bytes
    certs: List[bytes] = field(default_factory=list)

    @property
    def responses(self) -> List[SingleResponse]:
        return self.response_data.responses
