"""
Certificate status and nonce handling on decoded or constructed messages.

A SingleResponse holds its status in three independent slots (good,
revoked, unknown). Producers may leave a value over- or under-specified while
building it; ``normalized`` resolves such a value to exactly one status:

1. good and unknown -> good
2. revoked (non-empty) and unknown -> revoked
3. neither good nor revoked -> unknown
4. anything else is left as is

The encoders apply this to every single response. Decoders never do, so a
caller can tell what a responder actually sent.
"""

import secrets
from dataclasses import replace
from datetime import datetime
from typing import Optional

from .config import CodecConfig
from .models import (
    BasicResponse,
    OID_OCSP_NONCE,
    OcspRequest,
    RevokedInfo,
    SingleResponse,
)
from .wire import LogCallback, find_extension, log_debug, put_extension


def normalized(single: SingleResponse) -> SingleResponse:
    """Return the single response with its status resolved to exactly one slot"""
    if single.good and single.unknown:
        return replace(single, good=True, revoked=RevokedInfo(), unknown=False)
    if not single.revoked.is_empty() and single.unknown:
        return replace(single, good=False, unknown=False)
    if not single.good and single.revoked.is_empty():
        if single.unknown and single.revoked == RevokedInfo():
            return single
        return replace(single, good=False, revoked=RevokedInfo(), unknown=True)
    return single


def normalize_responses(basic: BasicResponse, log_callback: Optional[LogCallback] = None,
                        config: Optional[CodecConfig] = None) -> None:
    """Replace every single response of the basic response with its normalized form"""
    responses = basic.response_data.responses
    for index, single in enumerate(responses):
        resolved = normalized(single)
        if resolved is not single:
            log_debug(
                f"Single response {index} (serial {single.cert_id.serial_number}) "
                f"normalized to {resolved.status.value}",
                log_callback, config,
            )
            responses[index] = resolved


def _single(basic: BasicResponse, index: int) -> SingleResponse:
    responses = basic.response_data.responses
    if not 0 <= index < len(responses):
        raise IndexError(f"single response index {index} out of range (0..{len(responses) - 1})")
    return responses[index]


def set_nonce(basic: BasicResponse, index: int, value: bytes) -> None:
    """Set the nonce extension of responses[index], replacing an existing one"""
    put_extension(_single(basic, index).extensions, OID_OCSP_NONCE, bytes(value))


def get_nonce(basic: BasicResponse, index: int) -> Optional[bytes]:
    extension = find_extension(_single(basic, index).extensions, OID_OCSP_NONCE)
    return extension.value if extension is not None else None


def clear_status(basic: BasicResponse, index: int) -> None:
    """Unset all three status slots of responses[index]"""
    single = _single(basic, index)
    single.good = False
    single.unknown = False
    single.revoked = RevokedInfo()


def set_good(basic: BasicResponse, index: int) -> None:
    clear_status(basic, index)
    _single(basic, index).good = True


def set_revoked(basic: BasicResponse, index: int, revocation_time: datetime,
                reason: Optional[int] = None) -> None:
    clear_status(basic, index)
    _single(basic, index).revoked = RevokedInfo(
        revocation_time=revocation_time,
        revocation_reason=int(reason) if reason is not None else None,
    )


def set_unknown(basic: BasicResponse, index: int) -> None:
    clear_status(basic, index)
    _single(basic, index).unknown = True


def get_response_nonce(basic: BasicResponse) -> Optional[bytes]:
    """Nonce in the responseExtensions, where responders echo the request nonce"""
    extension = find_extension(basic.response_data.extensions, OID_OCSP_NONCE)
    return extension.value if extension is not None else None


def set_response_nonce(basic: BasicResponse, value: bytes) -> None:
    put_extension(basic.response_data.extensions, OID_OCSP_NONCE, bytes(value))


def nonce_echoed(request: OcspRequest, basic: BasicResponse) -> Optional[bool]:
    """
    Check whether the response echoes the nonce of the request.

    Returns:
        None if the response carries no nonce, False if it carries one the
        request did not send or a different one, True if both match
    """
    echoed = get_response_nonce(basic)
    if echoed is None:
        return None
    sent = find_extension(request.extensions, OID_OCSP_NONCE)
    if sent is None:
        return False
    return echoed == sent.value


def new_nonce(length: Optional[int] = None, config: Optional[CodecConfig] = None) -> bytes:
    config = config or CodecConfig()
    return secrets.token_bytes(length if length is not None else config.nonce_len)
