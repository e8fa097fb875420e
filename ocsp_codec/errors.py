"""
Exceptions raised by the OCSP codec.

Every failure carries the OCSP response status a responder would answer with
when the failure happens while handling a client's message.
"""

from .models import ResponseStatus


class OcspCodecError(Exception):
    response_status = ResponseStatus.INTERNAL_ERROR


class DecodeError(OcspCodecError):
    """
    Gets raised when bytes cannot be turned into an OCSP structure.
    """
    response_status = ResponseStatus.MALFORMED_REQUEST


class MalformedError(DecodeError):
    """
    Gets raised when the bytes do not match the expected schema at any
    nesting level: wrong tag, missing required field, or a value that is not
    valid for its typed field.
    """
    pass


class TrailingDataError(DecodeError):
    """
    Gets raised when a top-level value was parsed but input bytes remain.
    """
    pass


class EncodeError(OcspCodecError):
    """
    Gets raised when a value cannot be represented in DER.
    """
    pass
