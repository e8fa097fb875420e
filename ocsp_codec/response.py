"""
OCSP response codec (RFC 6960 section 4.2).

Two layers are handled: the OCSPResponse envelope (status plus optional
responseBytes) and the BasicOCSPResponse carried inside responseBytes.
Encoding a basic response normalizes the status of every single response
first, see ``status.normalize_responses``.
"""

from typing import Optional

from pyasn1.codec.der.decoder import decode as der_decoder
from pyasn1.codec.der.encoder import encode as der_encoder
from pyasn1.error import PyAsn1Error
from pyasn1.type import univ
from pyasn1_modules import rfc5280

from . import schema
from .config import CodecConfig
from .errors import EncodeError, MalformedError
from .models import (
    BasicResponse,
    OID_OCSP_BASIC,
    OcspResponse,
    ResponderId,
    ResponderIdKind,
    ResponseBytes,
    ResponseData,
    ResponseStatus,
    RevokedInfo,
    SingleResponse,
)
from .request import cert_id_from_asn1, cert_id_to_asn1
from .status import normalize_responses
from .wire import (
    LogCallback,
    algorithm_from_asn1,
    algorithm_to_asn1,
    certs_from_asn1,
    certs_to_asn1,
    copy_choice,
    decode_der,
    encode_der,
    extensions_from_asn1,
    extensions_to_asn1,
    from_generalized_time,
    log_debug,
    present,
    to_generalized_time,
)


def _responder_id_to_asn1(responder_id: ResponderId, target) -> None:
    if responder_id.kind == ResponderIdKind.BY_NAME:
        name, rest = der_decoder(bytes(responder_id.value), asn1Spec=rfc5280.Name())
        if rest:
            raise ValueError("trailing data after responder name")
        copy_choice(target['byName'], name)
    elif responder_id.kind == ResponderIdKind.BY_KEY:
        target['byKey'] = bytes(responder_id.value)
    else:
        raise ValueError(f"unsupported responder id kind: {responder_id.kind!r}")


def _responder_id_from_asn1(asn1_responder_id) -> ResponderId:
    chosen = asn1_responder_id.getName()
    if chosen == 'byName':
        name = rfc5280.Name()
        copy_choice(name, asn1_responder_id['byName'])
        return ResponderId.by_name(der_encoder(name))
    return ResponderId.by_key(asn1_responder_id['byKey'].asOctets())


def _single_response_to_asn1(single: SingleResponse) -> schema.SingleResponse:
    asn1_single = schema.SingleResponse()
    cert_id_to_asn1(single.cert_id, asn1_single['certID'])

    if single.good:
        asn1_single['good'] = ''
    if not single.revoked.is_empty():
        revoked = asn1_single['revoked']
        revoked['revocationTime'] = to_generalized_time(single.revoked.revocation_time)
        if single.revoked.revocation_reason is not None:
            revoked['revocationReason'] = int(single.revoked.revocation_reason)
    if single.unknown:
        asn1_single['unknown'] = ''

    asn1_single['thisUpdate'] = to_generalized_time(single.this_update)
    if single.next_update is not None:
        asn1_single['nextUpdate'] = to_generalized_time(single.next_update)
    if single.extensions:
        extensions_to_asn1(single.extensions, asn1_single['singleExtensions'])
    return asn1_single


def _single_response_from_asn1(asn1_single) -> SingleResponse:
    revoked = RevokedInfo()
    asn1_revoked = present(asn1_single, 'revoked')
    if asn1_revoked is not None:
        reason = present(asn1_revoked, 'revocationReason')
        revoked = RevokedInfo(
            revocation_time=from_generalized_time(asn1_revoked['revocationTime']),
            revocation_reason=int(reason) if reason is not None else None,
        )

    next_update = present(asn1_single, 'nextUpdate')
    return SingleResponse(
        cert_id=cert_id_from_asn1(asn1_single['certID']),
        this_update=from_generalized_time(asn1_single['thisUpdate']),
        good=present(asn1_single, 'good') is not None,
        revoked=revoked,
        unknown=present(asn1_single, 'unknown') is not None,
        next_update=from_generalized_time(next_update) if next_update is not None else None,
        extensions=extensions_from_asn1(present(asn1_single, 'singleExtensions')),
    )


def _basic_response_to_asn1(basic: BasicResponse) -> schema.BasicOCSPResponse:
    asn1_basic = schema.BasicOCSPResponse()
    data = basic.response_data

    tbs = asn1_basic['tbsResponseData']
    tbs['version'] = int(data.version)
    _responder_id_to_asn1(data.responder_id, tbs['responderID'])
    tbs['producedAt'] = to_generalized_time(data.produced_at)
    responses = tbs['responses'].clear()
    for single in data.responses:
        responses.append(_single_response_to_asn1(single))
    if data.extensions:
        extensions_to_asn1(data.extensions, tbs['responseExtensions'])

    algorithm_to_asn1(basic.signature_algorithm, asn1_basic['signatureAlgorithm'])
    asn1_basic['signature'] = univ.BitString.fromOctetString(bytes(basic.signature))
    if basic.certs:
        certs_to_asn1(basic.certs, asn1_basic['certs'])
    return asn1_basic


def _basic_response_from_asn1(asn1_basic) -> BasicResponse:
    tbs = asn1_basic['tbsResponseData']
    return BasicResponse(
        response_data=ResponseData(
            responder_id=_responder_id_from_asn1(tbs['responderID']),
            produced_at=from_generalized_time(tbs['producedAt']),
            responses=[_single_response_from_asn1(single) for single in tbs['responses']],
            version=int(tbs['version']),
            extensions=extensions_from_asn1(present(tbs, 'responseExtensions')),
        ),
        signature_algorithm=algorithm_from_asn1(asn1_basic['signatureAlgorithm']),
        signature=asn1_basic['signature'].asOctets(),
        certs=certs_from_asn1(present(asn1_basic, 'certs')),
    )


def _response_to_asn1(response: OcspResponse) -> schema.OCSPResponse:
    asn1_response = schema.OCSPResponse()
    asn1_response['responseStatus'] = int(ResponseStatus(response.status))
    if response.response_bytes is not None:
        response_bytes = asn1_response['responseBytes']
        response_bytes['responseType'] = univ.ObjectIdentifier(response.response_bytes.response_type)
        response_bytes['response'] = bytes(response.response_bytes.response)
    return asn1_response


def _response_from_asn1(asn1_response) -> OcspResponse:
    response_bytes = None
    asn1_bytes = present(asn1_response, 'responseBytes')
    if asn1_bytes is not None:
        response_bytes = ResponseBytes(
            response_type=str(asn1_bytes['responseType']),
            response=asn1_bytes['response'].asOctets(),
        )
    return OcspResponse(
        status=ResponseStatus(int(asn1_response['responseStatus'])),
        response_bytes=response_bytes,
    )


def _check_status_slots(basic: BasicResponse) -> None:
    for index, single in enumerate(basic.responses):
        if single.status is None:
            raise MalformedError(
                f"single response {index} does not carry exactly one of good/revoked/unknown"
            )


def decode_response(data: bytes, config: Optional[CodecConfig] = None,
                    log_callback: Optional[LogCallback] = None) -> OcspResponse:
    """
    Decode a DER encoded OCSPResponse envelope.

    responseBytes, when present, is returned undecoded.
    """
    asn1_response = decode_der(data, schema.OCSPResponse(), "OCSP response", config, log_callback)
    try:
        response = _response_from_asn1(asn1_response)
    except (PyAsn1Error, ValueError) as exc:
        raise MalformedError(f"malformed OCSP response: {exc}") from exc
    log_debug(f"OCSP response status: {response.status.name}", log_callback, config)
    return response


def decode_basic_response(data: bytes, config: Optional[CodecConfig] = None,
                          log_callback: Optional[LogCallback] = None) -> BasicResponse:
    """
    Decode a DER encoded BasicOCSPResponse.

    The status slots are returned as found on the wire; with
    ``config.strict_status`` set, single responses that do not carry exactly
    one status are rejected as malformed.
    """
    config = config or CodecConfig()
    asn1_basic = decode_der(data, schema.BasicOCSPResponse(), "OCSP basic response", config, log_callback)
    try:
        basic = _basic_response_from_asn1(asn1_basic)
    except (PyAsn1Error, ValueError) as exc:
        raise MalformedError(f"malformed OCSP basic response: {exc}") from exc

    if config.strict_status:
        _check_status_slots(basic)
    log_debug(f"OCSP basic response carries {len(basic.responses)} single response(s)", log_callback, config)
    return basic


def decode_response_as_basic(data: bytes, config: Optional[CodecConfig] = None,
                             log_callback: Optional[LogCallback] = None) -> BasicResponse:
    """
    Decode an OCSPResponse envelope and the BasicOCSPResponse it carries.

    Raises:
        MalformedError: either layer does not match its schema, the envelope
            has no responseBytes, or the response type is not id-pkix-ocsp-basic
        TrailingDataError: bytes remain after either layer
    """
    response = decode_response(data, config, log_callback)
    if response.response_bytes is None:
        raise MalformedError(
            f"OCSP response with status {response.status.name} carries no responseBytes"
        )
    if response.response_bytes.response_type != OID_OCSP_BASIC:
        raise MalformedError(
            f"unsupported OCSP response type {response.response_bytes.response_type}"
        )
    return decode_basic_response(response.response_bytes.response, config, log_callback)


def encode_response(response: OcspResponse, config: Optional[CodecConfig] = None,
                    log_callback: Optional[LogCallback] = None) -> bytes:
    """Encode an OcspResponse envelope as DER"""
    try:
        asn1_response = _response_to_asn1(response)
    except (PyAsn1Error, ValueError, TypeError, AttributeError) as exc:
        log_debug(f"Cannot build OCSP response: {exc}", log_callback, config)
        raise EncodeError(f"cannot encode OCSP response: {exc}") from exc
    return encode_der(asn1_response, "OCSP response", config, log_callback)


def encode_basic_response(basic: BasicResponse, config: Optional[CodecConfig] = None,
                          log_callback: Optional[LogCallback] = None) -> bytes:
    """
    Normalize the status of every single response (in place) and encode the
    basic response as DER.
    """
    normalize_responses(basic, log_callback, config)
    try:
        asn1_basic = _basic_response_to_asn1(basic)
    except (PyAsn1Error, ValueError, TypeError, AttributeError) as exc:
        log_debug(f"Cannot build OCSP basic response: {exc}", log_callback, config)
        raise EncodeError(f"cannot encode OCSP basic response: {exc}") from exc
    return encode_der(asn1_basic, "OCSP basic response", config, log_callback)


def encode_response_from_basic(basic: BasicResponse, config: Optional[CodecConfig] = None,
                               log_callback: Optional[LogCallback] = None) -> bytes:
    """
    Encode a basic response wrapped in a successful OCSPResponse envelope.

    Like encode_basic_response, this normalizes the caller's value in place.
    """
    encoded_basic = encode_basic_response(basic, config, log_callback)
    response = OcspResponse(
        status=ResponseStatus.SUCCESSFUL,
        response_bytes=ResponseBytes(response_type=OID_OCSP_BASIC, response=encoded_basic),
    )
    return encode_response(response, config, log_callback)
