"""
OCSP request codec (RFC 6960 section 4.1).
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
    CertID,
    OID_OCSP_NONCE,
    OcspRequest,
    Request,
    RequestSignature,
)
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
    find_extension,
    log_debug,
    present,
    put_extension,
)


def cert_id_to_asn1(cert_id: CertID, target) -> None:
    algorithm_to_asn1(cert_id.hash_algorithm, target['hashAlgorithm'])
    target['issuerNameHash'] = bytes(cert_id.issuer_name_hash)
    target['issuerKeyHash'] = bytes(cert_id.issuer_key_hash)
    target['serialNumber'] = int(cert_id.serial_number)


def cert_id_from_asn1(asn1_cert_id) -> CertID:
    return CertID(
        hash_algorithm=algorithm_from_asn1(asn1_cert_id['hashAlgorithm']),
        issuer_name_hash=asn1_cert_id['issuerNameHash'].asOctets(),
        issuer_key_hash=asn1_cert_id['issuerKeyHash'].asOctets(),
        serial_number=int(asn1_cert_id['serialNumber']),
    )


def _request_to_asn1(request: OcspRequest) -> schema.OCSPRequest:
    asn1_request = schema.OCSPRequest()
    tbs = asn1_request['tbsRequest']
    tbs['version'] = int(request.version)

    if request.requestor_name is not None:
        general_name, rest = der_decoder(
            bytes(request.requestor_name), asn1Spec=rfc5280.GeneralName())
        if rest:
            raise ValueError("trailing data after requestor name")
        copy_choice(tbs['requestorName'], general_name)

    request_list = tbs['requestList'].clear()
    for entry in request.requests:
        asn1_entry = schema.Request()
        cert_id_to_asn1(entry.cert_id, asn1_entry['reqCert'])
        if entry.extensions:
            extensions_to_asn1(entry.extensions, asn1_entry['singleRequestExtensions'])
        request_list.append(asn1_entry)

    if request.extensions:
        extensions_to_asn1(request.extensions, tbs['requestExtensions'])

    if request.signature is not None:
        signature = asn1_request['optionalSignature']
        algorithm_to_asn1(request.signature.algorithm, signature['signatureAlgorithm'])
        signature['signature'] = univ.BitString.fromOctetString(bytes(request.signature.signature))
        if request.signature.certs:
            certs_to_asn1(request.signature.certs, signature['certs'])

    return asn1_request


def _request_from_asn1(asn1_request) -> OcspRequest:
    tbs = asn1_request['tbsRequest']

    requestor_name = None
    asn1_name = present(tbs, 'requestorName')
    if asn1_name is not None:
        general_name = rfc5280.GeneralName()
        copy_choice(general_name, asn1_name)
        requestor_name = der_encoder(general_name)

    requests = [
        Request(
            cert_id=cert_id_from_asn1(entry['reqCert']),
            extensions=extensions_from_asn1(present(entry, 'singleRequestExtensions')),
        )
        for entry in tbs['requestList']
    ]

    signature = None
    asn1_signature = present(asn1_request, 'optionalSignature')
    if asn1_signature is not None:
        signature = RequestSignature(
            algorithm=algorithm_from_asn1(asn1_signature['signatureAlgorithm']),
            signature=asn1_signature['signature'].asOctets(),
            certs=certs_from_asn1(present(asn1_signature, 'certs')),
        )

    return OcspRequest(
        requests=requests,
        version=int(tbs['version']),
        requestor_name=requestor_name,
        extensions=extensions_from_asn1(present(tbs, 'requestExtensions')),
        signature=signature,
    )


def decode_request(data: bytes, config: Optional[CodecConfig] = None,
                   log_callback: Optional[LogCallback] = None) -> OcspRequest:
    """
    Decode a DER encoded OCSPRequest.

    Raises:
        MalformedError: the bytes are not an OCSPRequest
        TrailingDataError: bytes remain after the OCSPRequest
    """
    asn1_request = decode_der(data, schema.OCSPRequest(), "OCSP request", config, log_callback)
    try:
        request = _request_from_asn1(asn1_request)
    except (PyAsn1Error, ValueError) as exc:
        raise MalformedError(f"malformed OCSP request: {exc}") from exc
    log_debug(f"OCSP request carries {len(request.requests)} certificate(s)", log_callback, config)
    return request


def encode_request(request: OcspRequest, config: Optional[CodecConfig] = None,
                   log_callback: Optional[LogCallback] = None) -> bytes:
    """Encode an OcspRequest as DER"""
    try:
        asn1_request = _request_to_asn1(request)
    except (PyAsn1Error, ValueError, TypeError, AttributeError) as exc:
        log_debug(f"Cannot build OCSP request: {exc}", log_callback, config)
        raise EncodeError(f"cannot encode OCSP request: {exc}") from exc
    return encode_der(asn1_request, "OCSP request", config, log_callback)


def nonce(request: OcspRequest) -> Optional[bytes]:
    """Returns the nonce value of the request, or None when it carries none"""
    extension = find_extension(request.extensions, OID_OCSP_NONCE)
    return extension.value if extension is not None else None


def set_request_nonce(request: OcspRequest, value: bytes) -> None:
    put_extension(request.extensions, OID_OCSP_NONCE, bytes(value))
