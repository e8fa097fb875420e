"""
DER plumbing shared by the request and response codecs.

pyasn1 objects never leave this package: the codecs turn them into the
dataclasses of ``models`` right after decoding and build them from those
dataclasses right before encoding. The helpers here do the conversions that
both directions and both message kinds need.
"""

from datetime import datetime, timezone
from typing import Callable, List, Optional

from pyasn1.codec.der.decoder import decode as der_decoder
from pyasn1.codec.der.encoder import encode as der_encoder
from pyasn1.error import PyAsn1Error
from pyasn1.type import univ
from pyasn1_modules import rfc5280

from .config import CodecConfig
from .errors import EncodeError, MalformedError, TrailingDataError
from .models import AlgorithmIdentifier, Extension

LogCallback = Callable[[str], None]


def log_debug(message: str, log_callback: Optional[LogCallback] = None,
              config: Optional[CodecConfig] = None) -> None:
    """Send a DEBUG line to the callback, and to the console if show_debug is set"""
    if config is not None and config.show_debug:
        print(f"[DEBUG] {message}")
    if log_callback:
        log_callback(f"[DEBUG] {message}\n")


def decode_der(data: bytes, asn1_spec, what: str,
               config: Optional[CodecConfig] = None,
               log_callback: Optional[LogCallback] = None):
    """
    Decode exactly one DER value of the given schema.

    Args:
        data: DER bytes
        asn1_spec: pyasn1 schema instance the bytes must match
        what: name of the structure, used in messages

    Returns:
        The decoded pyasn1 object

    Raises:
        MalformedError: the bytes do not match the schema
        TrailingDataError: bytes remain after the value
    """
    if not isinstance(data, (bytes, bytearray)):
        raise TypeError(f"{what} must be bytes, not {type(data).__name__}")

    log_debug(f"Decoding {what} ({len(data)} bytes)", log_callback, config)
    if not data:
        raise MalformedError(f"malformed {what}: no data")
    try:
        asn1_object, rest = der_decoder(bytes(data), asn1Spec=asn1_spec)
    except (PyAsn1Error, OverflowError) as exc:
        # OverflowError: long-form length larger than the platform index size
        log_debug(f"{what} does not match the schema: {exc}", log_callback, config)
        raise MalformedError(f"malformed {what}: {exc}") from exc

    if rest:
        log_debug(f"{len(rest)} trailing bytes after {what}", log_callback, config)
        raise TrailingDataError(f"trailing data in {what} ({len(rest)} bytes)")
    return asn1_object


def encode_der(asn1_object, what: str,
               config: Optional[CodecConfig] = None,
               log_callback: Optional[LogCallback] = None) -> bytes:
    try:
        encoded = der_encoder(asn1_object)
    except PyAsn1Error as exc:
        log_debug(f"Cannot encode {what}: {exc}", log_callback, config)
        raise EncodeError(f"cannot encode {what}: {exc}") from exc
    log_debug(f"Encoded {what} ({len(encoded)} bytes)", log_callback, config)
    return encoded


def present(asn1_sequence, name: str):
    """Return the named component if it carries a value, else None"""
    return asn1_sequence.getComponentByName(name, None, instantiate=False)


def copy_choice(target, source) -> None:
    """Set the alternative chosen in source on target (same CHOICE type, tags aside)"""
    target[source.getName()] = source.getComponent()


def to_generalized_time(value: datetime) -> str:
    # Naive datetimes are taken as UTC; sub-second precision is not written
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y%m%d%H%M%SZ")


def from_generalized_time(value) -> datetime:
    moment = value.asDateTime
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def algorithm_to_asn1(algorithm: AlgorithmIdentifier, target) -> None:
    target['algorithm'] = univ.ObjectIdentifier(algorithm.algorithm)
    if algorithm.parameters is not None:
        target['parameters'] = algorithm.parameters


def algorithm_from_asn1(asn1_algorithm) -> AlgorithmIdentifier:
    parameters = present(asn1_algorithm, 'parameters')
    return AlgorithmIdentifier(
        algorithm=str(asn1_algorithm['algorithm']),
        parameters=parameters.asOctets() if parameters is not None else None,
    )


def extensions_to_asn1(extensions: List[Extension], target) -> None:
    for extension in extensions:
        asn1_extension = rfc5280.Extension()
        asn1_extension['extnID'] = univ.ObjectIdentifier(extension.oid)
        asn1_extension['critical'] = bool(extension.critical)
        asn1_extension['extnValue'] = bytes(extension.value)
        target.append(asn1_extension)


def extensions_from_asn1(asn1_extensions) -> List[Extension]:
    if asn1_extensions is None:
        return []
    return [
        Extension(
            oid=str(ext['extnID']),
            value=ext['extnValue'].asOctets(),
            critical=bool(ext['critical']),
        )
        for ext in asn1_extensions
    ]


def certs_to_asn1(certs: List[bytes], target) -> None:
    for cert in certs:
        target.append(univ.Any(bytes(cert)))


def certs_from_asn1(asn1_certs) -> List[bytes]:
    if asn1_certs is None:
        return []
    return [cert.asOctets() for cert in asn1_certs]


def find_extension(extensions: List[Extension], oid: str) -> Optional[Extension]:
    for extension in extensions:
        if extension.oid == oid:
            return extension
    return None


def put_extension(extensions: List[Extension], oid: str, value: bytes) -> None:
    """Replace the value of the extension with this OID, or append a non-critical one"""
    extension = find_extension(extensions, oid)
    if extension is not None:
        extension.value = value
    else:
        extensions.append(Extension(oid=oid, value=value, critical=False))
