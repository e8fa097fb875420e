from typing import Dict, Optional, Tuple

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from pyasn1.codec.der.decoder import decode as der_decoder
from pyasn1_modules import rfc5280

from .config import CodecConfig
from .models import (
    AlgorithmIdentifier,
    CertID,
    OID_SHA1,
    OID_SHA256,
    OID_SHA384,
    OID_SHA512,
)

# (hash, OID) per supported CertID hash name
HASH_ALGORITHMS: Dict[str, Tuple[type, str]] = {
    "sha1": (hashes.SHA1, OID_SHA1),
    "sha256": (hashes.SHA256, OID_SHA256),
    "sha384": (hashes.SHA384, OID_SHA384),
    "sha512": (hashes.SHA512, OID_SHA512),
}

_NULL_PARAMETERS = b"\x05\x00"


def _digest(hash_cls: type, data: bytes) -> bytes:
    h = hashes.Hash(hash_cls())
    h.update(data)
    return h.finalize()


def _subject_public_key(issuer: x509.Certificate) -> bytes:
    # issuerKeyHash covers the BIT STRING value only, without tag and length
    spki_der = issuer.public_key().public_bytes(
        serialization.Encoding.DER,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    spki, _ = der_decoder(spki_der, asn1Spec=rfc5280.SubjectPublicKeyInfo())
    return spki['subjectPublicKey'].asOctets()


def build_cert_id(cert: x509.Certificate, issuer: x509.Certificate,
                  hash_algorithm: Optional[str] = None,
                  config: Optional[CodecConfig] = None) -> CertID:
    """
    Build the CertID naming cert, issued by issuer.

    Args:
        cert: Certificate whose status is queried
        issuer: Certificate of the CA that issued cert
        hash_algorithm: One of sha1, sha256, sha384, sha512; defaults to
            config.hash_algorithm

    Returns:
        CertID with the issuer name and key hashes and the serial number of cert
    """
    if hash_algorithm is None:
        hash_algorithm = (config or CodecConfig()).hash_algorithm
    try:
        hash_cls, oid = HASH_ALGORITHMS[hash_algorithm.lower()]
    except KeyError:
        raise ValueError(f"Unsupported CertID hash algorithm: {hash_algorithm}") from None

    return CertID(
        hash_algorithm=AlgorithmIdentifier(algorithm=oid, parameters=_NULL_PARAMETERS),
        issuer_name_hash=_digest(hash_cls, cert.issuer.public_bytes()),
        issuer_key_hash=_digest(hash_cls, _subject_public_key(issuer)),
        serial_number=cert.serial_number,
    )
