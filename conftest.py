from datetime import datetime, timedelta, timezone
from typing import Tuple

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

from ocsp_codec.models import (
    AlgorithmIdentifier,
    BasicResponse,
    CertID,
    OID_SHA1,
    ResponderId,
    ResponseData,
    SingleResponse,
)

SHA256_WITH_ECDSA = "1.2.840.10045.4.3.2"
# DER of "CN=Test OCSP Responder"
RESPONDER_NAME_DER = bytes.fromhex(
    "301e311c301a06035504030c1354657374204f43535020526573706f6e646572"
)
THIS_UPDATE = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)
PRODUCED_AT = datetime(2024, 5, 1, 12, 0, 5, tzinfo=timezone.utc)


def _issue(subject_cn: str, issuer_name: x509.Name, signing_key, public_key, ca: bool) -> x509.Certificate:
    now = datetime.now(timezone.utc)
    builder = (
        x509.CertificateBuilder()
        .subject_name(x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, subject_cn)]))
        .issuer_name(issuer_name)
        .public_key(public_key)
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(days=1))
        .not_valid_after(now + timedelta(days=30))
    )
    if ca:
        builder = builder.add_extension(x509.BasicConstraints(ca=True, path_length=None), critical=True)
    return builder.sign(signing_key, hashes.SHA256())


@pytest.fixture(scope="session")
def ca() -> Tuple[ec.EllipticCurvePrivateKey, x509.Certificate]:
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "Test Issuing CA")])
    return key, _issue("Test Issuing CA", name, key, key.public_key(), ca=True)


@pytest.fixture(scope="session")
def leaf(ca) -> x509.Certificate:
    ca_key, ca_cert = ca
    key = ec.generate_private_key(ec.SECP256R1())
    return _issue("leaf.example.test", ca_cert.subject, ca_key, key.public_key(), ca=False)


@pytest.fixture
def cert_id() -> CertID:
    return CertID(
        hash_algorithm=AlgorithmIdentifier(algorithm=OID_SHA1, parameters=b"\x05\x00"),
        issuer_name_hash=bytes.fromhex("b766b315f42e43928d37687d7770465ea69837c2"),
        issuer_key_hash=bytes.fromhex("92a4752ca49ebe8144eb79fc8ac595a5eb107573"),
        serial_number=0x35DEF4CF,
    )


@pytest.fixture
def make_basic(cert_id):
    """Factory for a basic response with one single response per given SingleResponse kwargs"""
    def _make(*singles: dict) -> BasicResponse:
        responses = [
            SingleResponse(cert_id=kwargs.pop("cert_id", cert_id),
                           this_update=kwargs.pop("this_update", THIS_UPDATE),
                           **kwargs)
            for kwargs in (dict(s) for s in (singles or ({},)))
        ]
        return BasicResponse(
            response_data=ResponseData(
                responder_id=ResponderId.by_name(RESPONDER_NAME_DER),
                produced_at=PRODUCED_AT,
                responses=responses,
            ),
            signature_algorithm=AlgorithmIdentifier(algorithm=SHA256_WITH_ECDSA),
            signature=b"\x30\x06\x02\x01\x01\x02\x01\x02",
        )
    return _make
