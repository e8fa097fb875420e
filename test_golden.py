"""
Decode and re-encode OCSP messages produced by other implementations.

The fixtures are the request/response pair shipped with the pyasn1-modules
RFC 6960 tests.
"""
import base64
from datetime import datetime, timezone

from ocsp_codec.models import (
    CertStatus,
    OID_OCSP_BASIC,
    OID_OCSP_NONCE,
    OID_SHA1,
    ResponderIdKind,
    ResponseStatus,
)
from ocsp_codec.request import decode_request, encode_request, nonce
from ocsp_codec.response import (
    decode_basic_response,
    decode_response,
    decode_response_as_basic,
    encode_basic_response,
    encode_response,
)
from ocsp_codec.status import get_response_nonce

OCSP_REQUEST_B64 = """\
MGowaDBBMD8wPTAJBgUrDgMCGgUABBS3ZrMV9C5Dko03aH13cEZeppg3wgQUkqR1LKSevoFE63n8
isWVpesQdXMCBDXe9M+iIzAhMB8GCSsGAQUFBzABAgQSBBBjdJOiIW9EKJGELNNf/rdA
"""

OCSP_RESPONSE_B64 = """\
MIIEvQoBAKCCBLYwggSyBgkrBgEFBQcwAQEEggSjMIIEnzCCAQ+hgYAwfjELMAkGA1UEBhMCQVUx
EzARBgNVBAgTClNvbWUtU3RhdGUxITAfBgNVBAoTGEludGVybmV0IFdpZGdpdHMgUHR5IEx0ZDEV
MBMGA1UEAxMMc25tcGxhYnMuY29tMSAwHgYJKoZIhvcNAQkBFhFpbmZvQHNubXBsYWJzLmNvbRgP
MjAxMjA0MTExNDA5MjJaMFQwUjA9MAkGBSsOAwIaBQAEFLdmsxX0LkOSjTdofXdwRl6mmDfCBBSS
pHUspJ6+gUTrefyKxZWl6xB1cwIENd70z4IAGA8yMDEyMDQxMTE0MDkyMlqhIzAhMB8GCSsGAQUF
BzABAgQSBBBjdJOiIW9EKJGELNNf/rdAMA0GCSqGSIb3DQEBBQUAA4GBADk7oRiCy4ew1u0N52QL
RFpW+tdb0NfkV2Xyu+HChKiTThZPr9ZXalIgkJ1w3BAnzhbB0JX/zq7Pf8yEz/OrQ4GGH7HyD3Vg
PkMu+J6I3A2An+bUQo99AmCbZ5/tSHtDYQMQt3iNbv1fk0yvDmh7UdKuXUNSyJdHeg27dMNy4k8A
oIIC9TCCAvEwggLtMIICVqADAgECAgEBMA0GCSqGSIb3DQEBBQUAMH4xCzAJBgNVBAYTAkFVMRMw
EQYDVQQIEwpTb21lLVN0YXRlMSEwHwYDVQQKExhJbnRlcm5ldCBXaWRnaXRzIFB0eSBMdGQxFTAT
BgNVBAMTDHNubXBsYWJzLmNvbTEgMB4GCSqGSIb3DQEJARYRaW5mb0Bzbm1wbGFicy5jb20wHhcN
MTIwNDExMTMyNTM1WhcNMTMwNDExMTMyNTM1WjB+MQswCQYDVQQGEwJBVTETMBEGA1UECBMKU29t
ZS1TdGF0ZTEhMB8GA1UEChMYSW50ZXJuZXQgV2lkZ2l0cyBQdHkgTHRkMRUwEwYDVQQDEwxzbm1w
bGFicy5jb20xIDAeBgkqhkiG9w0BCQEWEWluZm9Ac25tcGxhYnMuY29tMIGfMA0GCSqGSIb3DQEB
AQUAA4GNADCBiQKBgQDDDU5HOnNV8I2CojxB8ilIWRHYQuaAjnjrETMOprouDHFXnwWqQo/I3m0b
XYmocrh9kDefb+cgc7+eJKvAvBqrqXRnU38DmQU/zhypCftGGfP8xjuBZ1n23lR3hplN1yYA0J2X
SgBaAg6e8OsKf1vcX8Es09rDo8mQpt4G2zR56wIDAQABo3sweTAJBgNVHRMEAjAAMCwGCWCGSAGG
+EIBDQQfFh1PcGVuU1NMIEdlbmVyYXRlZCBDZXJ0aWZpY2F0ZTAdBgNVHQ4EFgQU8Ys2dpJFLMHl
yY57D4BNmlqnEcYwHwYDVR0jBBgwFoAU8Ys2dpJFLMHlyY57D4BNmlqnEcYwDQYJKoZIhvcNAQEF
BQADgYEAWR0uFJVlQId6hVpUbgXFTpywtNitNXFiYYkRRv77McSJqLCa/c1wnuLmqcFcuRUK0oN6
8ZJDP2HDDKe8MCZ8+sx+CF54eM8VCgN9uQ9XyE7x9XrXDd3Uw9RJVaWSIezkNKNeBE0lDM2jUjC4
HAESdf7nebz1wtqAOXE1jWF/y8g=
"""

OCSP_REQUEST_DER = base64.b64decode(OCSP_REQUEST_B64)
OCSP_RESPONSE_DER = base64.b64decode(OCSP_RESPONSE_B64)

ISSUER_NAME_HASH = bytes.fromhex("b766b315f42e43928d37687d7770465ea69837c2")
ISSUER_KEY_HASH = bytes.fromhex("92a4752ca49ebe8144eb79fc8ac595a5eb107573")
NONCE_VALUE = bytes.fromhex("0410637493a2216f442891842cd35ffeb740")
SNMPLABS = datetime(2012, 4, 11, 14, 9, 22, tzinfo=timezone.utc)


def test_request_fields():
    assert len(OCSP_REQUEST_DER) == 108
    req = decode_request(OCSP_REQUEST_DER)

    assert req.version == 0
    assert req.requestor_name is None
    assert req.signature is None
    assert len(req.requests) == 1

    cert_id = req.requests[0].cert_id
    assert cert_id.hash_algorithm.algorithm == OID_SHA1
    assert cert_id.hash_algorithm.parameters == b"\x05\x00"
    assert cert_id.issuer_name_hash == ISSUER_NAME_HASH
    assert cert_id.issuer_key_hash == ISSUER_KEY_HASH
    assert cert_id.serial_number == 0x35DEF4CF
    assert req.requests[0].extensions == []

    assert [e.oid for e in req.extensions] == [OID_OCSP_NONCE]
    assert req.extensions[0].critical is False
    assert nonce(req) == NONCE_VALUE


def test_request_reencodes_identically():
    assert encode_request(decode_request(OCSP_REQUEST_DER)) == OCSP_REQUEST_DER


def test_response_envelope():
    assert len(OCSP_RESPONSE_DER) == 1217
    resp = decode_response(OCSP_RESPONSE_DER)

    assert resp.status == ResponseStatus.SUCCESSFUL
    assert resp.response_bytes.response_type == OID_OCSP_BASIC
    assert len(resp.response_bytes.response) == 1187
    assert encode_response(resp) == OCSP_RESPONSE_DER


def test_basic_response_fields():
    basic = decode_response_as_basic(OCSP_RESPONSE_DER)
    data = basic.response_data

    assert data.version == 0
    assert data.responder_id.kind == ResponderIdKind.BY_NAME
    name = data.responder_id.value
    assert len(name) == 128
    assert name[:2] == b"\x30\x7e"
    for part in (b"Some-State", b"Internet Widgits Pty Ltd", b"snmplabs.com", b"info@snmplabs.com"):
        assert part in name
    assert data.produced_at == SNMPLABS

    assert len(basic.responses) == 1
    single = basic.responses[0]
    assert single.cert_id.issuer_name_hash == ISSUER_NAME_HASH
    assert single.cert_id.issuer_key_hash == ISSUER_KEY_HASH
    assert single.cert_id.serial_number == 0x35DEF4CF
    assert single.unknown is True
    assert single.good is False
    assert single.revoked.is_empty()
    assert single.status == CertStatus.UNKNOWN
    assert single.this_update == SNMPLABS
    assert single.next_update is None
    assert single.extensions == []

    assert get_response_nonce(basic) == NONCE_VALUE

    assert basic.signature_algorithm.algorithm == "1.2.840.113549.1.1.5"
    assert basic.signature_algorithm.parameters == b"\x05\x00"
    assert len(basic.signature) == 128
    assert basic.signature[:4] == bytes.fromhex("393ba118")
    assert len(basic.certs) == 1
    assert len(basic.certs[0]) == 753
    assert basic.certs[0][:4] == b"\x30\x82\x02\xed"


def test_basic_response_reencodes_identically():
    inner = decode_response(OCSP_RESPONSE_DER).response_bytes.response
    assert encode_basic_response(decode_basic_response(inner)) == inner
