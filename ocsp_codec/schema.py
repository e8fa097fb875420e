#
# ASN.1 schema of the OCSP messages (RFC 6960, appendix B.2)
#
# certStatus is laid out as three OPTIONAL components instead of a CHOICE so
# that responses carrying more or fewer than one status still decode and the
# caller gets to decide what to do with them.
#
from pyasn1.type import namedtype, namedval, tag, univ, useful
from pyasn1_modules import rfc5280


def _explicit(number):
    return tag.Tag(tag.tagClassContext, tag.tagFormatSimple, number)


def _implicit(number, constructed=False):
    tag_format = tag.tagFormatConstructed if constructed else tag.tagFormatSimple
    return tag.Tag(tag.tagClassContext, tag_format, number)


class Version(univ.Integer):
    namedValues = namedval.NamedValues(
        ('v1', 0)
    )


class CertID(univ.Sequence):
    componentType = namedtype.NamedTypes(
        namedtype.NamedType('hashAlgorithm', rfc5280.AlgorithmIdentifier()),
        namedtype.NamedType('issuerNameHash', univ.OctetString()),
        namedtype.NamedType('issuerKeyHash', univ.OctetString()),
        namedtype.NamedType('serialNumber', rfc5280.CertificateSerialNumber()))


class Certs(univ.SequenceOf):
    # Certificates pass through untouched
    componentType = univ.Any()


class Request(univ.Sequence):
    componentType = namedtype.NamedTypes(
        namedtype.NamedType('reqCert', CertID()),
        namedtype.OptionalNamedType(
            'singleRequestExtensions',
            rfc5280.Extensions().subtype(explicitTag=_explicit(0))))


class TBSRequest(univ.Sequence):
    componentType = namedtype.NamedTypes(
        namedtype.DefaultedNamedType(
            'version', Version(0).subtype(explicitTag=_explicit(0))),
        namedtype.OptionalNamedType(
            'requestorName',
            rfc5280.GeneralName().subtype(explicitTag=_explicit(1))),
        namedtype.NamedType('requestList',
                            univ.SequenceOf(componentType=Request())),
        namedtype.OptionalNamedType(
            'requestExtensions',
            rfc5280.Extensions().subtype(explicitTag=_explicit(2))))


class Signature(univ.Sequence):
    componentType = namedtype.NamedTypes(
        namedtype.NamedType('signatureAlgorithm',
                            rfc5280.AlgorithmIdentifier()),
        namedtype.NamedType('signature', univ.BitString()),
        namedtype.OptionalNamedType(
            'certs', Certs().subtype(explicitTag=_explicit(0))))


class OCSPRequest(univ.Sequence):
    componentType = namedtype.NamedTypes(
        namedtype.NamedType('tbsRequest', TBSRequest()),
        namedtype.OptionalNamedType(
            'optionalSignature', Signature().subtype(explicitTag=_explicit(0))))


class OCSPResponseStatus(univ.Enumerated):
    namedValues = namedval.NamedValues(
        ('successful', 0),
        ('malformedRequest', 1),
        ('internalError', 2),
        ('tryLater', 3),
        # ('not-used', 4),
        ('sigRequired', 5),
        ('unauthorized', 6)
    )


class ResponseBytes(univ.Sequence):
    componentType = namedtype.NamedTypes(
        namedtype.NamedType('responseType', univ.ObjectIdentifier()),
        namedtype.NamedType('response', univ.OctetString()))


class OCSPResponse(univ.Sequence):
    componentType = namedtype.NamedTypes(
        namedtype.NamedType('responseStatus', OCSPResponseStatus()),
        namedtype.OptionalNamedType(
            'responseBytes', ResponseBytes().subtype(explicitTag=_explicit(0))))


class RevokedInfo(univ.Sequence):
    componentType = namedtype.NamedTypes(
        namedtype.NamedType('revocationTime', useful.GeneralizedTime()),
        namedtype.OptionalNamedType(
            'revocationReason',
            rfc5280.CRLReason().subtype(explicitTag=_explicit(0))))


class SingleResponse(univ.Sequence):
    componentType = namedtype.NamedTypes(
        namedtype.NamedType('certID', CertID()),
        namedtype.OptionalNamedType(
            'good', univ.Null().subtype(implicitTag=_implicit(0))),
        namedtype.OptionalNamedType(
            'revoked', RevokedInfo().subtype(implicitTag=_implicit(1, constructed=True))),
        namedtype.OptionalNamedType(
            'unknown', univ.Null().subtype(implicitTag=_implicit(2))),
        namedtype.NamedType('thisUpdate', useful.GeneralizedTime()),
        namedtype.OptionalNamedType(
            'nextUpdate', useful.GeneralizedTime().subtype(explicitTag=_explicit(0))),
        namedtype.OptionalNamedType(
            'singleExtensions',
            rfc5280.Extensions().subtype(explicitTag=_explicit(1))))


class ResponderID(univ.Choice):
    componentType = namedtype.NamedTypes(
        namedtype.NamedType('byName', rfc5280.Name().subtype(
            explicitTag=_explicit(1))),
        namedtype.NamedType('byKey', univ.OctetString().subtype(
            explicitTag=_explicit(2))))


class ResponseData(univ.Sequence):
    componentType = namedtype.NamedTypes(
        namedtype.DefaultedNamedType(
            'version', Version(0).subtype(explicitTag=_explicit(0))),
        namedtype.NamedType('responderID', ResponderID()),
        namedtype.NamedType('producedAt', useful.GeneralizedTime()),
        namedtype.NamedType('responses',
                            univ.SequenceOf(componentType=SingleResponse())),
        namedtype.OptionalNamedType(
            'responseExtensions',
            rfc5280.Extensions().subtype(explicitTag=_explicit(1))))


class BasicOCSPResponse(univ.Sequence):
    componentType = namedtype.NamedTypes(
        namedtype.NamedType('tbsResponseData', ResponseData()),
        namedtype.NamedType('signatureAlgorithm',
                            rfc5280.AlgorithmIdentifier()),
        namedtype.NamedType('signature', univ.BitString()),
        namedtype.OptionalNamedType(
            'certs', Certs().subtype(explicitTag=_explicit(0))))
