import csv
import json
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from .config import CodecConfig
from .models import (
    OcspRequest,
    ResponderIdKind,
    ResponseStatus,
    RevocationReason,
)
from .response import decode_basic_response, decode_response
from .status import nonce_echoed
from .wire import LogCallback


@dataclass
class ResponseSummary:
    response_status: str
    cert_status: Optional[str]
    revocation_reason: Optional[str]
    revocation_time: Optional[str]
    this_update: Optional[str]
    next_update: Optional[str]
    produced_at: Optional[str]
    responder_id: Optional[str]
    version: Optional[str]
    signature_algorithm_oid: Optional[str]
    nonce_echoed: Optional[bool]
    raw_der: bytes


def _fmt_time(value: Optional[datetime]) -> Optional[str]:
    return value.strftime("%Y-%m-%dT%H:%M:%SZ") if value is not None else None


def _fmt_reason(reason: Optional[int]) -> Optional[str]:
    if reason is None:
        return None
    try:
        return RevocationReason(reason).name
    except ValueError:
        return str(reason)


def summarize_response(data: bytes, request: Optional[OcspRequest] = None,
                       config: Optional[CodecConfig] = None,
                       log_callback: Optional[LogCallback] = None) -> ResponseSummary:
    """
    Flatten a DER encoded OCSP response into a summary of its first single response.

    Args:
        data: DER encoded OCSPResponse
        request: The request the response answers; used to check the nonce echo

    Raises:
        DecodeError: the response or its basic response cannot be decoded
    """
    response = decode_response(data, config, log_callback)
    summary = ResponseSummary(
        response_status=response.status.name,
        cert_status=None,
        revocation_reason=None,
        revocation_time=None,
        this_update=None,
        next_update=None,
        produced_at=None,
        responder_id=None,
        version=None,
        signature_algorithm_oid=None,
        nonce_echoed=None,
        raw_der=bytes(data),
    )
    if response.status != ResponseStatus.SUCCESSFUL or response.response_bytes is None:
        return summary

    basic = decode_basic_response(response.response_bytes.response, config, log_callback)
    tbs = basic.response_data
    summary.produced_at = _fmt_time(tbs.produced_at)
    summary.version = str(tbs.version)
    summary.signature_algorithm_oid = basic.signature_algorithm.algorithm
    if tbs.responder_id.kind == ResponderIdKind.BY_KEY:
        summary.responder_id = f"key:{tbs.responder_id.value.hex()}"
    else:
        summary.responder_id = f"name:{tbs.responder_id.value.hex()}"
    if request is not None:
        summary.nonce_echoed = nonce_echoed(request, basic)

    if basic.responses:
        r0 = basic.responses[0]
        status = r0.status
        summary.cert_status = status.name if status is not None else None
        summary.this_update = _fmt_time(r0.this_update)
        summary.next_update = _fmt_time(r0.next_update)
        if not r0.revoked.is_empty():
            summary.revocation_time = _fmt_time(r0.revoked.revocation_time)
            summary.revocation_reason = _fmt_reason(r0.revoked.revocation_reason)
    return summary


def _summary_row(s: ResponseSummary) -> dict:
    return {
        "response_status": s.response_status,
        "cert_status": s.cert_status,
        "revocation_reason": s.revocation_reason,
        "revocation_time": s.revocation_time,
        "this_update": s.this_update,
        "next_update": s.next_update,
        "produced_at": s.produced_at,
        "responder_id": s.responder_id,
        "version": s.version,
        "signature_algorithm_oid": s.signature_algorithm_oid,
        "nonce_echoed": s.nonce_echoed,
        "raw_der": s.raw_der.hex(),
    }


def export_summaries_json(summaries: List[ResponseSummary], path: str) -> None:
    payload = [_summary_row(s) for s in summaries]
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)


def export_summaries_csv(summaries: List[ResponseSummary], path: str) -> None:
    cols = ["response_status", "cert_status", "revocation_reason", "revocation_time",
            "this_update", "next_update", "produced_at", "responder_id", "version",
            "signature_algorithm_oid", "nonce_echoed", "raw_der"]
    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=cols)
        w.writeheader()
        for s in summaries:
            w.writerow(_summary_row(s))
