"""
Partition raw health records into typed buckets.

Records arrive as plain dicts straight from Firestore, newest first. Each
record's `description` holds a JSON object; the decoded object is attached
as `data`. Records whose payload cannot be decoded are logged and dropped.
"""
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List

from healthdesk.models.health import RecordType

logger = logging.getLogger(__name__)


@dataclass
class ClassifiedRecords:
    vitals: List[Dict[str, Any]] = field(default_factory=list)
    body_measurements: List[Dict[str, Any]] = field(default_factory=list)
    lab_results: List[Dict[str, Any]] = field(default_factory=list)
    diet_plans: List[Dict[str, Any]] = field(default_factory=list)

    def total(self) -> int:
        return len(self.vitals) + len(self.body_measurements) + len(self.lab_results) + len(self.diet_plans)


def decode_payload(description: Any) -> Dict[str, Any] | None:
    """Decode a record description. Returns None unless it is a JSON object."""
    if not isinstance(description, (str, bytes, bytearray)):
        return None
    try:
        payload = json.loads(description)
    except (ValueError, TypeError):
        return None
    if not isinstance(payload, dict):
        return None
    return payload


def classify_records(records: Iterable[Dict[str, Any]]) -> ClassifiedRecords:
    """
    Split records into vitals, body measurement, lab result and diet plan
    buckets. Never raises; bucket order follows input order.
    """
    classified = ClassifiedRecords()
    buckets = {
        RecordType.VITALS.value: classified.vitals,
        RecordType.BODY_MEASUREMENTS.value: classified.body_measurements,
        RecordType.LAB_RESULTS.value: classified.lab_results,
        RecordType.DIET_PLAN.value: classified.diet_plans,
    }

    for record in records:
        payload = decode_payload(record.get("description"))
        if payload is None:
            logger.warning(f"Skipping record {record.get('id')}: description is not a JSON object")
            continue

        record_type = record.get("record_type")
        bucket = buckets.get(record_type) if isinstance(record_type, str) else None
        if bucket is None:
            logger.debug(f"Skipping record {record.get('id')} with unknown type {record_type!r}")
            continue

        bucket.append({**record, "data": payload})

    return classified
