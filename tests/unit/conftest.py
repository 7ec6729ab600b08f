"""
Unit test fixtures - no external dependencies needed.
"""
import json
import pytest
from unittest.mock import Mock
from datetime import datetime, timezone


@pytest.fixture
def mock_db():
    """Mock Firestore client for unit tests."""
    db = Mock()
    db.collection = Mock(return_value=Mock())
    return db


@pytest.fixture(autouse=True)
def no_redis(monkeypatch):
    """Keep the cache and rate limiter in their no-Redis mode."""
    monkeypatch.delenv("REDIS_HOST", raising=False)
    monkeypatch.delenv("HEALTHDESK_DATA_MODE", raising=False)


def _make_doc(doc_id, data, exists=True):
    doc = Mock()
    doc.id = doc_id
    doc.exists = exists
    doc.to_dict = Mock(return_value=dict(data) if data is not None else None)
    return doc


def _make_query(docs):
    query = Mock()
    query.where.return_value = query
    query.order_by.return_value = query
    query.limit.return_value = query
    query.start_after.return_value = query
    query.stream.return_value = iter(docs)
    return query


def _make_record(record_id, record_type, payload, record_date="2026-01-08", user_id="user123"):
    return {
        "id": record_id,
        "user_id": user_id,
        "record_type": record_type,
        "record_date": record_date,
        "description": payload if isinstance(payload, str) else json.dumps(payload),
        "status": "active",
        "created_at": datetime(2026, 1, 8, 9, 0, tzinfo=timezone.utc),
    }


@pytest.fixture
def make_doc():
    """Factory for Firestore document snapshot stand-ins."""
    return _make_doc


@pytest.fixture
def make_query():
    """Factory for chainable queries whose stream() yields the given snapshots."""
    return _make_query


@pytest.fixture
def make_record():
    """Factory for stored health records as they come back from Firestore."""
    return _make_record
