"""Tests for identity stamping."""
from datetime import datetime, timedelta, timezone
from event_processor.event_models import Envelope
from event_processor.services.stamping import IdentityStamper


def test_missing_id_is_generated():
    stamped = IdentityStamper().stamp(Envelope(type="t", source="s", payload={}))
    assert stamped.id
    assert len(stamped.id) >= 36


def test_empty_string_id_is_generated():
    stamped = IdentityStamper().stamp(Envelope(id="", payload={}))
    assert stamped.id


def test_generated_ids_are_distinct():
    stamper = IdentityStamper()
    ids = {stamper.stamp(Envelope()).id for _ in range(10_000)}
    assert len(ids) == 10_000


def test_present_id_is_preserved():
    stamped = IdentityStamper().stamp(Envelope(id="abc-123"))
    assert stamped.id == "abc-123"


def test_missing_timestamp_is_now():
    before = datetime.now(timezone.utc)
    stamped = IdentityStamper().stamp(Envelope())
    after = datetime.now(timezone.utc)

    assert stamped.timestamp is not None
    assert before - timedelta(seconds=1) <= stamped.timestamp <= after + timedelta(seconds=1)


def test_present_timestamp_is_preserved():
    ts = datetime(2020, 1, 1, tzinfo=timezone.utc)
    stamped = IdentityStamper().stamp(Envelope(timestamp=ts))
    assert stamped.timestamp == ts


def test_stamping_is_idempotent():
    stamper = IdentityStamper()
    once = stamper.stamp(Envelope(type="t", source="s", payload={"a": 1}))
    twice = stamper.stamp(once)

    assert twice == once
    assert twice is once


def test_stamping_does_not_mutate_input():
    original = Envelope(type="t")
    IdentityStamper().stamp(original)
    assert original.id is None
    assert original.timestamp is None


def test_injected_factories_are_used():
    ts = datetime(2026, 10, 19, tzinfo=timezone.utc)
    stamper = IdentityStamper(id_factory=lambda: "fixed-id", clock=lambda: ts)

    stamped = stamper.stamp(Envelope())

    assert stamped.id == "fixed-id"
    assert stamped.timestamp == ts
