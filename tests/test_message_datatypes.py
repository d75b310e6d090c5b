from datetime import datetime

import pytest

from spamgate.datatypes.classification_datatypes import ClassificationResult, Decision
from spamgate.datatypes.message_datatypes import Message, SubmissionOutcome, format_timestamp


def test_create_stamps_acceptance_time():
    moment = datetime(2024, 1, 15, 10, 30, 0)
    msg = Message.create("alice", "Great post", moment=moment)

    assert msg.author == "alice"
    assert msg.text == "Great post"
    assert msg.timestamp == format_timestamp(moment)


def test_payload_has_exactly_the_wire_fields():
    msg = Message(author="alice", timestamp="t", text="hi")
    assert msg.to_payload() == {"username": "alice", "timestamp": "t", "comment": "hi"}


def test_from_payload_ignores_extra_fields():
    msg = Message.from_payload({"username": "bob", "timestamp": "t", "comment": "hey", "id": 7})
    assert msg == Message(author="bob", timestamp="t", text="hey")


@pytest.mark.parametrize(
    "payload",
    [
        {"timestamp": "t", "comment": "hey"},
        {"username": "bob", "timestamp": 5, "comment": "hey"},
        {"username": "bob", "timestamp": "t", "comment": None},
    ],
)
def test_from_payload_rejects_missing_or_non_string_fields(payload):
    with pytest.raises(ValueError):
        Message.from_payload(payload)


def test_message_is_immutable():
    msg = Message(author="alice", timestamp="t", text="hi")
    with pytest.raises(AttributeError):
        msg.text = "changed"  # type: ignore[misc]


def test_classification_result_from_probabilities():
    result = ClassificationResult.from_probabilities([0.1, 0.9])
    assert result.as_tuple() == (0.1, 0.9)

    with pytest.raises(ValueError):
        ClassificationResult.from_probabilities([1.0])


def test_outcome_flags():
    accepted = SubmissionOutcome(text="hi", decision=Decision.ACCEPT, message=Message("a", "t", "hi"))
    failed = SubmissionOutcome(text="hi", decision=Decision.REJECT, error=RuntimeError("x"))

    assert accepted.accepted and not accepted.failed
    assert not failed.accepted and failed.failed
