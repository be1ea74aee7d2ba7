import logging
import re
import uuid

from signalstash.errors import ERR_REDIS_WRITE, log_and_response

_BODY = re.compile(r"^internal error \(correlation id: ([0-9a-f-]{36})\)$")


def _correlation_id(response):
    match = _BODY.match(response.body.decode())
    assert match is not None
    return match.group(1)


def test_response_is_internal_error():
    response = log_and_response(ERR_REDIS_WRITE, ValueError("boom"))
    assert response.status_code == 500
    assert uuid.UUID(_correlation_id(response)).version == 4


def test_response_is_plain_text():
    response = log_and_response("context", "boom")
    assert response.headers["content-type"].startswith("text/plain")


def test_error_is_logged_with_correlation_id(caplog):
    with caplog.at_level(logging.ERROR, logger="signalstash.errors"):
        response = log_and_response(ERR_REDIS_WRITE, RuntimeError("disk full"))
    correlation_id = _correlation_id(response)
    assert len(caplog.records) == 1
    record = caplog.records[0]
    assert record.levelno == logging.ERROR
    assert record.correlation_id == correlation_id
    message = record.getMessage()
    assert ERR_REDIS_WRITE in message
    assert "disk full" in message
    assert correlation_id in message


def test_each_call_gets_a_new_correlation_id():
    first = _correlation_id(log_and_response("ctx", "a"))
    second = _correlation_id(log_and_response("ctx", "a"))
    assert first != second
    assert uuid.UUID(first) != uuid.UUID(second)