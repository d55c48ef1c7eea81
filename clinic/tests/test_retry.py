import pytest

from clinic.services.retry import execute_with_retry, is_rate_limit_error


class FakeResponse:
    def __init__(self, status_code):
        self.status_code = status_code


class UpstreamError(Exception):
    def __init__(self, message='', status_code=None):
        super().__init__(message)
        self.response = FakeResponse(status_code) if status_code else None


def test_rate_limit_detection():
    assert is_rate_limit_error(UpstreamError(status_code=429))
    assert is_rate_limit_error(Exception('HTTP 429 Too Many Requests'))
    assert is_rate_limit_error(Exception('Rate limit exceeded'))
    assert not is_rate_limit_error(UpstreamError('boom', status_code=500))
    assert not is_rate_limit_error(ValueError('bad value'))


def test_retries_rate_limits_until_success():
    calls, waits = [], []

    def flaky():
        calls.append(1)
        if len(calls) < 3:
            raise UpstreamError(status_code=429)
        return 'ok'

    assert execute_with_retry(flaky, max_retries=3, base_delay=1.0, sleep=waits.append) == 'ok'
    assert len(calls) == 3
    assert len(waits) == 2
    # base_delay * 2**attempt plus jitter below one second
    assert 1.0 <= waits[0] < 2.0
    assert 2.0 <= waits[1] < 3.0


def test_gives_up_after_max_attempts():
    calls, waits = [], []

    def always_limited():
        calls.append(1)
        raise Exception('Rate limit exceeded')

    with pytest.raises(Exception, match='Rate limit'):
        execute_with_retry(always_limited, max_retries=3, base_delay=0.5, sleep=waits.append)
    assert len(calls) == 3
    assert len(waits) == 2


def test_other_errors_propagate_immediately():
    calls = []

    def broken():
        calls.append(1)
        raise ValueError('not a rate limit')

    with pytest.raises(ValueError):
        execute_with_retry(broken, max_retries=5, base_delay=0, sleep=lambda s: None)
    assert len(calls) == 1


def test_non_callable_is_rejected():
    with pytest.raises(TypeError):
        execute_with_retry('not callable')


def test_waits_and_give_up_are_logged(caplog):
    def always_limited():
        raise UpstreamError('too many requests', status_code=429)

    with caplog.at_level('WARNING', logger='clinic.services.retry'):
        with pytest.raises(UpstreamError):
            execute_with_retry(always_limited, max_retries=2, base_delay=0, sleep=lambda s: None)
    messages = [r.getMessage() for r in caplog.records if r.name == 'clinic.services.retry']
    assert messages[0].startswith('Rate limited (attempt 1/2), retrying in')
    assert messages[-1].startswith('Rate limited, giving up after 2 attempts')
