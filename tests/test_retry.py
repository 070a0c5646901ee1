from unittest import mock

import pytest

from dstore.retry import RetriesExhaustedError, RetryDatastore


class FailStore:
    """An in-memory store that asks ``fail`` for an error before each operation."""

    def __init__(self, fail):
        self.fail = fail
        self.data = {}

    def _check(self, op):
        err = self.fail(op)
        if err is not None:
            raise err

    def get(self, key):
        self._check("get")
        return self.data[key]

    def put(self, key, value):
        self._check("put")
        self.data[key] = value

    def has(self, key):
        self._check("has")
        return key in self.data

    def get_size(self, key):
        self._check("getsize")
        return len(self.data[key])

    def delete(self, key):
        self._check("delete")
        self.data.pop(key, None)

    def sync(self, prefix):
        self._check("sync")


def test_retry_failure():
    my_err = RuntimeError("this is an actual error")
    calls = []

    def fail(op):
        calls.append(op)
        return my_err

    rds = RetryDatastore(FailStore(fail), lambda err: err is my_err, retries=5)
    with pytest.raises(RetriesExhaustedError) as info:
        rds.get("/test")
    assert "ran out of retries" in str(info.value)
    assert info.value.error is my_err
    assert len(calls) == 6


def test_real_error_gets_through():
    my_err = RuntimeError("this is an actual error")
    rds = RetryDatastore(FailStore(lambda op: my_err), lambda err: False, retries=5)
    for call in (lambda: rds.get("/test"), lambda: rds.has("/test"), lambda: rds.put("/test", None)):
        with pytest.raises(RuntimeError) as info:
            call()
        assert info.value is my_err


def test_real_error_after_temp():
    my_err = RuntimeError("this is an actual error")
    temp_err = RuntimeError("this is a temp error")
    count = 0

    def fail(op):
        nonlocal count
        count += 1
        return temp_err if count < 3 else my_err

    rds = RetryDatastore(FailStore(fail), lambda err: err is temp_err, retries=5)
    with pytest.raises(RuntimeError) as info:
        rds.get("/test")
    assert info.value is my_err
    assert count == 3


def test_success_after_temp():
    temp_err = RuntimeError("this is a temp error")
    count = 0

    def fail(op):
        nonlocal count
        count += 1
        if count < 3:
            return temp_err
        count = 0
        return None

    rds = RetryDatastore(FailStore(fail), lambda err: err is temp_err, retries=5)
    rds.put("/test", b"foo")
    assert rds.has("/test") is True
    assert rds.get("/test") == b"foo"
    assert rds.get_size("/test") == 3


def test_sleeps_grow_linearly():
    temp_err = RuntimeError("temp")
    rds = RetryDatastore(FailStore(lambda op: temp_err), lambda err: True, retries=3, delay=0.5)
    with mock.patch("time.sleep") as sleep:
        with pytest.raises(RetriesExhaustedError):
            rds.sync("/")
    assert [c.args[0] for c in sleep.call_args_list] == [0.5, 1.0, 1.5]


def test_zero_retries_gives_up_at_once():
    temp_err = RuntimeError("temp")
    calls = []

    def fail(op):
        calls.append(op)
        return temp_err

    rds = RetryDatastore(FailStore(fail), lambda err: True)
    with pytest.raises(RetriesExhaustedError):
        rds.has("/x")
    assert calls == ["has"]


def test_delete_is_not_retried():
    temp_err = RuntimeError("temp")
    calls = []

    def fail(op):
        calls.append(op)
        return temp_err

    rds = RetryDatastore(FailStore(fail), lambda err: True, retries=5)
    with pytest.raises(RuntimeError) as info:
        rds.delete("/x")
    assert info.value is temp_err
    assert calls == ["delete"]


def test_disk_usage_defaults_to_zero():
    rds = RetryDatastore(FailStore(lambda op: None), lambda err: True, retries=2)
    assert rds.disk_usage() == 0


def test_disk_usage_retried():
    temp_err = RuntimeError("temp")
    attempts = []

    class Sized(FailStore):
        def disk_usage(self):
            attempts.append(1)
            if len(attempts) < 2:
                raise temp_err
            return 7

    rds = RetryDatastore(Sized(lambda op: None), lambda err: err is temp_err, retries=2)
    assert rds.disk_usage() == 7
    assert len(attempts) == 2