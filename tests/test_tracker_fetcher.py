import logging
import threading
from unittest import mock

import pytest
import requests

from conftest import RUNNERS, schedule_records
from tracker_sync.errors import DecodeError, TransportError
from tracker_sync.fetchers.tracker import TrackerFetcher


def make_response(payload=None, status_error=None, json_error=None):
    r = mock.MagicMock()
    if status_error is not None:
        r.raise_for_status.side_effect = status_error
    if json_error is not None:
        r.json.side_effect = json_error
    else:
        r.json.return_value = payload
    return r


def make_fetcher(responses):
    session = mock.MagicMock()

    def get(url, params=None, timeout=None):
        result = responses[params["type"]]
        if isinstance(result, Exception):
            raise result
        return result

    session.get.side_effect = get
    return TrackerFetcher(url="https://tracker.test/search", event_id=17, session=session), session


def test_fetch_returns_both_listings():
    runs = schedule_records("A", "B")
    fetcher, session = make_fetcher({"runner": make_response(RUNNERS), "run": make_response(runs)})

    runners, schedule = fetcher.fetch()

    assert runners == RUNNERS
    assert schedule == runs
    params = sorted(call.kwargs["params"]["type"] for call in session.get.call_args_list)
    assert params == ["run", "runner"]
    for call in session.get.call_args_list:
        assert call.args[0] == "https://tracker.test/search"
        assert call.kwargs["params"]["event"] == 17
    fetcher.close()


def test_connection_failure_is_transport_error():
    fetcher, _ = make_fetcher({
        "runner": make_response(RUNNERS),
        "run": requests.ConnectionError("refused"),
    })

    with pytest.raises(TransportError):
        fetcher.fetch()
    fetcher.close()


def test_bad_status_is_transport_error():
    fetcher, _ = make_fetcher({
        "runner": make_response(status_error=requests.HTTPError("503 Server Error")),
        "run": make_response(schedule_records("A")),
    })

    with pytest.raises(TransportError):
        fetcher.fetch()
    fetcher.close()


def test_non_json_body_is_decode_error():
    fetcher, _ = make_fetcher({
        "runner": make_response(RUNNERS),
        "run": make_response(json_error=ValueError("Expecting value")),
    })

    with pytest.raises(DecodeError):
        fetcher.fetch()
    fetcher.close()


@pytest.mark.parametrize("payload", [{"detail": "oops"}, [{"pk": 1}], ["text"]])
def test_unexpected_shape_is_decode_error(payload):
    fetcher, _ = make_fetcher({"runner": make_response(payload), "run": make_response([])})

    with pytest.raises(DecodeError):
        fetcher.fetch()
    fetcher.close()


def test_listings_are_fetched_concurrently():
    # Each search blocks until the other has started; a sequential fetch would time out here
    both_started = threading.Barrier(2, timeout=2)
    payloads = {"runner": RUNNERS, "run": schedule_records("A")}
    session = mock.MagicMock()

    def get(url, params=None, timeout=None):
        both_started.wait()
        return make_response(payloads[params["type"]])

    session.get.side_effect = get
    fetcher = TrackerFetcher(url="https://tracker.test/search", event_id=17, session=session)

    runners, runs = fetcher.fetch()

    assert runners == RUNNERS
    assert runs == payloads["run"]
    fetcher.close()


def test_failed_listing_is_logged(caplog):
    fetcher, _ = make_fetcher({
        "runner": make_response(RUNNERS),
        "run": requests.ConnectionError("refused"),
    })

    with caplog.at_level(logging.WARNING, logger="tracker_sync.fetchers.tracker"):
        with pytest.raises(TransportError):
            fetcher.fetch()

    assert "run search failed" in caplog.text
    fetcher.close()
