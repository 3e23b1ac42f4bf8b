import pytest

from tracker_sync import state as store
from tracker_sync.errors import AssetError


@pytest.fixture(autouse=True)
def clean_state():
    store.reset_state()
    yield
    store.reset_state()


def runner_record(pk, name, stream=None):
    return {"pk": pk, "model": "tracker.runner",
            "fields": {"name": name, "stream": stream or f"https://twitch.tv/{name.lower()}"}}


def run_record(order, name, runners, **fields):
    data = {"name": name, "order": order, "runners": list(runners)}
    data.update(fields)
    pk = 100 + order if isinstance(order, int) else 999
    return {"pk": pk, "model": "tracker.speedrun", "fields": data}


RUNNERS = [
    runner_record(1, "Alice"),
    runner_record(2, "Bob"),
    runner_record(3, "Carol"),
]


def schedule_records(*names, **extra_by_name):
    return [run_record(i, name, [i % 3 + 1], **extra_by_name.get(name, {}))
            for i, name in enumerate(names, start=1)]


class FakeResolver:
    """Encodes the url instead of downloading it."""

    def __init__(self):
        self.failing = set()
        self.calls = []

    def resolve_url(self, url):
        self.calls.append(url)
        if url in self.failing:
            raise AssetError(f"boom: {url}")
        return f"b64:{url}"


class FakeFetcher:
    def __init__(self, runners, runs):
        self.runners = runners
        self.runs = runs
        self.error = None
        self.calls = 0

    def fetch(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.runners, self.runs


class FakeChecklist:
    def __init__(self):
        self.resets = 0

    def reset(self):
        self.resets += 1
