import pytest

from webservice.config import ServiceConfig, EvidenceConfig, LogConfig
from webservice.interfaces import ISession, PassthroughObserver


class StubResponse:
    def __init__(self, status_code=200, content=b"{}", reason="OK"):
        self.status_code = status_code
        self.content = content
        self.reason = reason


class StubSession(ISession):
    """
    Records every request and completes it synchronously with a canned outcome,
    unless deliver=False, in which case completions are parked in `pending`.
    """

    def __init__(self, events=None, outcome=None, deliver=True):
        self.events = events if events is not None else []
        self.outcome = outcome or (b"{}", StubResponse(), None)
        self.deliver = deliver
        self.calls = []
        self.pending = []

    def perform_request(self, request, completion):
        self.calls.append(request)
        self.events.append(("transport", request))
        if self.deliver:
            completion(*self.outcome)
        else:
            self.pending.append(completion)
        return f"task-{len(self.calls)}"


class RecordingObserver(PassthroughObserver):
    def __init__(self, events, replacement=None):
        self.events = events
        self.replacement = replacement

    def modified_request(self, request):
        self.events.append(("modified_request", request))
        return self.replacement

    def request_sent(self, request):
        self.events.append(("request_sent", request))

    def response_received(self, response, data, request, error):
        self.events.append(("response_received", request, response, data, error))


@pytest.fixture
def events():
    return []


@pytest.fixture
def stub_session(events):
    return StubSession(events=events)


@pytest.fixture
def observer(events):
    return RecordingObserver(events)


@pytest.fixture
def completion_recorder(events):
    outcomes = []

    def completion(data, response, error):
        events.append(("completion", data, response, error))
        outcomes.append((data, response, error))

    completion.outcomes = outcomes
    return completion


@pytest.fixture
def service_config(tmp_path):
    return ServiceConfig(
        base_url="https://api.example.com/v1/",
        log=LogConfig(logs_dir=str(tmp_path / "logs")),
        evidence=EvidenceConfig(logs_dir=str(tmp_path / "evidence")),
    )
