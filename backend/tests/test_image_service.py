import pytest
import requests

from conftest import DummyResp
from dreamers.core.errors import GenerationFailed, GenerationTimeout
from dreamers.services.image.replicate import ReplicateImageService

OUTPUT_URL = "https://replicate.delivery/pbxt/panel.png"


@pytest.fixture()
def sleeps():
    return []


@pytest.fixture()
def service(sleeps):
    return ReplicateImageService(
        "test-key",
        "model-version",
        base_url="https://replicate.test",
        sleep=sleeps.append,
    )


def _mock_replicate(monkeypatch, statuses, output=None, create_status=200):
    calls = {"post": [], "get": []}

    def _post(url, *args, **kwargs):
        calls["post"].append((url, kwargs))
        return DummyResp(create_status, {"id": "pred-1", "status": "starting"}, text="created")

    def _get(url, *args, **kwargs):
        calls["get"].append(url)
        status = statuses[len(calls["get"]) - 1]
        body = {"id": "pred-1", "status": status}
        if status == "succeeded":
            body["output"] = output if output is not None else [OUTPUT_URL]
        return DummyResp(200, body)

    monkeypatch.setattr(requests, "post", _post)
    monkeypatch.setattr(requests, "get", _get)
    return calls


def test_succeeds_after_three_polls(monkeypatch, service, sleeps):
    calls = _mock_replicate(monkeypatch, ["starting", "processing", "succeeded"])

    assert service.generate_image("a robot in the rain") == OUTPUT_URL
    assert len(calls["get"]) == 3
    assert calls["get"][0] == "https://replicate.test/v1/predictions/pred-1"
    assert sleeps == [2.0, 2.0]


def test_creation_request_shape(monkeypatch, service):
    calls = _mock_replicate(monkeypatch, ["succeeded"])
    service.generate_image("a robot in the rain")

    url, kwargs = calls["post"][0]
    assert url == "https://replicate.test/v1/predictions"
    assert kwargs["headers"]["Authorization"] == "Token test-key"
    assert kwargs["json"]["version"] == "model-version"
    assert kwargs["json"]["input"]["prompt"].endswith("illustration of: a robot in the rain")
    assert "watermark" in kwargs["json"]["input"]["negative_prompt"]


def test_times_out_after_thirty_polls(monkeypatch, service):
    calls = _mock_replicate(monkeypatch, ["processing"] * 31)

    with pytest.raises(GenerationTimeout):
        service.generate_image("never finishes")
    assert len(calls["get"]) == 30


@pytest.mark.parametrize(
    "statuses",
    [["failed"], ["starting", "failed"], ["processing", "processing", "failed", "succeeded"]],
)
def test_failed_status_stops_immediately(monkeypatch, service, statuses):
    calls = _mock_replicate(monkeypatch, statuses)

    with pytest.raises(GenerationFailed):
        service.generate_image("doomed")
    assert len(calls["get"]) == statuses.index("failed") + 1


def test_creation_error_fails(monkeypatch, service):
    calls = _mock_replicate(monkeypatch, [], create_status=422)

    with pytest.raises(GenerationFailed):
        service.generate_image("bad input")
    assert calls["get"] == []


def test_string_output_accepted(monkeypatch, service):
    _mock_replicate(monkeypatch, ["succeeded"], output=OUTPUT_URL)
    assert service.generate_image("x") == OUTPUT_URL


def test_success_without_output_fails(monkeypatch, service):
    _mock_replicate(monkeypatch, ["succeeded"], output=[])
    with pytest.raises(GenerationFailed):
        service.generate_image("x")


def test_poll_http_error_fails(monkeypatch, service):
    monkeypatch.setattr(
        requests, "post", lambda *a, **k: DummyResp(201, {"id": "pred-1", "status": "starting"})
    )
    monkeypatch.setattr(requests, "get", lambda *a, **k: DummyResp(500, text="boom"))
    with pytest.raises(GenerationFailed):
        service.generate_image("x")


def test_transport_error_wrapped(monkeypatch, service):
    def _boom(*a, **k):
        raise requests.ConnectionError("no route")

    monkeypatch.setattr(requests, "post", _boom)
    with pytest.raises(GenerationFailed):
        service.generate_image("x")


@pytest.mark.parametrize("body", [["not", "a", "dict"], "pred-1", 42])
def test_non_object_creation_reply_fails(monkeypatch, service, body):
    monkeypatch.setattr(requests, "post", lambda *a, **k: DummyResp(201, body))
    with pytest.raises(GenerationFailed):
        service.generate_image("x")


def test_non_object_status_reply_fails(monkeypatch, service):
    monkeypatch.setattr(
        requests, "post", lambda *a, **k: DummyResp(201, {"id": "pred-1", "status": "starting"})
    )
    monkeypatch.setattr(requests, "get", lambda *a, **k: DummyResp(200, ["succeeded"]))
    with pytest.raises(GenerationFailed):
        service.generate_image("x")
