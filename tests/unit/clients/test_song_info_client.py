import pytest
import requests

from src.domain.songs import HttpSongInfoClient, UpstreamError, build_song_info_client
from tests.support.stubs import FakeResponse


class RecordingSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


@pytest.mark.unit
def test_get_details_builds_info_request_and_parses_body():
    session = RecordingSession(
        FakeResponse(200, {"releaseDate": "16.07.2006", "text": "A\n\nB", "link": "https://l"})
    )
    client = HttpSongInfoClient("http://api.test/", timeout=3, session=session)

    detail = client.get_details("Muse", "Supermassive Black Hole")

    assert session.calls == [
        {
            "url": "http://api.test/info",
            "params": {"group": "Muse", "song": "Supermassive Black Hole"},
            "timeout": 3,
        }
    ]
    assert detail.release_date == "16.07.2006"
    assert detail.text == "A\n\nB"
    assert detail.link == "https://l"


@pytest.mark.unit
@pytest.mark.parametrize("status", [400, 404, 500, 201])
def test_non_200_status_is_upstream_error(status):
    client = HttpSongInfoClient("http://api.test", session=RecordingSession(FakeResponse(status, {})))
    with pytest.raises(UpstreamError):
        client.get_details("G", "S")


@pytest.mark.unit
@pytest.mark.parametrize(
    "error",
    [requests.exceptions.Timeout("slow"), requests.exceptions.ConnectionError("refused")],
)
def test_transport_failures_are_upstream_errors(error):
    client = HttpSongInfoClient("http://api.test", session=RecordingSession(error=error))
    with pytest.raises(UpstreamError) as excinfo:
        client.get_details("G", "S")
    assert excinfo.value.cause is error


@pytest.mark.unit
def test_undecodable_body_is_upstream_error():
    response = FakeResponse(200, json_error=ValueError("Expecting value"))
    client = HttpSongInfoClient("http://api.test", session=RecordingSession(response))
    with pytest.raises(UpstreamError):
        client.get_details("G", "S")


@pytest.mark.unit
@pytest.mark.parametrize("payload", [["not", "an", "object"], {"text": "missing fields"}])
def test_unexpected_body_shape_is_upstream_error(payload):
    client = HttpSongInfoClient("http://api.test", session=RecordingSession(FakeResponse(200, payload)))
    with pytest.raises(UpstreamError):
        client.get_details("G", "S")


@pytest.mark.unit
def test_build_song_info_client_reads_flask_config():
    client = build_song_info_client({"EXTERNAL_API_URL": "http://info:8081", "EXTERNAL_API_TIMEOUT_SECONDS": 4})
    assert client.info_url == "http://info:8081/info"
    assert client.timeout == 4
