from unittest.mock import patch

import pytest
import requests

from wildfire_utility.config import WildFireConfig
from wildfire_utility.exceptions import WildFireError, WildFireRequestError, ResponseFormatError
from wildfire_utility.schemas import ApiOption
from wildfire_utility.wildfire_client import WildFireClient

from conftest import API_KEY, SHA256, UPLOAD_XML, VERDICT_XML, LINK_XML, make_response


def test_requires_api_key():
    with pytest.raises(WildFireError):
        WildFireClient(WildFireConfig(api_key=None))


def test_get_verdict_hash_posts_form(client):
    with patch.object(client.session, "post", return_value=make_response(200, VERDICT_XML)) as post:
        result = client.get_verdict_hash(SHA256)

    args, kwargs = post.call_args
    assert args[0] == "https://wildfire.example.test/publicapi/get/verdict"
    assert kwargs["data"] == {"apikey": API_KEY, "hash": SHA256}
    assert kwargs["files"] is None
    assert result.parameter == SHA256
    assert result.verdict == "Malware"


def test_get_verdict_link_uses_url_field(client):
    with patch.object(client.session, "post", return_value=make_response(200, VERDICT_XML)) as post:
        client.get_verdict_link("http://example.com")

    assert post.call_args.kwargs["data"]["url"] == "http://example.com"


def test_submit_link(client):
    with patch.object(client.session, "post", return_value=make_response(200, LINK_XML)) as post:
        result = client.submit_link("http://example.com/payload")

    assert post.call_args.args[0].endswith("publicapi/submit/link")
    assert post.call_args.kwargs["data"]["link"] == "http://example.com/payload"
    assert result.fields["url"] == "http://example.com/payload"


def test_submit_file_uploads_multipart(client, tmp_path):
    sample = tmp_path / "sample.exe"
    sample.write_bytes(b"MZ\x90\x00")

    with patch.object(client.session, "post", return_value=make_response(200, UPLOAD_XML)) as post:
        result = client.submit_file(str(sample))

    kwargs = post.call_args.kwargs
    name, _handle, content_type = kwargs["files"]["file"]
    assert name == "sample.exe"
    assert content_type == "application/octet-stream"
    assert kwargs["data"] == {"apikey": API_KEY}
    assert result.fields["filename"] == "sample.exe"


def test_http_error_status_is_normalized(client):
    with patch.object(client.session, "post", return_value=make_response(404, "")):
        result = client.call(ApiOption.VERDICT_HASH, SHA256)

    assert result.fields == {"HTTP Response '404'": "Not Found; The file or report was not found."}


def test_connection_error_is_wrapped(client):
    with patch.object(client.session, "post", side_effect=requests.exceptions.ConnectionError("refused")):
        with pytest.raises(WildFireRequestError, match="refused"):
            client.get_verdict_hash(SHA256)


def test_timeout_is_wrapped(client):
    with patch.object(client.session, "post", side_effect=requests.exceptions.ReadTimeout()):
        with pytest.raises(WildFireRequestError, match="timed out"):
            client.get_verdict_hash(SHA256)


def test_unexpected_body_raises(client):
    with patch.object(client.session, "post", return_value=make_response(200, "<html></html>")):
        with pytest.raises(ResponseFormatError):
            client.get_verdict_hash(SHA256)


def test_host_without_trailing_slash():
    client = WildFireClient(WildFireConfig(host="https://eu.wildfire.example.test", api_key=API_KEY))
    with patch.object(client.session, "post", return_value=make_response(200, VERDICT_XML)) as post:
        client.get_verdict_hash(SHA256)
    assert post.call_args.args[0] == "https://eu.wildfire.example.test/publicapi/get/verdict"


def test_health_check(client):
    with patch.object(client.session, "get", return_value=make_response(200, "")):
        assert client.health_check() is True
    with patch.object(client.session, "get", side_effect=requests.exceptions.ConnectionError()):
        assert client.health_check() is False


def test_session_retry_wiring():
    config = WildFireConfig(api_key=API_KEY, retry_attempts=3, retry_delay=1, verify_tls=False)
    client = WildFireClient(config)

    retry = client.session.get_adapter("https://wildfire.paloaltonetworks.com/").max_retries
    assert retry.total == 3
    assert retry.backoff_factor == 1
    assert retry.raise_on_status is False
    assert 500 in retry.status_forcelist
    assert "POST" in retry.allowed_methods
    assert client.session.verify is False
    client.close()


def test_no_retries_by_default(client):
    retry = client.session.get_adapter("https://wildfire.example.test/").max_retries
    assert retry.total == 0
