from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
import socket
import threading
import time

import pytest
import requests

from linkguard.tools.url_fetch import service
from linkguard.tools.url_fetch.service import (
    FAILED_DESCRIPTION,
    NO_DESCRIPTION,
    ContentFetcher,
    FetchPolicy,
    build_description,
    extract_page_content,
)

PAGE = """
<html>
  <head>
    <title>Example Store</title>
    <meta name="Description" content="Hand made goods">
    <script>var hidden = "should_not_appear";</script>
  </head>
  <body>
    <h1>Welcome</h1>
    <p>First paragraph.</p>
    <p>   </p>
    <p>Second paragraph.</p>
    <p>Third paragraph.</p>
    <p>Fourth paragraph.</p>
  </body>
</html>
"""


def test_extract_page_content_orders_parts():
    title, description, text = extract_page_content(PAGE)
    assert title == "Example Store"
    assert description == (
        "Example Store Hand made goods Welcome First paragraph. Second paragraph. Third paragraph."
    )
    assert "Fourth paragraph." in text
    assert "should_not_appear" not in text


def test_build_description_truncates_long_text():
    description = build_description(["x" * 250])
    assert len(description) == 200
    assert description.endswith("...")
    assert description[:197] == "x" * 197


def test_build_description_empty():
    assert build_description(["", "   "]) == NO_DESCRIPTION
    assert extract_page_content("<html></html>")[1] == NO_DESCRIPTION


class FakeStreamResponse:
    raw = None

    def __init__(self, status_code=200, body=b"", encoding="utf-8", location=None):
        self.status_code = status_code
        self.body = body
        self.encoding = encoding
        self.headers = {"Location": location} if location else {}
        self.closed = False

    @property
    def is_redirect(self):
        return "Location" in self.headers and self.status_code in (301, 302, 303, 307, 308)

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def iter_content(self, chunk_size=1):
        for start in range(0, len(self.body), chunk_size):
            yield self.body[start : start + chunk_size]


class FakeSession:
    def __init__(self, response=None, error=None, responses=None):
        self.responses = list(responses or [response])
        self.error = error
        self.calls = []

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error is not None:
            raise self.error
        if len(self.responses) > 1:
            return self.responses.pop(0)
        return self.responses[0]


def _fetcher(session, **policy):
    settings = {"allow_private_network": True}
    settings.update(policy)
    return ContentFetcher(FetchPolicy(**settings), session=session)


def test_fetch_success_returns_text_and_description():
    session = FakeSession(FakeStreamResponse(body=PAGE.encode("utf-8")))
    result = _fetcher(session, timeout_s=10.0).fetch("https://shop.example/")
    assert result.ok is True
    assert result.status_code == 200
    assert result.title == "Example Store"
    assert "Hand made goods" in result.description
    url, kwargs = session.calls[0]
    assert url == "https://shop.example/"
    assert 0 < kwargs["timeout"] <= 10.0
    assert kwargs["stream"] is True
    assert kwargs["allow_redirects"] is False


def test_fetch_http_error_is_failure():
    result = _fetcher(FakeSession(FakeStreamResponse(status_code=503))).fetch("https://shop.example/")
    assert result.ok is False
    assert result.description == FAILED_DESCRIPTION
    assert result.error == "http_error: 503"


def test_fetch_network_error_is_failure():
    result = _fetcher(FakeSession(error=requests.Timeout("slow"))).fetch("https://shop.example/")
    assert result.ok is False
    assert result.description == FAILED_DESCRIPTION
    assert result.error.startswith("network_error")


def test_fetch_body_is_capped():
    body = b"<p>" + b"a" * 5000 + b"</p>"
    result = _fetcher(FakeSession(FakeStreamResponse(body=body)), max_bytes=100).fetch("https://shop.example/")
    assert result.ok is True
    assert len(result.text) <= 100


def test_fetch_blocks_private_targets():
    session = FakeSession(FakeStreamResponse(body=b"<p>hi</p>"))
    result = ContentFetcher(FetchPolicy(allow_private_network=False), session=session).fetch("https://127.0.0.1/")
    assert result.ok is False
    assert result.error == "private_network_blocked"
    assert session.calls == []


def test_fetch_unknown_encoding_falls_back_to_utf8():
    response = FakeStreamResponse(body="<p>café</p>".encode("utf-8"), encoding="x-unknown-charset")
    result = _fetcher(FakeSession(response)).fetch("https://shop.example/")
    assert result.ok is True
    assert "café" in result.text


def _public_dns(monkeypatch, *hosts):
    real_getaddrinfo = socket.getaddrinfo

    def fake_getaddrinfo(host, port, *args, **kwargs):
        if host in hosts:
            return [(socket.AF_INET, socket.SOCK_STREAM, 6, "", ("93.184.216.34", 0))]
        return real_getaddrinfo(host, port, *args, **kwargs)

    monkeypatch.setattr(service.socket, "getaddrinfo", fake_getaddrinfo)


def test_fetch_follows_relative_redirect_with_fakes(monkeypatch):
    _public_dns(monkeypatch, "shop.example")
    hop = FakeStreamResponse(status_code=301, location="/en/")
    session = FakeSession(responses=[hop, FakeStreamResponse(body=PAGE.encode("utf-8"))])
    result = ContentFetcher(FetchPolicy(), session=session).fetch("https://shop.example/")
    assert result.ok is True
    assert [url for url, _ in session.calls] == ["https://shop.example/", "https://shop.example/en/"]
    assert hop.closed is True


def test_fetch_rechecks_private_network_on_every_redirect(monkeypatch):
    _public_dns(monkeypatch, "shop.example")
    session = FakeSession(
        responses=[
            FakeStreamResponse(status_code=302, location="http://169.254.169.254/latest/meta-data/"),
            FakeStreamResponse(body=b"<title>INTERNAL</title>"),
        ]
    )
    result = ContentFetcher(FetchPolicy(), session=session).fetch("https://shop.example/")
    assert result.ok is False
    assert result.error == "private_network_blocked"
    assert result.description == FAILED_DESCRIPTION
    assert len(session.calls) == 1


class _SiteHandler(BaseHTTPRequestHandler):
    def do_GET(self):
        if self.path == "/moved":
            self._redirect("/landing")
        elif self.path == "/loop":
            self._redirect("/loop")
        elif self.path == "/trickle":
            self.send_response(200)
            self.send_header("Content-Type", "text/html")
            self.send_header("Content-Length", "40")
            self.end_headers()
            try:
                for _ in range(40):
                    self.wfile.write(b"a")
                    self.wfile.flush()
                    time.sleep(0.1)
            except OSError:
                return
        else:
            body = b"<html><head><title>Landing</title></head><body><p>Arrived.</p></body></html>"
            self.send_response(200)
            self.send_header("Content-Type", "text/html; charset=utf-8")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)

    def _redirect(self, location):
        self.send_response(302)
        self.send_header("Location", location)
        self.send_header("Content-Length", "0")
        self.end_headers()

    def log_message(self, format, *args):
        pass


@pytest.fixture
def local_site():
    server = ThreadingHTTPServer(("127.0.0.1", 0), _SiteHandler)
    server.daemon_threads = True
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{server.server_address[1]}"
    server.shutdown()
    server.server_close()


def _local_fetcher(**policy):
    session = requests.Session()
    session.trust_env = False
    return _fetcher(session, **policy)


def test_fetch_follows_redirect_from_live_server(local_site):
    result = _local_fetcher().fetch(f"{local_site}/moved")
    assert result.ok is True
    assert result.title == "Landing"
    assert result.status_code == 200


def test_fetch_stops_after_redirect_cap(local_site):
    result = _local_fetcher(max_redirects=2).fetch(f"{local_site}/loop")
    assert result.ok is False
    assert result.error == "too_many_redirects"


def test_fetch_wall_clock_deadline_cuts_off_trickling_body(local_site):
    started = time.monotonic()
    result = _local_fetcher(timeout_s=0.5).fetch(f"{local_site}/trickle")
    elapsed = time.monotonic() - started
    assert result.ok is False
    assert result.error == "timeout"
    assert result.description == FAILED_DESCRIPTION
    assert elapsed < 2.0
