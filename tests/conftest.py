"""Shared fixtures: a fake urlopen so no test touches the network."""

import json
from urllib.error import HTTPError

import pytest

from newversion.core import stores


class FakeResponse:
    def __init__(self, body: bytes, status: int = 200, read_error=None, on_read=None):
        self._body = body
        self._pos = 0
        self.status = status
        self.read_error = read_error
        self.on_read = on_read
        self.closed = False

    def read(self, size=-1):
        if self.read_error is not None:
            raise self.read_error
        if self.on_read is not None:
            self.on_read()
        end = len(self._body) if size is None or size < 0 else self._pos + size
        chunk = self._body[self._pos:end]
        self._pos += len(chunk)
        return chunk

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.closed = True
        return False


class FakeHttp:
    """Records requested URLs and answers with a canned body or error."""

    def __init__(self):
        self.requests = []
        self.body = b""
        self.status = 200
        self.error = None
        self.read_error = None
        self.on_read = None
        self.responses = []

    def respond_json(self, data, status: int = 200):
        self.body = json.dumps(data).encode('utf-8')
        self.status = status

    def respond_html(self, html: str, status: int = 200):
        self.body = html.encode('utf-8')
        self.status = status

    def fail_with(self, error: Exception):
        self.error = error

    def __call__(self, req, timeout=None):
        self.requests.append((req.full_url, timeout))
        if self.error is not None:
            raise self.error
        if self.status >= 400:
            raise HTTPError(req.full_url, self.status, "error", {}, None)
        resp = FakeResponse(self.body, self.status, self.read_error, self.on_read)
        self.responses.append(resp)
        return resp


@pytest.fixture
def http(monkeypatch):
    fake = FakeHttp()
    monkeypatch.setattr(stores, 'urlopen', fake)
    return fake


PLAY_PAGE = """
<html><body>
  <div class="hAyfc"><div class="BgcNfc">Updated</div>
    <span class="htlgb"><div class="IQ1z0d"><span class="htlgb">March 3, 2021</span></div></span></div>
  <div class="hAyfc"><div class="BgcNfc">{label}</div>
    <span class="htlgb"><div class="IQ1z0d"><span class="htlgb">{version}</span></div></span></div>
  <div class="hAyfc"><div class="BgcNfc">Requires Android</div>
    <span class="htlgb">5.0 and up</span></div>
</body></html>
"""


@pytest.fixture
def play_page():
    def render(version="1.4.2", label="Current Version"):
        return PLAY_PAGE.format(version=version, label=label)
    return render
