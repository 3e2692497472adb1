"""Unit tests for local and HTTP input sources."""

from __future__ import annotations

import io
from pathlib import Path

import pytest
import requests

from shiftwatch.config import default_config
from shiftwatch.sources import FetchError, InputReadError, PuzzleInputSource, read_input


class _FakeResponse:
    def __init__(self, text: str, status_code: int = 200) -> None:
        self.text = text
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error")


class _FakeSession:
    def __init__(self, response: _FakeResponse | Exception) -> None:
        self.headers: dict[str, str] = {}
        self.calls: list[tuple[str, dict[str, object]]] = []
        self.closed = False
        self._response = response

    def get(self, url: str, **kwargs: object) -> _FakeResponse:
        self.calls.append((url, kwargs))
        if isinstance(self._response, Exception):
            raise self._response
        return self._response

    def close(self) -> None:
        self.closed = True


@pytest.mark.unit
def test_read_input_from_file(tmp_path: Path) -> None:
    path = tmp_path / "input.txt"
    path.write_text("[1518-11-01 00:00] Guard #10 begins shift\n", encoding="utf-8")

    assert read_input(path) == "[1518-11-01 00:00] Guard #10 begins shift\n"
    assert read_input(str(path)) == read_input(path)


@pytest.mark.unit
def test_read_input_from_stdin_marker() -> None:
    assert read_input("-", stdin=io.StringIO("wakes up\n")) == "wakes up\n"


@pytest.mark.unit
def test_read_input_missing_file(tmp_path: Path) -> None:
    with pytest.raises(InputReadError, match="input file not found"):
        read_input(tmp_path / "missing.txt")
    with pytest.raises(InputReadError, match="unable to read"):
        read_input(tmp_path)


@pytest.mark.unit
def test_read_input_rejects_non_utf8_file(tmp_path: Path) -> None:
    path = tmp_path / "input.txt"
    path.write_bytes(b"[1518-11-01 00:05] falls \xff asleep\n")

    with pytest.raises(InputReadError, match="not valid UTF-8") as excinfo:
        read_input(path)

    assert isinstance(excinfo.value.__cause__, UnicodeDecodeError)


@pytest.mark.unit
def test_read_input_rejects_non_utf8_stdin() -> None:
    stdin = io.TextIOWrapper(io.BytesIO(b"wakes \xff up\n"), encoding="utf-8")

    with pytest.raises(InputReadError, match="stdin is not valid UTF-8"):
        read_input("-", stdin=stdin)


@pytest.mark.unit
def test_source_from_config_builds_day_url() -> None:
    config = default_config()
    config["input"]["base_url"] = "https://example.test/"
    config["input"]["day"] = 5

    source = PuzzleInputSource.from_config(config)

    assert source.url == "https://example.test/2018/day/5/input"
    assert source.session_env == "ADV_SESS"
    assert PuzzleInputSource().url == "https://adventofcode.com/2018/day/4/input"


@pytest.mark.unit
def test_fetch_sends_session_cookie_from_environment() -> None:
    session = _FakeSession(_FakeResponse("[1518-11-01 00:00] Guard #10 begins shift\n"))
    source = PuzzleInputSource(timeout_seconds=5.0)

    text = source.fetch(environ={"ADV_SESS": " abc123 "}, session=session)  # type: ignore[arg-type]

    assert text.startswith("[1518-11-01 00:00]")
    url, kwargs = session.calls[0]
    assert url == "https://adventofcode.com/2018/day/4/input"
    assert kwargs["cookies"] == {"session": "abc123"}
    assert kwargs["timeout"] == 5.0
    assert "shiftwatch" in kwargs["headers"]["User-Agent"]  # type: ignore[index]
    assert session.headers == {}
    assert not session.closed


@pytest.mark.unit
def test_fetch_uses_configured_env_var_name() -> None:
    session = _FakeSession(_FakeResponse("ok"))
    source = PuzzleInputSource(session_env="MY_COOKIE")

    assert source.fetch(environ={"MY_COOKIE": "xyz"}, session=session) == "ok"  # type: ignore[arg-type]
    with pytest.raises(FetchError, match="MY_COOKIE"):
        source.fetch(environ={"ADV_SESS": "xyz"}, session=session)  # type: ignore[arg-type]


@pytest.mark.unit
def test_fetch_without_cookie_fails_before_any_request() -> None:
    session = _FakeSession(_FakeResponse("unused"))

    with pytest.raises(FetchError, match="no session cookie"):
        PuzzleInputSource().fetch(environ={}, session=session)  # type: ignore[arg-type]

    assert session.calls == []


@pytest.mark.unit
@pytest.mark.parametrize(
    "response",
    [_FakeResponse("nope", status_code=400), requests.ConnectionError("connection refused")],
)
def test_fetch_wraps_http_failures(response: _FakeResponse | Exception) -> None:
    session = _FakeSession(response)

    with pytest.raises(FetchError, match="unable to fetch") as excinfo:
        PuzzleInputSource().fetch(environ={"ADV_SESS": "abc"}, session=session)  # type: ignore[arg-type]

    assert isinstance(excinfo.value.__cause__, requests.RequestException)


@pytest.mark.unit
def test_fetch_closes_session_it_creates(monkeypatch: pytest.MonkeyPatch) -> None:
    created = _FakeSession(_FakeResponse("body"))
    monkeypatch.setattr("shiftwatch.sources.requests.Session", lambda: created)

    assert PuzzleInputSource().fetch(environ={"ADV_SESS": "abc"}) == "body"
    assert created.closed
