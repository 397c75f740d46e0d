"""
Process entry point: stdin in, printed lines out, fatal decode failures
"""

import io
import sys

import pytest

from jast import main


def feed(monkeypatch, data: bytes):
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(data)))


def test_runs_program(monkeypatch, capsys):
    feed(
        monkeypatch,
        b'[{"let": {"x": 1}}, {"print": "x"}, {"print": {"str": "caf\xc3\xa9"}}, {"print": {"/": [1, 0]}}]',
    )
    main()
    assert capsys.readouterr().out == "1\ncafé\nundefined\n"


def test_no_output_without_print(monkeypatch, capsys):
    feed(monkeypatch, b'{"+": [1, 2]}')
    main()
    assert capsys.readouterr().out == ""


@pytest.mark.parametrize(
    "data",
    [
        pytest.param(b"", id="empty-input"),
        pytest.param(b"{", id="malformed-json"),
        pytest.param(b'{"nope": 1}', id="unknown-shape"),
        pytest.param(b'[{"print": 1}, true]', id="bad-element"),
    ],
)
def test_parse_failure_is_fatal(monkeypatch, capsys, data):
    feed(monkeypatch, data)
    with pytest.raises(SystemExit) as excinfo:
        main()
    assert str(excinfo.value.code).startswith("jast: parse:")
    assert capsys.readouterr().out == ""


def test_invalid_utf8_is_fatal(monkeypatch, capsys):
    feed(monkeypatch, b'{"str": "\xff"}')
    with pytest.raises(SystemExit) as excinfo:
        main()
    assert str(excinfo.value.code).startswith("jast: read:")
    assert capsys.readouterr().out == ""


def test_lone_surrogate_is_fatal_before_output(monkeypatch, capsys):
    feed(monkeypatch, b'[{"print": 1}, {"print": {"str": "\\ud800"}}, {"print": 2}]')
    with pytest.raises(SystemExit) as excinfo:
        main()
    assert str(excinfo.value.code).startswith("jast: parse:")
    assert capsys.readouterr().out == ""


def test_deep_nesting_is_fatal(monkeypatch, capsys):
    feed(monkeypatch, b"[" * 5000 + b"]" * 5000)
    with pytest.raises(SystemExit) as excinfo:
        main()
    assert str(excinfo.value.code).startswith("jast: parse:")
    assert capsys.readouterr().out == ""
