from __future__ import annotations

import json
from http import HTTPStatus

import pytest

from contactlink.ui import cli


def _capture_identify(
    monkeypatch: pytest.MonkeyPatch,
    *,
    status: HTTPStatus = HTTPStatus.OK,
    body: dict[str, object] | None = None,
) -> list[object]:
    payloads: list[object] = []

    def fake_handle(payload: object) -> tuple[HTTPStatus, dict[str, object]]:
        payloads.append(payload)
        return status, body or {"contact": {"primaryContatctId": 1}}

    monkeypatch.setattr(cli, "handle_identify", fake_handle)
    return payloads


def test_cli_identify_builds_payload_from_flags(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    payloads = _capture_identify(monkeypatch)

    cli.main(["identify", "--email", "a@x.com", "--phone-number", "123"])

    assert payloads == [{"email": "a@x.com", "phoneNumber": "123"}]
    assert json.loads(capsys.readouterr().out) == {"contact": {"primaryContatctId": 1}}


def test_cli_identify_accepts_raw_payload(monkeypatch: pytest.MonkeyPatch) -> None:
    payloads = _capture_identify(monkeypatch)

    cli.main(["identify", "--payload", '{"phoneNumber": 123456}'])

    assert payloads == [{"phoneNumber": 123456}]


def test_cli_identify_rejects_mixed_payload_and_flags(monkeypatch: pytest.MonkeyPatch) -> None:
    payloads = _capture_identify(monkeypatch)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["identify", "--payload", "{}", "--email", "a@x.com"])

    assert excinfo.value.code == cli.EXIT_INVALID_INPUT
    assert payloads == []


def test_cli_identify_rejects_invalid_json(monkeypatch: pytest.MonkeyPatch) -> None:
    _capture_identify(monkeypatch)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["identify", "--payload", "{not json"])

    assert excinfo.value.code == cli.EXIT_INVALID_INPUT


@pytest.mark.parametrize(
    ("status", "code"),
    [
        (HTTPStatus.BAD_REQUEST, cli.EXIT_INVALID_INPUT),
        (HTTPStatus.INTERNAL_SERVER_ERROR, cli.EXIT_FAILURE),
    ],
)
def test_cli_identify_exit_codes(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    status: HTTPStatus,
    code: int,
) -> None:
    _capture_identify(monkeypatch, status=status, body={"error": "x"})

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["identify", "--email", "a@x.com"])

    assert excinfo.value.code == code
    assert json.loads(capsys.readouterr().out) == {"error": "x"}


def test_cli_health_prints_status(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(cli, "check_health", lambda: {"status": "ok", "message": "up"})

    cli.main(["health"])

    assert json.loads(capsys.readouterr().out) == {"status": "ok", "message": "up"}


def test_cli_health_failure_exits_nonzero(monkeypatch: pytest.MonkeyPatch) -> None:
    def broken() -> dict[str, str]:
        raise RuntimeError("store unreachable")

    monkeypatch.setattr(cli, "check_health", broken)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["health"])

    assert excinfo.value.code == cli.EXIT_FAILURE
