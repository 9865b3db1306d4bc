"""Tests for the environment validation script."""

from __future__ import annotations

from pathlib import Path

import pytest

from scripts import check_env

REQUIRED_ENV_KEYS = [
    "GOOGLE_CLIENT_ID",
    "GOOGLE_CLIENT_SECRET",
    "GOOGLE_REDIRECT_URI",
    "JWT_SECRET",
]

STRONG_SECRET = "s" * check_env.MIN_SECRET_BYTES


def _write_env(env_path: Path, **values: str) -> None:
    contents = "\n".join(f"{key}={value}" for key, value in values.items())
    env_path.write_text(contents + "\n", encoding="utf-8")


def _clear_required_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in REQUIRED_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def _valid_env(**overrides: str) -> dict[str, str]:
    values = {
        "GOOGLE_CLIENT_ID": "abc",
        "GOOGLE_CLIENT_SECRET": "secret",
        "GOOGLE_REDIRECT_URI": "https://example.com/auth/callback",
        "JWT_SECRET": STRONG_SECRET,
    }
    values.update(overrides)
    return values


@pytest.mark.parametrize("command", ["record", "verify", "check"])
def test_main_requires_existing_env_file(tmp_path: Path, command: str) -> None:
    argv = [command, "--env-file", str(tmp_path / ".missing-env")]
    if command != "check":
        argv.extend(["--hash-file", str(tmp_path / ".env.sha256")])

    assert check_env.main(argv) == check_env.EXIT_RUNTIME_ERROR


def test_record_and_verify_detects_rotated_secret(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    env_file = tmp_path / ".env"
    hash_file = tmp_path / ".env.sha256"
    argv = ["--env-file", str(env_file), "--hash-file", str(hash_file)]

    _clear_required_env(monkeypatch)
    _write_env(env_file, **_valid_env())
    assert check_env.main(["record", *argv]) == check_env.EXIT_OK
    assert hash_file.read_text(encoding="utf-8").strip()

    _clear_required_env(monkeypatch)
    assert check_env.main(["verify", *argv]) == check_env.EXIT_OK

    _write_env(env_file, **_valid_env(JWT_SECRET="r" * check_env.MIN_SECRET_BYTES))
    _clear_required_env(monkeypatch)
    assert check_env.main(["verify", *argv]) == check_env.EXIT_CHECKSUM_ERROR


def test_verify_without_baseline_fails(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    env_file = tmp_path / ".env"
    _clear_required_env(monkeypatch)
    _write_env(env_file, **_valid_env())

    exit_code = check_env.main(
        ["verify", "--env-file", str(env_file), "--hash-file", str(tmp_path / "none")]
    )

    assert exit_code == check_env.EXIT_RUNTIME_ERROR


def test_validation_failure_for_missing_jwt_secret(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    env_file = tmp_path / ".env"
    values = _valid_env()
    del values["JWT_SECRET"]

    _clear_required_env(monkeypatch)
    _write_env(env_file, **values)

    assert check_env.main(["check", "--env-file", str(env_file)]) == check_env.EXIT_VALIDATION_ERROR


def test_weak_secret_is_reported_unless_allowed(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    env_file = tmp_path / ".env"

    _clear_required_env(monkeypatch)
    _write_env(env_file, **_valid_env(JWT_SECRET="short"))
    assert check_env.main(["check", "--env-file", str(env_file)]) == check_env.EXIT_WEAK_SECRET

    _clear_required_env(monkeypatch)
    exit_code = check_env.main(["check", "--env-file", str(env_file), "--allow-weak-secret"])
    assert exit_code == check_env.EXIT_OK
