"""Verify the todo service's environment before starting it.

Checks performed:

1. ``AppSettings`` can be built from the given ``.env`` file, so missing OAuth
   credentials or a missing ``JWT_SECRET`` fail here rather than at the first
   sign-in.
2. ``JWT_SECRET`` is long enough for HMAC-SHA256 session tokens (32 bytes),
   unless ``--allow-weak-secret`` is passed.
3. Optionally, a SHA-256 checksum of the ``.env`` file is recorded or compared
   so unexpected edits are noticed. Rotating ``JWT_SECRET`` invalidates every
   issued session token, which is worth catching before a restart.

Example usages::

    python -m scripts.check_env check --env-file /srv/todo/.env
    python -m scripts.check_env record --env-file /srv/todo/.env \
        --hash-file /srv/todo/.env.sha256
    python -m scripts.check_env verify --env-file /srv/todo/.env \
        --hash-file /srv/todo/.env.sha256
"""

from __future__ import annotations

import argparse
import hashlib
import sys
from pathlib import Path

from pydantic import ValidationError

from todo_service.core.config import AppSettings, _load_env_file

EXIT_OK = 0
EXIT_VALIDATION_ERROR = 2
EXIT_CHECKSUM_ERROR = 3
EXIT_WEAK_SECRET = 4
EXIT_RUNTIME_ERROR = 5

MIN_SECRET_BYTES = 32


def _compute_hash(env_file: Path) -> str:
    return hashlib.sha256(env_file.read_bytes()).hexdigest()


def _load_settings(env_file: Path) -> AppSettings:
    if not env_file.exists():
        raise FileNotFoundError(f"Environment file {env_file} does not exist.")
    _load_env_file(str(env_file))
    return AppSettings()  # type: ignore[call-arg]


def _secret_is_weak(settings: AppSettings) -> bool:
    return len(settings.security.jwt_secret.encode("utf-8")) < MIN_SECRET_BYTES


def _record_checksum(env_file: Path, hash_file: Path) -> int:
    checksum = _compute_hash(env_file)
    hash_file.write_text(f"{checksum}\n", encoding="utf-8")
    print(f"Recorded checksum to {hash_file} ({checksum})")
    return EXIT_OK


def _verify_checksum(env_file: Path, hash_file: Path) -> int:
    if not hash_file.exists():
        print(
            f"Checksum baseline {hash_file} is missing; run 'record' first.",
            file=sys.stderr,
        )
        return EXIT_RUNTIME_ERROR

    expected = hash_file.read_text(encoding="utf-8").strip()
    actual = _compute_hash(env_file)
    if expected != actual:
        print(
            "Environment checksum mismatch!\n"
            f"  expected: {expected}\n"
            f"  actual:   {actual}\n"
            "A changed JWT_SECRET signs every user out; review before restarting.",
            file=sys.stderr,
        )
        return EXIT_CHECKSUM_ERROR

    print("Environment checksum OK.")
    return EXIT_OK


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate todo service settings and detect .env drift."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text, needs_hash in (
        ("check", "Validate settings only.", False),
        ("record", "Validate settings and store the checksum baseline.", True),
        ("verify", "Validate settings and compare against the baseline.", True),
    ):
        subparser = subparsers.add_parser(name, help=help_text)
        subparser.add_argument(
            "--env-file",
            default=".env",
            type=Path,
            help="Path to the environment file (default: ./.env).",
        )
        subparser.add_argument(
            "--allow-weak-secret",
            action="store_true",
            help=f"Accept a JWT_SECRET shorter than {MIN_SECRET_BYTES} bytes.",
        )
        if needs_hash:
            subparser.add_argument(
                "--hash-file",
                required=True,
                type=Path,
                help="Location of the checksum baseline.",
            )

    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    env_file: Path = args.env_file

    try:
        settings = _load_settings(env_file)
    except FileNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except ValidationError as exc:
        print(
            "Settings validation failed. Missing or invalid values detected:\n"
            f"{exc.json(indent=2)}",
            file=sys.stderr,
        )
        return EXIT_VALIDATION_ERROR

    if _secret_is_weak(settings) and not args.allow_weak_secret:
        print(
            f"JWT_SECRET is shorter than {MIN_SECRET_BYTES} bytes; "
            "session tokens would be easy to brute-force.",
            file=sys.stderr,
        )
        return EXIT_WEAK_SECRET

    if args.command == "record":
        return _record_checksum(env_file, args.hash_file)
    if args.command == "verify":
        return _verify_checksum(env_file, args.hash_file)
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover - script entry point
    sys.exit(main())
