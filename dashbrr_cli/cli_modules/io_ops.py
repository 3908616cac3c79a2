"""I/O boundary module -- ALL external I/O goes through here.

This is the single mock point for the entire test suite.
Commands never touch SQLite, HTTP, bcrypt or the standard
streams directly; they call io_ops functions, which return
IOResult and never raise.
"""
from __future__ import annotations

import sqlite3
import sys
import tomllib
from contextlib import closing
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import bcrypt
import httpx
from returns.io import IOFailure, IOResult, IOSuccess

from dashbrr_cli.cli_modules.errors import (
    COLLABORATOR_ERROR,
    NOT_FOUND,
    CommandError,
)
from dashbrr_cli.cli_modules.log import get_logger
from dashbrr_cli.cli_modules.types import (
    GitHubRelease,
    HealthResult,
    ServiceRecord,
    UserRecord,
)

if TYPE_CHECKING:
    from pathlib import Path

    from dashbrr_cli.cli_modules.commands.service_types import (
        ServiceTypeSpec,
    )

logger = get_logger("io_ops")

_SCHEMA = """
CREATE TABLE IF NOT EXISTS users
(
    id            INTEGER PRIMARY KEY,
    username      TEXT UNIQUE NOT NULL,
    email         TEXT UNIQUE NOT NULL,
    password_hash TEXT        NOT NULL,
    created_at    TIMESTAMP   NOT NULL,
    updated_at    TIMESTAMP   NOT NULL
);

CREATE TABLE IF NOT EXISTS service_configurations
(
    id           INTEGER PRIMARY KEY,
    instance_id  TEXT UNIQUE NOT NULL,
    display_name TEXT        NOT NULL,
    url          TEXT,
    api_key      TEXT,
    access_url   TEXT
);
"""

_SERVICE_COLUMNS = "instance_id, display_name, url, api_key, access_url"
_USER_COLUMNS = "id, username, email, password_hash"


def _collaborator_failure(
    step: str,
    message: str,
    context: dict[str, object] | None = None,
) -> IOResult[Any, CommandError]:
    logger.warning("%s failed: %s", step, message)
    return IOFailure(
        CommandError(
            command=f"io_ops.{step}",
            error_type=COLLABORATOR_ERROR,
            message=message,
            context=context or {},
        ),
    )


# --- Persistence ---


def _connect(db_path: Path) -> sqlite3.Connection:
    """Open the database, creating file and tables on first use."""
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path))
    conn.executescript(_SCHEMA)
    return conn


def _row_to_service(row: tuple[object, ...]) -> ServiceRecord:
    instance_id, display_name, url, api_key, access_url = row
    return ServiceRecord(
        instance_id=str(instance_id),
        display_name=str(display_name),
        url=str(url or ""),
        api_key=str(api_key or ""),
        access_url=str(access_url) if access_url else None,
    )


def _row_to_user(row: tuple[object, ...]) -> UserRecord:
    user_id, username, email, password_hash = row
    return UserRecord(
        id=int(str(user_id)),
        username=str(username),
        email=str(email),
        password_hash=str(password_hash),
    )


def check_database(db_path: Path) -> IOResult[None, CommandError]:
    """Open the database and run a trivial query."""
    logger.debug("check_database path=%s", db_path)
    try:
        with closing(_connect(db_path)) as conn:
            conn.execute("SELECT 1").fetchone()
    except (sqlite3.Error, OSError) as exc:
        return _collaborator_failure(
            "check_database",
            f"failed to open database {db_path}: {exc}",
            {"db_path": str(db_path)},
        )
    return IOSuccess(None)


def get_all_services(
    db_path: Path,
) -> IOResult[list[ServiceRecord], CommandError]:
    """Return every stored service record, ordered by instance id."""
    logger.debug("get_all_services path=%s", db_path)
    try:
        with closing(_connect(db_path)) as conn:
            rows = conn.execute(
                f"SELECT {_SERVICE_COLUMNS} FROM service_configurations"  # noqa: S608
                " ORDER BY instance_id",
            ).fetchall()
    except (sqlite3.Error, OSError) as exc:
        return _collaborator_failure(
            "get_all_services",
            f"failed to retrieve services: {exc}",
            {"db_path": str(db_path)},
        )
    return IOSuccess([_row_to_service(row) for row in rows])


def find_service_by_url(
    db_path: Path,
    url: str,
) -> IOResult[ServiceRecord | None, CommandError]:
    """Return the record registered under url, or None."""
    logger.debug("find_service_by_url url=%s", url)
    try:
        with closing(_connect(db_path)) as conn:
            row = conn.execute(
                f"SELECT {_SERVICE_COLUMNS} FROM service_configurations"  # noqa: S608
                " WHERE url = ?",
                (url,),
            ).fetchone()
    except (sqlite3.Error, OSError) as exc:
        return _collaborator_failure(
            "find_service_by_url",
            f"failed to look up service by URL: {exc}",
            {"url": url},
        )
    return IOSuccess(_row_to_service(row) if row else None)


def create_service(
    db_path: Path,
    record: ServiceRecord,
) -> IOResult[None, CommandError]:
    """Insert a new service record."""
    logger.debug("create_service instance_id=%s", record.instance_id)
    try:
        with closing(_connect(db_path)) as conn, conn:
            conn.execute(
                f"INSERT INTO service_configurations ({_SERVICE_COLUMNS})"  # noqa: S608
                " VALUES (?, ?, ?, ?, ?)",
                (
                    record.instance_id,
                    record.display_name,
                    record.url,
                    record.api_key,
                    record.access_url,
                ),
            )
    except (sqlite3.Error, OSError) as exc:
        return _collaborator_failure(
            "create_service",
            f"failed to save service configuration: {exc}",
            {"instance_id": record.instance_id},
        )
    return IOSuccess(None)


def delete_service(
    db_path: Path,
    instance_id: str,
) -> IOResult[None, CommandError]:
    """Delete the service record with instance_id."""
    logger.debug("delete_service instance_id=%s", instance_id)
    try:
        with closing(_connect(db_path)) as conn, conn:
            conn.execute(
                "DELETE FROM service_configurations WHERE instance_id = ?",
                (instance_id,),
            )
    except (sqlite3.Error, OSError) as exc:
        return _collaborator_failure(
            "delete_service",
            f"failed to remove service: {exc}",
            {"instance_id": instance_id},
        )
    return IOSuccess(None)


def _find_user(
    db_path: Path,
    column: str,
    value: str,
) -> IOResult[UserRecord | None, CommandError]:
    try:
        with closing(_connect(db_path)) as conn:
            row = conn.execute(
                f"SELECT {_USER_COLUMNS} FROM users WHERE {column} = ?",  # noqa: S608
                (value,),
            ).fetchone()
    except (sqlite3.Error, OSError) as exc:
        return _collaborator_failure(
            f"get_user_by_{column}",
            f"failed to look up user by {column}: {exc}",
            {column: value},
        )
    return IOSuccess(_row_to_user(row) if row else None)


def get_user_by_username(
    db_path: Path,
    username: str,
) -> IOResult[UserRecord | None, CommandError]:
    """Return the user with username, or None."""
    logger.debug("get_user_by_username username=%s", username)
    return _find_user(db_path, "username", username)


def get_user_by_email(
    db_path: Path,
    email: str,
) -> IOResult[UserRecord | None, CommandError]:
    """Return the user with email, or None."""
    logger.debug("get_user_by_email email=%s", email)
    return _find_user(db_path, "email", email)


def create_user(
    db_path: Path,
    user: UserRecord,
) -> IOResult[None, CommandError]:
    """Insert a new user row."""
    logger.debug("create_user username=%s", user.username)
    now = datetime.now(tz=UTC).isoformat()
    try:
        with closing(_connect(db_path)) as conn, conn:
            conn.execute(
                "INSERT INTO users"
                " (username, email, password_hash, created_at, updated_at)"
                " VALUES (?, ?, ?, ?, ?)",
                (user.username, user.email, user.password_hash, now, now),
            )
    except (sqlite3.Error, OSError) as exc:
        return _collaborator_failure(
            "create_user",
            f"failed to create user: {exc}",
            {"username": user.username},
        )
    return IOSuccess(None)


def update_user_password(
    db_path: Path,
    user_id: int,
    password_hash: str,
) -> IOResult[None, CommandError]:
    """Replace the stored password hash for user_id."""
    logger.debug("update_user_password user_id=%s", user_id)
    now = datetime.now(tz=UTC).isoformat()
    try:
        with closing(_connect(db_path)) as conn, conn:
            conn.execute(
                "UPDATE users SET password_hash = ?, updated_at = ?"
                " WHERE id = ?",
                (password_hash, now, user_id),
            )
    except (sqlite3.Error, OSError) as exc:
        return _collaborator_failure(
            "update_user_password",
            f"failed to update password: {exc}",
            {"user_id": user_id},
        )
    return IOSuccess(None)


# --- Password hashing ---


def hash_password(password: str) -> IOResult[str, CommandError]:
    """Hash password with bcrypt at the library's default cost."""
    try:
        hashed = bcrypt.hashpw(password.encode(), bcrypt.gensalt())
    except ValueError as exc:
        return _collaborator_failure(
            "hash_password",
            f"failed to hash password: {exc}",
        )
    return IOSuccess(hashed.decode())


# --- HTTP ---


def _http_client(timeout: float) -> httpx.Client:
    """Build the HTTP client used for all outbound requests."""
    return httpx.Client(timeout=timeout, follow_redirects=True)


def _auth_headers(spec: ServiceTypeSpec, api_key: str) -> dict[str, str]:
    if not api_key or spec.auth_scheme == "none":
        return {}
    if spec.auth_scheme == "plex-token":
        return {"X-Plex-Token": api_key, "Accept": "application/json"}
    if spec.auth_scheme == "bearer":
        return {"Authorization": f"Bearer {api_key}"}
    return {"X-Api-Key": api_key}


def _extract_version(response: httpx.Response) -> str:
    """Pull a version string out of common status payload shapes."""
    try:
        payload = response.json()
    except ValueError:
        return ""
    if not isinstance(payload, dict):
        return ""
    container = payload.get("MediaContainer")
    if isinstance(container, dict):
        payload = container
    devices = payload.get("devices")
    if isinstance(devices, list) and devices and isinstance(devices[0], dict):
        return str(devices[0].get("clientVersion", ""))
    version = payload.get("version")
    return str(version) if version else ""


def check_service_health(
    spec: ServiceTypeSpec,
    url: str,
    api_key: str,
    timeout: float,
) -> IOResult[HealthResult, CommandError]:
    """Probe a service once and report its status.

    An unreachable service is a health result (offline), not
    an I/O failure. IOFailure is reserved for requests that
    cannot be built at all.
    """
    target = url.rstrip("/") + spec.health_path if spec.health_path else url
    logger.debug("check_service_health type=%s target=%s", spec.name, target)
    try:
        with _http_client(timeout) as client:
            response = client.get(target, headers=_auth_headers(spec, api_key))
    except httpx.InvalidURL as exc:
        return _collaborator_failure(
            "check_service_health",
            f"invalid health check URL {target}: {exc}",
            {"url": url},
        )
    except httpx.HTTPError as exc:
        logger.debug("probe of %s failed: %s", target, exc)
        return IOSuccess(
            HealthResult(status="offline", message=f"{target}: {exc}"),
        )

    if response.status_code in {401, 403}:
        return IOSuccess(
            HealthResult(
                status="error",
                message=(
                    "authentication failed"
                    f" (HTTP {response.status_code})"
                ),
            ),
        )
    if not response.is_success:
        return IOSuccess(
            HealthResult(
                status="error",
                message=f"unexpected HTTP status {response.status_code}",
            ),
        )
    return IOSuccess(
        HealthResult(status="online", version=_extract_version(response)),
    )


def fetch_latest_release(
    url: str,
    timeout: float,
    user_agent: str,
) -> IOResult[GitHubRelease, CommandError]:
    """GET the latest release document from the GitHub API."""
    logger.debug("fetch_latest_release url=%s", url)
    headers = {
        "Accept": "application/vnd.github.v3+json",
        "User-Agent": user_agent,
    }
    try:
        with _http_client(timeout) as client:
            response = client.get(url, headers=headers)
    except httpx.HTTPError as exc:
        return _collaborator_failure(
            "fetch_latest_release",
            f"request to {url} failed: {exc}",
            {"url": url},
        )
    if response.status_code != httpx.codes.OK:
        return _collaborator_failure(
            "fetch_latest_release",
            f"GitHub API returned {response.status_code}: {response.text}",
            {"url": url, "status_code": response.status_code},
        )
    try:
        release = GitHubRelease.model_validate(response.json())
    except ValueError as exc:
        return _collaborator_failure(
            "fetch_latest_release",
            f"unexpected release payload: {exc}",
            {"url": url},
        )
    return IOSuccess(release)


# --- Files and streams ---


def load_config_file(
    path: Path,
) -> IOResult[dict[str, object], CommandError]:
    """Read and parse a TOML config file."""
    logger.debug("load_config_file path=%s", path)
    try:
        data = tomllib.loads(path.read_text())
    except FileNotFoundError:
        return IOFailure(
            CommandError(
                command="io_ops.load_config_file",
                error_type=NOT_FOUND,
                message=f"config file not found: {path}",
                context={"path": str(path)},
            ),
        )
    except (tomllib.TOMLDecodeError, OSError) as exc:
        return _collaborator_failure(
            "load_config_file",
            f"error decoding config file {path}: {exc}",
            {"path": str(path)},
        )
    return IOSuccess(data)


def write_stdout(message: str) -> IOResult[None, CommandError]:
    """Write command output to stdout. A trailing newline is added."""
    try:
        sys.stdout.write(message + "\n")
    except OSError as exc:
        return _collaborator_failure(
            "write_stdout",
            f"Failed to write to stdout: {exc}",
        )
    return IOSuccess(None)


def write_stderr(message: str) -> IOResult[None, CommandError]:
    """Write message to stderr. A trailing newline is added."""
    try:
        sys.stderr.write(message + "\n")
    except OSError as exc:
        return IOFailure(
            CommandError(
                command="io_ops.write_stderr",
                error_type=COLLABORATOR_ERROR,
                message=f"Failed to write to stderr: {exc}",
                context={"original_message": message},
            ),
        )
    return IOSuccess(None)
