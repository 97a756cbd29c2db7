"""Notarization verdict handling.

``notarytool submit --wait --output-format json`` exits 0 whenever the
submission itself went through, including when Apple rejected the artifact.
The verdict therefore has to be read from its JSON output: only
``"Accepted"`` lets the release continue.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from charship.core.result import Err, Ok, Result
from charship.core.structured import as_str_dict, get_str
from charship.release.errors import ReleaseError

if TYPE_CHECKING:
    from charship.output.console import ConsoleProtocol
    from charship.release.capabilities import Notarizer

ACCEPTED = "Accepted"
KEY_FILE_NAME = "AuthKey.p8"
KEY_PLACEHOLDER = "/path/to/AuthKey.p8"


@dataclass(frozen=True, slots=True)
class NotaryCredentials:
    """App Store Connect API key, already written to disk."""

    key_path: Path
    key_id: str
    issuer_id: str | None = None

    def auth_args(self, key_path: str | None = None) -> list[str]:
        args = ["--key", key_path or str(self.key_path), "--key-id", self.key_id]
        if self.issuer_id:
            args += ["--issuer", self.issuer_id]
        return args


@dataclass(frozen=True, slots=True)
class NotarySubmission:
    status: str | None
    id: str | None = None
    message: str | None = None

    @property
    def accepted(self) -> bool:
        return self.status == ACCEPTED


def parse_submission(output: str) -> Result[NotarySubmission, ReleaseError]:
    """Parse notarytool's JSON output into a submission record."""
    text = output.strip()
    try:
        data = as_str_dict(json.loads(text)) if text else None
    except json.JSONDecodeError as e:
        return Err(
            ReleaseError(
                kind="notary_output_invalid",
                message=f"notarytool returned invalid JSON: {e}",
            )
        )
    if data is None:
        return Err(
            ReleaseError(
                kind="notary_output_invalid",
                message="notarytool returned no JSON object",
                hint=text or None,
            )
        )
    return Ok(
        NotarySubmission(
            status=get_str(data, "status"),
            id=get_str(data, "id"),
            message=get_str(data, "message"),
        )
    )


def log_hint(submission_id: str, credentials: NotaryCredentials) -> str:
    """Command an operator can run to fetch the rejection log."""
    key_args = " ".join(credentials.auth_args(f'"{KEY_PLACEHOLDER}"'))
    return f"Fetch log: xcrun notarytool log {submission_id} {key_args}"


def verdict(
    submission: NotarySubmission,
    *,
    label: str,
    credentials: NotaryCredentials,
) -> Result[NotarySubmission, ReleaseError]:
    if submission.accepted:
        return Ok(submission)

    message = f"Notarization failed for {label} (status: {submission.status or 'unknown'})."
    hint: str | None = None
    if submission.id:
        message += f" Submission id: {submission.id}"
        hint = log_hint(submission.id, credentials)
    return Err(
        ReleaseError(
            kind="notary_rejected",
            message=message,
            hint=hint,
            details=(submission.message,) if submission.message else (),
        )
    )


def notarize_artifact(
    artifact: Path,
    *,
    label: str,
    notarizer: Notarizer,
    credentials: NotaryCredentials,
    console: ConsoleProtocol,
) -> Result[NotarySubmission, ReleaseError]:
    """Submit an artifact, wait for the verdict and accept or reject it.

    Both the app zip and the disk image go through here.
    """
    submitted = notarizer.submit(artifact, credentials)
    if isinstance(submitted, Err):
        return submitted

    output = submitted.value.strip()
    if output:
        console.raw(output)

    parsed = parse_submission(output)
    if isinstance(parsed, Err):
        return parsed
    return verdict(parsed.value, label=label, credentials=credentials)
