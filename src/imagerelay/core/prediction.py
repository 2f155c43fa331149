"""Decoding of Replicate prediction responses.

The prediction endpoint does not return a fixed schema.  Depending on the
model version and on how long the ``Prefer: wait`` request was held open,
``output`` may be a list of URLs, a bare URL string, or missing entirely, and
``status`` may still read ``"processing"`` even though an output is already
attached.  This module decodes that loose JSON once into explicit variants so
the extraction rules can be written without further type inspection.

Extraction rules
----------------
A candidate URL is only looked for when the status is ``succeeded`` or
``processing`` *and* an output is present:

- :class:`ArrayOutput` — the first element, if the list is non-empty.
- :class:`StringOutput` — the string itself.
- :class:`AbsentOutput` / :class:`OpaqueOutput` — no candidate.

The candidate is accepted only when it is a string starting with ``http``.
Both ``processing`` being treated like ``succeeded`` and the array-or-string
output handling are compatibility behaviour for real upstream responses and
must not be tightened.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


def is_present(value: Any) -> bool:
    """Return whether a decoded JSON value counts as "set".

    ``null``, ``false``, ``0`` and ``""`` are treated as unset.  Empty lists
    and objects are still considered set, which matters for ``output: []``
    (present, but yields no candidate).
    """
    if value is None:
        return False
    if isinstance(value, (bool, int, float, str)):
        return bool(value)
    return True


class PredictionStatus(str, Enum):
    """Prediction status values that the relay distinguishes."""

    SUCCEEDED = "succeeded"
    PROCESSING = "processing"
    OTHER = "other"

    @classmethod
    def parse(cls, raw: Any) -> PredictionStatus:
        if raw == cls.SUCCEEDED.value:
            return cls.SUCCEEDED
        if raw == cls.PROCESSING.value:
            return cls.PROCESSING
        return cls.OTHER

    @property
    def allows_extraction(self) -> bool:
        return self in (PredictionStatus.SUCCEEDED, PredictionStatus.PROCESSING)


# ---------------------------------------------------------------------------
# Output variants.
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ArrayOutput:
    """``output`` was a JSON array."""

    items: tuple[Any, ...]

    def candidate(self) -> Any:
        return self.items[0] if self.items else None


@dataclass(frozen=True)
class StringOutput:
    """``output`` was a non-empty JSON string."""

    value: str

    def candidate(self) -> Any:
        return self.value


@dataclass(frozen=True)
class AbsentOutput:
    """``output`` was missing, ``null`` or otherwise unset."""

    def candidate(self) -> Any:
        return None


@dataclass(frozen=True)
class OpaqueOutput:
    """``output`` was set to something that is neither a list nor a string."""

    value: Any

    def candidate(self) -> Any:
        return None


PredictionOutput = ArrayOutput | StringOutput | AbsentOutput | OpaqueOutput


def decode_output(raw: Any) -> PredictionOutput:
    """Classify a raw ``output`` value into one of the output variants."""
    if not is_present(raw):
        return AbsentOutput()
    if isinstance(raw, list):
        return ArrayOutput(tuple(raw))
    if isinstance(raw, str):
        return StringOutput(raw)
    return OpaqueOutput(raw)


# ---------------------------------------------------------------------------
# Prediction.
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Prediction:
    """A decoded prediction response.

    Attributes:
        status: Status classified against :class:`PredictionStatus`.
        raw_status: The ``status`` value exactly as received (``None`` when
            missing), used in error messages.
        output: The decoded output variant.
        body: The full parsed JSON body, kept for logging.
    """

    status: PredictionStatus
    raw_status: Any
    output: PredictionOutput
    body: Any = field(default=None, repr=False)

    def candidate_url(self) -> Any:
        """Return the candidate URL before validation, or ``None``."""
        if not self.status.allows_extraction:
            return None
        return self.output.candidate()

    def image_url(self) -> str | None:
        """Return the validated image URL, or ``None`` if there is none."""
        candidate = self.candidate_url()
        if isinstance(candidate, str) and candidate.startswith("http"):
            return candidate
        return None


def decode_prediction(body: Any) -> Prediction:
    """Decode a parsed prediction response body.

    Bodies that are not JSON objects decode to a prediction with no status
    and no output, which never yields an image URL.

    Args:
        body: Parsed JSON returned by the provider.

    Returns:
        The decoded :class:`Prediction`.
    """
    if not isinstance(body, dict):
        return Prediction(
            status=PredictionStatus.OTHER,
            raw_status=None,
            output=AbsentOutput(),
            body=body,
        )

    raw_status = body.get("status")
    return Prediction(
        status=PredictionStatus.parse(raw_status),
        raw_status=raw_status,
        output=decode_output(body.get("output")),
        body=body,
    )


def upstream_error_detail(body: Any, status_code: int) -> str:
    """Pick the human-readable error detail out of an upstream error body.

    Uses ``error`` if set, otherwise ``detail``, otherwise a generic string
    naming the upstream status code.  Non-string values are rendered as JSON.
    """
    if isinstance(body, dict):
        for key in ("error", "detail"):
            value = body.get(key)
            if is_present(value):
                return value if isinstance(value, str) else json.dumps(value)
    return f"Replicate API Status: {status_code}"
