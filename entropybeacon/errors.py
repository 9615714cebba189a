"""Error taxonomy for the entropy beacon.

Three families matter to the caller:

- **Configuration** errors (``ConfigurationError``, ``InvalidInputError``)
  abort immediately.  Retrying cannot fix a missing key or a malformed id.
- **Transient** errors (``HttpFetchError``, ``CollectionError``) are retried
  under a fixed policy and surface as ``TooManyRetriesError`` once the
  budget is exhausted.
- **Integrity** errors (``VerificationError`` and subclasses) abort
  immediately and must never be downgraded to warnings.
"""

from __future__ import annotations


class BeaconError(RuntimeError):
    """Base class for all entropy beacon errors."""


class ConfigurationError(BeaconError):
    """A required external input (key, credential, identifier) is missing."""


class InvalidInputError(ConfigurationError):
    """An external input is present but does not have the required shape."""


class HttpFetchError(BeaconError):
    """An HTTP request failed or timed out.

    ``status_code`` is 408 for a client-side timeout, 503 when the service
    could not be reached, and the response status otherwise.
    """

    def __init__(self, url: str, status_code: int, detail: str = "") -> None:
        self.url = url
        self.status_code = status_code
        message = f"failed to fetch {url} : status code {status_code}"
        if detail:
            message += f" : {detail}"
        super().__init__(message)


class CollectionError(BeaconError):
    """An entropy source returned a payload of the wrong shape."""


class TooManyRetriesError(BeaconError):
    """Raised when an operation still fails after the last allowed attempt."""

    def __init__(self, attempts: int, last_error: BaseException) -> None:
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"function failed after {attempts} attempts : {last_error}"
        )


class VerificationError(BeaconError):
    """Base class for integrity failures detected while verifying a record."""


class MissingRecordError(VerificationError):
    """The persisted record file does not exist or is unreadable."""


class KeyUnavailableError(VerificationError):
    """The public key could not be retrieved for verification."""


class InvalidSignatureError(VerificationError):
    """The record signature does not verify under the public key."""


class RecordMismatchError(VerificationError):
    """A freshly recomputed record differs from the persisted one."""

    def __init__(self, fields: list[str]) -> None:
        self.fields = fields
        super().__init__(
            "recomputed record does not match persisted record : "
            f"differing fields: {', '.join(fields)}"
        )
