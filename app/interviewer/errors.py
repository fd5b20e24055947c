"""
Error taxonomy.

Only ValidationError (and its SessionPayloadError subclass) ever reaches a
caller. OracleError subclasses are raised inside the oracle adapters and
converted there into fallback content.
"""


class InterviewError(Exception):
    """Base class for interviewer errors."""


class ValidationError(InterviewError, ValueError):
    """Missing or malformed client input. Nothing was mutated, no oracle call."""


class SessionPayloadError(ValidationError):
    """A serialized session that does not decode into a valid InterviewSession."""


class OracleError(InterviewError):
    """An oracle round trip did not yield usable output."""


class OracleUnavailable(OracleError):
    """Transport failure: the generation service could not be reached."""


class OracleMalformedOutput(OracleError):
    """The generation service answered, but not with the expected structure."""
