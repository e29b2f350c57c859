"""Exception types raised by the telegram pipeline."""


class ElcentralError(Exception):
    """Base class for all elcentral errors."""


class MalformedRecordError(ElcentralError, ValueError):
    """A data record payload could not be parsed (strict mode only)."""


class StreamFault(ElcentralError):
    """The byte source ended or failed; the read loop cannot continue."""
