"""Value extraction for OBIS data record payloads.

A data line looks like ``1-0:1.8.0(001234.567*kWh)``: the OBIS code, then one
or more parenthesized groups. Only the first group is read. The numeric
extractor never fails by default: a payload that does not hold a decimal
number reads as 0.0 so a single bad reading cannot stop the stream.
"""

import re

from elcentral.core.errors import MalformedRecordError
from elcentral.core.models import DataRecord

OPEN_DELIMITER = "("
CLOSE_DELIMITER = ")"
UNIT_SEPARATOR = "*"

_DECIMAL = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)")
_CODE = re.compile(r"^(?P<code>\d+-\d+:\d+\.\d+\.\d+)\(")


def extract_numeric(text: str, strict: bool = False) -> float:
    """Parse the numeric payload of a data line.

    The payload starts after the first '(' and ends at the first '*' or ')'
    that leaves a non-empty substring. Text without '(' is read as a bare
    payload up to the unit separator.

    Args:
        text: A whole data line, a group such as "(230.1*V)" or a bare
              payload such as "230.1".
        strict: Raise instead of defaulting to 0.0.

    Returns:
        The parsed value, or 0.0 when no well-formed decimal is present.

    Raises:
        MalformedRecordError: If strict is set and no decimal was found.
    """
    start = text.find(OPEN_DELIMITER)
    if start >= 0:
        start += 1
        ends = sorted(
            index
            for index in (
                text.find(UNIT_SEPARATOR, start),
                text.find(CLOSE_DELIMITER, start),
            )
            if index >= 0
        )
        for end in ends:
            candidate = text[start:end].strip()
            if not candidate:
                continue
            if _DECIMAL.fullmatch(candidate):
                return float(candidate)
            break
    else:
        candidate = text.partition(UNIT_SEPARATOR)[0].strip()
        if _DECIMAL.fullmatch(candidate):
            return float(candidate)

    if strict:
        raise MalformedRecordError(f"No numeric payload in {text!r}")
    return 0.0


def extract_text(text: str) -> str:
    """Return the substring strictly between the first '(' and ')'.

    Returns an empty string when either delimiter is missing or the closing
    delimiter comes before the opening one.
    """
    start = text.find(OPEN_DELIMITER)
    end = text.find(CLOSE_DELIMITER)
    if start < 0 or end < 0 or end <= start:
        return ""
    return text[start + 1 : end]


def parse_record(line: str) -> DataRecord | None:
    """Split a data line into code, payload and unit.

    A group cut off before its ')' keeps the text up to the unit separator
    as its payload, or an empty payload when no separator was received.

    Args:
        line: A single telegram line, surrounding whitespace allowed.

    Returns:
        DataRecord, or None if the line does not start with code(.
    """
    line = line.strip()
    match = _CODE.match(line)
    if match is None:
        return None
    body = line[match.end() :]
    if CLOSE_DELIMITER in body:
        group = extract_text(line)
    elif UNIT_SEPARATOR in body:
        group = body
    else:
        group = ""
    payload, separator, unit = group.partition(UNIT_SEPARATOR)
    return DataRecord(
        code=match.group("code"),
        raw_payload=payload,
        raw_unit=unit if separator else None,
    )
