"""Text parsing helpers shared by the platform readers."""

import re

from memtop.errors import FormatError, ParseError

_DECIMAL = re.compile(r"[0-9]+(?:\.[0-9]+)?")

_SIZE_MULTIPLIERS = {
    "K": 1024,
    "M": 1024**2,
    "G": 1024**3,
    "T": 1024**4,
}


def parse_scaled_size(token: str) -> int:
    """
    Parse a size such as ``2048.00M`` into bytes.

    The suffix is one of K, M, G or T (binary multiples). A bare number is
    taken as bytes.

    Raises:
        ParseError: If the numeric part is not a decimal number.
    """
    token = token.strip()
    multiplier = 1
    if token and token[-1] in _SIZE_MULTIPLIERS:
        multiplier = _SIZE_MULTIPLIERS[token[-1]]
        token = token[:-1]
    if not _DECIMAL.fullmatch(token):
        raise ParseError(f"invalid size: {token!r}")
    return int(float(token) * multiplier)


def parse_keyed_line(line: str) -> tuple[str, int]:
    """
    Parse a ``Label: value [unit]`` line.

    Returns the stripped label and the first numeric field. A trailing period
    (as printed by vm_stat) and any unit after the number are ignored.

    Raises:
        FormatError: If the line has no colon or no numeric value.
    """
    key, sep, rest = line.partition(":")
    if not sep:
        raise FormatError(f"missing ':' in line {line.strip()!r}")
    fields = rest.split()
    if not fields:
        raise FormatError(f"no value for {key.strip()!r}")
    value = fields[0].rstrip(".")
    if not value or not is_decimal(value):
        raise FormatError(f"non-numeric value for {key.strip()!r}: {fields[0]!r}")
    return key.strip(), int(value)


def parse_keyed_lines(text: str) -> dict[str, int]:
    """Parse every well-formed ``Label: value`` line of a report into a dict."""
    values: dict[str, int] = {}
    for line in text.splitlines():
        if not line.strip():
            continue
        try:
            key, value = parse_keyed_line(line)
        except FormatError:
            continue
        values[key] = value
    return values


def is_decimal(s: str) -> bool:
    """Return True if every character of ``s`` is an ASCII digit."""
    return all("0" <= ch <= "9" for ch in s)
