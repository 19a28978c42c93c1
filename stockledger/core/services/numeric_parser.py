"""
Locale-aware quantity parsing.

User-facing quantity fields arrive in pt-BR notation ("1.234,56") but values
echoed back from storage arrive in canonical form ("6.5"). The heuristic:

- a comma means pt-BR: dots are thousands separators, the first comma is the
  decimal point;
- no comma and a single dot followed by anything but exactly three digits
  ("6.5", "6.50", "0.125") means an already-canonical decimal;
- any other dotted string is thousands-grouped ("1.000" is one thousand).

"1.234" is therefore read as 1234, never 1.234. Keep it that way unless the
callers stop echoing canonical values back.
"""

import math
import re
from decimal import Decimal
from typing import Any

from stockledger.core.exceptions import InvalidQuantityError

_BARE_DECIMAL = re.compile(r"^(0\.\d+|\d+\.(\d{1,2}|\d{4,}))$")
_NUMERIC = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")


def parse_quantity(value: Any) -> float:
    """
    Convert a number or locale-formatted string into a float.

    Returns 0.0 for empty input and NaN when the cleaned text is not numeric.
    Never raises for bad text; callers must check ``math.isnan``.
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float, Decimal)):
        return float(value)

    clean = str(value).strip()
    if clean == "":
        return 0.0

    if "," in clean:
        clean = clean.replace(".", "").replace(",", ".", 1)
    elif _BARE_DECIMAL.match(clean):
        return float(clean)
    else:
        clean = clean.replace(".", "")

    if clean == "":
        return 0.0
    if not _NUMERIC.match(clean):
        return math.nan
    return float(clean)


def require_quantity(value: Any, field: str = "quantity", positive: bool = True) -> float:
    """
    Parse a quantity and reject anything unusable for a ledger write.

    Raises:
        InvalidQuantityError: non-numeric or infinite input, a value <= 0 when
            ``positive`` is set, or a negative value otherwise.
    """
    parsed = parse_quantity(value)
    if math.isnan(parsed) or math.isinf(parsed):
        raise InvalidQuantityError(field, value, "is not a valid number")
    if positive and parsed <= 0:
        raise InvalidQuantityError(field, value, "must be a number greater than zero")
    if not positive and parsed < 0:
        raise InvalidQuantityError(field, value, "must not be negative")
    return parsed
