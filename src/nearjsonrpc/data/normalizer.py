import base64
import binascii
import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import msgspec
import pandas as pd

from nearjsonrpc.errors import ResponseFormatError

logger = logging.getLogger(__name__)

PathKey = Union[str, int]

_MISSING = object()


class DecodedResult(msgspec.Struct):
    """
    A view-call result at each decoding stage. ``None`` marks a stage that
    could not be reached (no bytes, not UTF-8, not JSON).
    """
    raw: Optional[bytes] = None
    text: Optional[str] = None
    json: Any = None


def get_field(payload: Any, *path: PathKey, default: Any = None) -> Any:
    """
    Walks ``path`` through nested dicts (str keys) and lists (int indices).
    Any missing step, or a null value, yields ``default``.
    """
    current = payload
    for key in path:
        if isinstance(current, Mapping) and isinstance(key, str):
            current = current.get(key, _MISSING)
        elif isinstance(current, list) and isinstance(key, int) and not isinstance(key, bool):
            current = current[key] if -len(current) <= key < len(current) else _MISSING
        else:
            return default
        if current is _MISSING or current is None:
            return default
    return current


def get_str(payload: Any, *path: PathKey, default: Optional[str] = None) -> Optional[str]:
    value = get_field(payload, *path)
    if value is None or isinstance(value, (dict, list)):
        return default
    return str(value)


def get_int(payload: Any, *path: PathKey) -> Optional[int]:
    value = get_field(payload, *path)
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def get_bool(payload: Any, *path: PathKey) -> Optional[bool]:
    value = get_field(payload, *path)
    return value if isinstance(value, bool) else None


def get_list(payload: Any, *path: PathKey) -> List[Any]:
    value = get_field(payload, *path)
    return value if isinstance(value, list) else []


def get_dict(payload: Any, *path: PathKey) -> Dict[str, Any]:
    value = get_field(payload, *path)
    return value if isinstance(value, dict) else {}


def get_amount(payload: Any, *path: PathKey, default: str = "0") -> str:
    """
    Balances and stakes are decimal strings; ints are stringified as is and
    floats are never produced.
    """
    value = get_field(payload, *path)
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def to_decimal(amount: str) -> Decimal:
    try:
        return Decimal(amount)
    except (InvalidOperation, TypeError):
        logger.warning("Non-numeric amount %r treated as 0", amount)
        return Decimal(0)


def to_utc_timestamp(value: Any) -> Optional[pd.Timestamp]:
    """Nanoseconds since epoch (int or digit string) or an ISO string to a UTC Timestamp."""
    if value is None or isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float)) or (isinstance(value, str) and value.isdigit()):
            return pd.Timestamp(int(value), unit="ns", tz="UTC")
        if isinstance(value, str):
            return pd.Timestamp(pd.to_datetime(value, utc=True))
    except (ValueError, OverflowError) as e:
        logger.debug("Unparseable timestamp %r: %s", value, e)
    return None


def _to_bytes(value: Any) -> Optional[bytes]:
    if isinstance(value, list):
        try:
            return bytes(value)
        except (TypeError, ValueError):
            return None
    if isinstance(value, str):
        try:
            return base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError):
            return None
    return None


def decode_view_result(value: Any) -> DecodedResult:
    """
    Decodes a contract view-call result given as a list of byte values or a
    base64 string. Never raises: each stage that fails leaves its field None.
    """
    raw = _to_bytes(value)
    if raw is None:
        return DecodedResult()

    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        return DecodedResult(raw=raw)

    try:
        parsed = msgspec.json.decode(text)
    except msgspec.DecodeError:
        return DecodedResult(raw=raw, text=text)

    return DecodedResult(raw=raw, text=text, json=parsed)


def require_mapping(method: str, value: Any) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise ResponseFormatError(
            f"Unexpected response format from '{method}': expected an object, got {type(value).__name__}",
            method=method,
        )
    return value


def build_frame(rows: Sequence[Mapping[str, Any]], types: Mapping[str, str]) -> pd.DataFrame:
    """
    Builds a DataFrame with exactly the columns of ``types``, in order, cast
    to their dtypes. Columns absent from a row hold the dtype's missing value.
    """
    columns = list(types)
    records = [{column: row.get(column) for column in columns} for row in rows]

    # object dtype keeps ints above 2**53 exact until the nullable cast
    df = pd.DataFrame(records, columns=columns, dtype=object)

    for column, dtype in types.items():
        if dtype.startswith("datetime64"):
            df[column] = pd.to_datetime(df[column], utc=True)
        elif dtype != "object":
            df[column] = df[column].astype(dtype)  # type: ignore
    return df
