from typing import Any, Dict, Optional, Union

from nearjsonrpc.data.schema import Finality, WaitUntil
from nearjsonrpc.errors import ValidationError

BlockId = Union[int, str]

FINALITY_VALUES = frozenset(f.value for f in Finality)


def require_string(name: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"`{name}` must be a non-empty string")
    return value


def validate_block_id(block_id: Any) -> BlockId:
    """Block height (non-negative int) or block hash (non-empty string)."""
    if isinstance(block_id, bool):
        raise ValidationError("`block_id` must be an integer height or a hash string")
    if isinstance(block_id, int):
        if block_id < 0:
            raise ValidationError("`block_id` height must not be negative")
        return block_id
    if isinstance(block_id, str) and block_id.strip():
        return block_id
    raise ValidationError("`block_id` must be an integer height or a hash string")


def validate_finality(finality: Any) -> str:
    if isinstance(finality, Finality):
        return finality.value
    if not isinstance(finality, str) or finality not in FINALITY_VALUES:
        raise ValidationError(f"`finality` must be one of {sorted(FINALITY_VALUES)}, got {finality!r}")
    return finality


def block_reference(finality: Optional[str], block_id: Optional[BlockId]) -> Dict[str, Any]:
    """
    Returns ``{"finality": ...}`` or ``{"block_id": ...}``; finality defaults
    to "final" when neither is given.
    """
    if finality is not None and block_id is not None:
        raise ValidationError("Specify either finality or block_id, not both")
    if block_id is not None:
        return {"block_id": validate_block_id(block_id)}
    return {"finality": validate_finality(finality if finality is not None else Finality.FINAL.value)}


def validate_wait_until(wait_until: Any) -> str:
    if isinstance(wait_until, WaitUntil):
        return wait_until.value
    if isinstance(wait_until, str):
        try:
            return WaitUntil(wait_until.strip().upper()).value
        except ValueError:
            pass
    allowed = ", ".join(w.value for w in WaitUntil)
    raise ValidationError(f"`wait_until` must be one of {allowed}, got {wait_until!r}")
