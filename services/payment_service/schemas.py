import enum
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from pydantic import BaseModel

from .gateway import TRANSACTION_ID_FIELDS, first_present

AMOUNT_FIELDS = ("value", "amount")

# Compared after lowercasing; everything else is acknowledged and ignored
APPROVED_STATUSES = frozenset({"paid", "approved"})


class ReconcileOutcome(str, enum.Enum):
    PAID = "paid"                  # matched by txid, pending -> paid
    RESCUED = "rescued"            # matched by amount, txid backfilled
    ALREADY_PAID = "already_paid"  # duplicate delivery
    UNMATCHED = "unmatched"
    IGNORED = "ignored"            # not an approval
    MISSING_ID = "missing_id"


def parse_amount(value: Any) -> Optional[int]:
    """Integer cents from an int or a digit string; anything else means no amount."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


@dataclass
class WebhookNotification:
    """What we understood from one gateway delivery. The body itself is an open record."""

    transaction_id: Optional[str]
    status: str
    amount_cents: Optional[int] = None

    @property
    def approved(self) -> bool:
        return self.status in APPROVED_STATUSES

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "WebhookNotification":
        transaction_id = first_present(payload, TRANSACTION_ID_FIELDS)
        status = payload.get("status")
        return cls(
            transaction_id=str(transaction_id).strip() if transaction_id is not None else None,
            status=str(status).strip().lower() if status is not None else "",
            amount_cents=parse_amount(first_present(payload, AMOUNT_FIELDS)),
        )


class WebhookAck(BaseModel):
    received: bool = True
    outcome: ReconcileOutcome
