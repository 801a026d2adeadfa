from pydantic import BaseModel, Field
from datetime import date, datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
import uuid

CENTIME = Decimal("0.01")

def gen_id() -> str:
    return str(uuid.uuid4())

def to_money(value) -> Decimal:
    """Convertit int/float/str/Decimal en Decimal arrondi au centime."""
    if isinstance(value, Decimal):
        d = value
    else:
        d = Decimal(str(value))
    return d.quantize(CENTIME, rounding=ROUND_HALF_UP)

def as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value

class TimeStamped(BaseModel):
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    def touch(self):
        object.__setattr__(self, "updated_at", datetime.utcnow())

def naive_utc(value: datetime) -> datetime:
    """Datetime comparable quel que soit le fuseau : aware -> UTC sans tzinfo."""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value
