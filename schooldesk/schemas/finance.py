# schooldesk/schemas/finance.py - Income and expense entries
from datetime import date, datetime
from typing import Optional
from uuid import UUID

from schooldesk.schemas.common import LongName, MoneyOut, Name, OptionalStr, PositiveMoney, RequestModel, ResponseModel


class EntryCreate(RequestModel):
    head: Name
    name: LongName
    invoice_no: OptionalStr = None
    entry_date: date
    amount: PositiveMoney
    description: OptionalStr = None


class EntryUpdate(RequestModel):
    head: Optional[Name] = None
    name: Optional[LongName] = None
    invoice_no: OptionalStr = None
    entry_date: Optional[date] = None
    amount: Optional[PositiveMoney] = None
    description: OptionalStr = None


class EntryOut(ResponseModel):
    id: UUID
    head: str
    name: str
    invoice_no: Optional[str]
    entry_date: date
    amount: MoneyOut
    description: Optional[str]
    created_at: datetime
