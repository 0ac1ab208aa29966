# schooldesk/schemas/fee.py - Fee types, groups, masters, assignments, payments and dues
from datetime import date, datetime
from decimal import Decimal
from typing import List, Literal, Optional
from uuid import UUID

from schooldesk.schemas.common import (
    Code, Money, MoneyOut, Name, OptionalDate, OptionalId, OptionalStr, Percentage, PositiveMoney,
    RequestModel, ResponseModel,
)

FineType = Literal["none", "percentage", "fixed"]
PaymentMode = Literal["Cash", "Cheque", "DD", "Bank Transfer", "UPI", "Card", "Online"]


class FeeTypeCreate(RequestModel):
    name: Name
    code: Code
    description: OptionalStr = None


class FeeTypeUpdate(RequestModel):
    name: Optional[Name] = None
    code: Optional[Code] = None
    description: OptionalStr = None


class FeeTypeOut(ResponseModel):
    id: UUID
    name: str
    code: str
    description: Optional[str]
    created_at: datetime


class FeeGroupCreate(RequestModel):
    name: Name
    description: OptionalStr = None


class FeeGroupUpdate(RequestModel):
    name: Optional[Name] = None
    description: OptionalStr = None


class FeeGroupOut(ResponseModel):
    id: UUID
    name: str
    description: Optional[str]
    master_count: int = 0
    created_at: datetime


class FeeMasterCreate(RequestModel):
    class_id: UUID
    fee_group_id: UUID
    fee_type_id: UUID
    session_id: OptionalId = None
    amount: Money
    due_date: OptionalDate = None
    fine_type: FineType = "none"
    fine_percentage: Percentage = Decimal("0")
    fine_amount: Money = Decimal("0")


class FeeMasterUpdate(RequestModel):
    class_id: Optional[UUID] = None
    fee_group_id: Optional[UUID] = None
    fee_type_id: Optional[UUID] = None
    session_id: OptionalId = None
    amount: Optional[Money] = None
    due_date: OptionalDate = None
    fine_type: Optional[FineType] = None
    fine_percentage: Optional[Percentage] = None
    fine_amount: Optional[Money] = None


class FeeMasterOut(ResponseModel):
    id: UUID
    class_id: UUID
    class_name: Optional[str]
    fee_group_id: UUID
    fee_group_name: Optional[str]
    fee_type_id: UUID
    fee_type_name: Optional[str]
    session_id: Optional[UUID]
    amount: MoneyOut
    due_date: Optional[date]
    fine_type: FineType
    fine_percentage: MoneyOut
    fine_amount: MoneyOut
    assigned_count: int = 0
    created_at: datetime


class FeeAssignRequest(RequestModel):
    fee_master_id: UUID
    # Every student of the master's class when left out
    student_ids: Optional[List[UUID]] = None


class FeeAssignResult(ResponseModel):
    fee_master_id: UUID
    assigned: int
    already_assigned: int


class PaymentCreate(RequestModel):
    student_id: UUID
    assignment_id: UUID
    amount: PositiveMoney
    discount: Money = Decimal("0")
    fine: Money = Decimal("0")
    payment_mode: PaymentMode = "Cash"
    payment_date: OptionalDate = None
    reference_no: OptionalStr = None
    note: OptionalStr = None


class PaymentOut(ResponseModel):
    id: UUID
    student_id: UUID
    assignment_id: UUID
    amount: MoneyOut
    discount: MoneyOut
    fine: MoneyOut
    payment_mode: str
    payment_date: date
    reference_no: Optional[str]
    note: Optional[str]
    created_at: datetime


class FeeDueRow(ResponseModel):
    student_id: UUID
    admission_no: str
    student_name: str
    assigned: MoneyOut
    paid: MoneyOut
    fine: MoneyOut
    balance: MoneyOut


class FeeDueSummary(ResponseModel):
    students: int
    assigned: MoneyOut
    paid: MoneyOut
    fine: MoneyOut
    balance: MoneyOut


