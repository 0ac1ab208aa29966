# schooldesk/services/finance.py - Income and expense ledgers
from schooldesk.models.finance import Expense, Income
from schooldesk.services.crud import TenantCRUDService


class IncomeService(TenantCRUDService[Income]):
    model = Income
    resource_name = "Income"
    search_fields = ("name", "head", "invoice_no")
    filter_fields = ("head",)
    date_field = "entry_date"

    def ordering(self):
        return [Income.entry_date.desc(), Income.created_at.desc(), Income.id]


class ExpenseService(TenantCRUDService[Expense]):
    model = Expense
    resource_name = "Expense"
    search_fields = ("name", "head", "invoice_no")
    filter_fields = ("head",)
    date_field = "entry_date"

    def ordering(self):
        return [Expense.entry_date.desc(), Expense.created_at.desc(), Expense.id]
