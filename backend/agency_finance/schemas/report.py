from pydantic import BaseModel


class SummaryItem(BaseModel):
    """Income/expense totals split by payment status."""
    total_income: float
    total_expense: float
    paid_income: float
    pending_income: float
    paid_expense: float
    pending_expense: float
    balance: float
    realized_balance: float
    entry_count: int


class MonthlyItem(BaseModel):
    label: str
    year: int
    month: int
    income: float
    expense: float
    balance: float


class CategoryShareItem(BaseModel):
    category_name: str
    total: float
    count: int
    percentage: float


class CategoryBreakdownItem(BaseModel):
    kind: str
    grand_total: float
    categories: list[CategoryShareItem]


class ChartSeries(BaseModel):
    """Chart data: one value per label."""
    labels: list[str]
    values: list[float]


class DashboardResponse(BaseModel):
    summary: SummaryItem
    overall: SummaryItem
    by_month: list[MonthlyItem]
    income_by_category: CategoryBreakdownItem
    expense_by_category: CategoryBreakdownItem
    expense_chart: ChartSeries
