from pydantic import BaseModel


class TodayStats(BaseModel):
    totalSales: float
    totalOrders: int
    avgOrder: float
    tablesServed: int


class HourlySales(BaseModel):
    hour: int
    sales: float
    orders: int


class PopularItem(BaseModel):
    name: str
    quantity: int
    revenue: float
