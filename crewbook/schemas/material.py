import datetime as dt

from crewbook.schemas.common import CamelModel


class MaterialCreate(CamelModel):
    name: str = ""
    unit: str = ""
    price_per_unit: float
    supplier: str = ""
    category: str = ""
    stock: float = 0
    min_stock: float = 0


class Material(MaterialCreate):
    id: str
    last_updated: dt.datetime
