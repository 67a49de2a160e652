"""Reference entities resolved by name."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class ReferenceKind(str, Enum):
    """Kinds of named entities a movement or item may reference."""

    LOCATION = "location"
    SUPPLIER = "supplier"
    CUSTOMER = "customer"
    CATEGORY = "category"


class Supplier(BaseModel):
    """Supplier as seen by the alerts feed."""

    id: int
    name: str
    code: str | None = None
    created_at: datetime | None = None


class CurrentUser(BaseModel):
    """Identity supplied by the session layer."""

    id: int
    role: str = "user"
