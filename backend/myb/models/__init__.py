from myb.models.base import Base
from myb.models.record import StoredRecord

__all__ = [
    "Base",
    "StoredRecord",
]
