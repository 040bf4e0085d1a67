from sqlalchemy import Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from myb.models.base import Base


class StoredRecord(Base):
    __tablename__ = "records"
    __table_args__ = (UniqueConstraint("collection", "position", name="uq_records_collection_position"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    collection: Mapped[str] = mapped_column(String(64), index=True)
    position: Mapped[int] = mapped_column(Integer)
    record_id: Mapped[str | None] = mapped_column(String(128), nullable=True, index=True)
    payload: Mapped[str] = mapped_column(Text)
