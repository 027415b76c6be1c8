from decimal import Decimal

from sqlalchemy import BigInteger, ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base


class SeatCategoryModel(Base):
    __tablename__ = 'seat_categories'

    # No ON DELETE cascade: the create-or-update workflow removes categories itself
    event_id: Mapped[str] = mapped_column(
        String(64), ForeignKey('events.event_id'), primary_key=True
    )
    category_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    available_count: Mapped[int] = mapped_column(BigInteger, nullable=False)
