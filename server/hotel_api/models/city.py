"""City model definition."""

from typing import TYPE_CHECKING

from sqlalchemy import Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..core.database import Base

if TYPE_CHECKING:
    from .hotel import Hotel


class City(Base):
    """City that hotels are located in."""

    __tablename__ = "cities"

    city_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    country: Mapped[str] = mapped_column(String(100), nullable=False)

    __table_args__ = (
        UniqueConstraint("name", "country", name="uq_city_name_country"),
    )

    hotels: Mapped[list["Hotel"]] = relationship(
        "Hotel",
        back_populates="city",
        cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<City(city_id={self.city_id}, name='{self.name}', country='{self.country}')>"
