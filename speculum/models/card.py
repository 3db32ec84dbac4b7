from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from speculum.database import Base


class Card(Base):
    """Link card shown on the start page ("discoveries")."""

    __tablename__ = "cards"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    subtitle: Mapped[str | None] = mapped_column(String(500), nullable=True)
    link: Mapped[str] = mapped_column(String(2048), nullable=False)
    img: Mapped[str] = mapped_column(String(2048), nullable=False)
    published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
