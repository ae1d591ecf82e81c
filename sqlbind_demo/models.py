from typing import Optional

from sqlalchemy import ForeignKey, text
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

Base = declarative_base()


class Author(Base):
    __tablename__ = "authors"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(nullable=False)
    email: Mapped[str] = mapped_column(unique=True, nullable=False)

    def __repr__(self):
        return f"Author(id={self.id} name={self.name} email={self.email})"


class Book(Base):
    __tablename__ = "books"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(nullable=False)
    author_id: Mapped[Optional[int]] = mapped_column(ForeignKey("authors.id"))
    published_year: Mapped[Optional[int]] = mapped_column()
    genre: Mapped[Optional[str]] = mapped_column()

    def __repr__(self):
        return (
            f"Book(id={self.id} title={self.title} author_id={self.author_id} "
            f"published_year={self.published_year} genre={self.genre})"
        )


class Member(Base):
    __tablename__ = "members"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(nullable=False)
    email: Mapped[str] = mapped_column(unique=True, nullable=False)
    join_date: Mapped[str] = mapped_column(nullable=False, server_default=text("CURRENT_DATE"))

    def __repr__(self):
        return f"Member(id={self.id} name={self.name} join_date={self.join_date})"
