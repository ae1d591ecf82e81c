import pytest

from sqlbind_demo import Store
from sqlbind_demo.models import Base


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'test.db'}"


@pytest.fixture
def store(database_url):
    with Store(database_url) as store:
        store.create_schema(Base.metadata)
        yield store


@pytest.fixture
def authors(store):
    store.exec("INSERT INTO authors (name, email) VALUES (?, ?)", "J.K. Rowling", "jk.rowling@codeheim.io")
    store.exec("INSERT INTO authors (name, email) VALUES (?, ?)", "George R.R. Martin", "george.martin@codeheim.io")
    return store


@pytest.fixture
def books(authors):
    sql = "INSERT INTO books (title, author_id, published_year, genre) VALUES ($1, $2, $3, $4)"
    authors.exec(sql, "Harry Potter", 1, 1997, "Fantasy")
    authors.exec(sql, "Game of Thrones", 2, 1996, "Fantasy")
    authors.exec(sql, "The Casual Vacancy", 1, 2012, None)
    return authors
