"""
Walkthrough of the query executor against the authors / books / members
schema: inserts, a transaction, lookups, a prepared statement, IN clause
expansion, named queries from a record and from a mapping, a named update, a
batch insert and a delete.
"""
import argparse
import sys

from pydantic import ValidationError

from .base.params import expand_in
from .base.store import Store
from .config import Settings
from .errors import SqlBindError
from .logger import logger, setup_logging
from .models import Author, Base, Book, Member

RULE = "-------------------------------------------------"


def insert_authors(store):
    store.exec("INSERT INTO authors (name, email) VALUES ($1, $2)", "J.K. Rowling", "jk.rowling@codeheim.io")


def insert_in_transaction(store):
    with store.begin() as tx:
        tx.exec("INSERT INTO authors (name, email) VALUES ($1, $2)", "George R.R. Martin", "george.martin@codeheim.io")
        tx.exec(
            "INSERT INTO books (title, author_id, published_year, genre) VALUES ($1, $2, $3, $4)",
            "Harry Potter", 1, 1997, "Fantasy",
        )
        tx.exec(
            "INSERT INTO books (title, author_id, published_year, genre) VALUES ($1, $2, $3, $4)",
            "Game of Thrones", 2, 1996, "Fantasy",
        )
        tx.exec("INSERT INTO members (name, email) VALUES ($1, $2)", "John Doe", "john.doe@example.com")


def select_authors(store):
    authors = store.select(Author, "SELECT * FROM authors")
    print("Authors:", authors)


def get_book(store):
    book = store.get(Book, "SELECT * FROM books WHERE title=$1", "Harry Potter")
    print("Book Details:", book)


def prepared_query(store):
    stmt = store.prepare("SELECT * FROM authors WHERE id=?", into=Author)
    author = stmt.get(1)
    print("Author from Prepared Query:", author)


def in_clause(store):
    query, args = expand_in("SELECT * FROM authors WHERE id IN (?);", [1, 2])
    # query() rebinds the expanded markers to the driver style itself
    with store.query(query, *args, into=Author) as rows:
        for author in rows:
            print(f"Author from IN Clause: {author}")


def named_query_record(store):
    criteria = Book(author_id=1)
    with store.named_query("SELECT * FROM books WHERE author_id=:author_id", criteria, into=Book) as rows:
        for book in rows:
            print(f"Book from Named Query (Struct): {book}")


def named_query_mapping(store):
    params = {"name": "J.K. Rowling"}
    with store.named_query("SELECT * FROM authors WHERE name=:name", params, into=Author) as rows:
        for author in rows:
            print(f"Author from Named Query (Map): {author}")


def named_update(store):
    params = {"email": "new.email@example.com", "id": 1}
    result = store.named_exec("UPDATE authors SET email=:email WHERE id=:id", params)
    print(f"Rows Updated: {result.rows_affected}")


def batch_insert(store):
    members = [
        Member(name="Alice", email="alice@example.com"),
        Member(name="Bob", email="bob@example.com"),
        Member(name="Charlie", email="charlie@example.com"),
    ]
    store.named_exec("INSERT INTO members (name, email) VALUES (:name, :email)", members)

    all_members = store.select(Member, "SELECT * FROM members ORDER BY join_date")
    print("Members: ", all_members)


def delete_member(store):
    result = store.exec("DELETE FROM members WHERE email=$1", "john.doe@example.com")
    print("Member deleted: ", result)


STEPS = [
    select_authors,
    get_book,
    prepared_query,
    in_clause,
    named_query_record,
    named_query_mapping,
    named_update,
    batch_insert,
    delete_member,
]


def run_demo(store, reset_schema=True):
    store.create_schema(Base.metadata, drop_existing=reset_schema)

    insert_authors(store)
    insert_in_transaction(store)

    for idx, step in enumerate(STEPS):
        if idx:
            print(RULE)
        logger.debug(f"Running step {step.__name__}")
        step(store)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Walk through parameter binding against a SQL store")
    parser.add_argument("--database-url", help="SQLAlchemy URL, overrides SQLBIND_DATABASE_URL")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--keep-schema", action="store_true", help="Do not drop existing tables first")
    args = parser.parse_args(argv)

    overrides = {}
    if args.database_url:
        overrides["database_url"] = args.database_url
    if args.log_level:
        overrides["log_level"] = args.log_level
    if args.keep_schema:
        overrides["reset_schema"] = False

    try:
        settings = Settings(**overrides)
    except ValidationError as e:
        setup_logging()
        logger.error(f"Invalid settings: {e}")
        return 1

    setup_logging(settings.log_level)

    try:
        with Store.from_settings(settings) as store:
            run_demo(store, reset_schema=settings.reset_schema)
    except SqlBindError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
