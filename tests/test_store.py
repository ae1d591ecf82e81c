import pytest
from sqlalchemy import Column, Integer, MetaData, String, Table, text

from sqlbind_demo import Store
from sqlbind_demo.config import Settings
from sqlbind_demo.errors import SchemaError, StoreConnectionError
from sqlbind_demo.models import Author, Base


class TestStore:
    def test_open_close(self, database_url):
        store = Store(database_url)
        assert not store.is_open

        with store:
            assert store.is_open
            assert store.open() is store

        assert not store.is_open
        store.close()

    @pytest.mark.parametrize("url", ["notadialect://", "sqlite:////nonexistent/dir/x.db"])
    def test_cannot_open(self, url):
        with pytest.raises(StoreConnectionError):
            Store(url).open()

    @pytest.mark.parametrize("url", [
        "sqlite://",
        "sqlite:///:memory:",
        "sqlite:///file::memory:?cache=shared&uri=true",
        "sqlite:///file:shared_db?mode=memory&uri=true",
    ])
    def test_memory_database_refused(self, url):
        store = Store(url)

        with pytest.raises(StoreConnectionError, match="in-memory"):
            store.open()

        assert not store.is_open

    def test_closed_store(self, database_url):
        store = Store(database_url)

        with pytest.raises(StoreConnectionError):
            store.exec("SELECT 1")

        with pytest.raises(StoreConnectionError):
            store.begin()

    def test_from_settings(self, database_url):
        store = Store.from_settings(Settings(database_url=database_url, echo=True))
        assert store.url == database_url
        assert store.echo

    def test_foreign_keys_enabled(self, store):
        assert store.query("PRAGMA foreign_keys").first()[0] == 1


class TestSchema:
    def test_create_twice(self, store):
        store.exec("INSERT INTO authors (name, email) VALUES (?, ?)", "J.K. Rowling", "jk.rowling@codeheim.io")

        store.create_schema(Base.metadata)
        assert len(store.select(Author, "SELECT * FROM authors")) == 1

    def test_drop_existing(self, store):
        store.exec("INSERT INTO authors (name, email) VALUES (?, ?)", "J.K. Rowling", "jk.rowling@codeheim.io")

        store.create_schema(Base.metadata, drop_existing=True)
        assert store.select(Author, "SELECT * FROM authors") == []

        # Identifiers start over with the table
        result = store.exec("INSERT INTO authors (name, email) VALUES (?, ?)", "J.K. Rowling", "jk.rowling@codeheim.io")
        assert result.last_insert_id == 1

    def test_schema_error(self, store):
        metadata = MetaData()
        Table(
            "broken", metadata,
            Column("id", Integer, primary_key=True),
            Column("name", String, server_default=text("(((")),
        )

        with pytest.raises(SchemaError):
            store.create_schema(metadata)
