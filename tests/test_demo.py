import pytest

from sqlbind_demo import Store
from sqlbind_demo.base.params import ParamStyle
from sqlbind_demo.demo import RULE, in_clause, main
from sqlbind_demo.models import Base


class TestDemo:
    def test_walkthrough(self, database_url, capsys):
        assert main(["--database-url", database_url]) == 0

        out = capsys.readouterr().out
        lines = out.splitlines()

        assert lines[0].startswith("Authors: [Author(id=1 name=J.K. Rowling")
        assert "Book Details: Book(id=1 title=Harry Potter author_id=1" in out
        assert "Author from Prepared Query: Author(id=1 name=J.K. Rowling" in out
        assert sum(line.startswith("Author from IN Clause:") for line in lines) == 2
        assert sum(line.startswith("Book from Named Query (Struct):") for line in lines) == 1
        assert sum(line.startswith("Author from Named Query (Map):") for line in lines) == 1
        assert "Rows Updated: 1" in lines
        assert "Members: " in out and "name=Charlie" in out
        assert "Member deleted:  ExecResult(rows_affected=1" in out
        assert lines.count(RULE) == 8

    def test_rerun_resets_schema(self, database_url, capsys):
        assert main(["--database-url", database_url]) == 0
        assert main(["--database-url", database_url]) == 0

    def test_rerun_on_kept_schema_fails(self, database_url, capsys):
        assert main(["--database-url", database_url]) == 0
        assert main(["--database-url", database_url, "--keep-schema"]) == 1

    def test_in_clause_with_named_paramstyle(self, database_url, capsys):
        with Store(database_url, paramstyle="named") as store:
            assert store.paramstyle is ParamStyle.NAMED
            store.create_schema(Base.metadata)
            store.exec("INSERT INTO authors (name, email) VALUES (?, ?)", "J.K. Rowling", "jk.rowling@codeheim.io")
            store.exec("INSERT INTO authors (name, email) VALUES (?, ?)", "George R.R. Martin", "george.martin@codeheim.io")

            in_clause(store)

        lines = capsys.readouterr().out.splitlines()
        assert sum(line.startswith("Author from IN Clause:") for line in lines) == 2

    def test_lowercase_log_level(self, database_url, monkeypatch, capsys):
        monkeypatch.setenv("SQLBIND_LOG_LEVEL", "debug")
        assert main(["--database-url", database_url]) == 0

    @pytest.mark.parametrize("level", ["loud", "verbose"])
    def test_invalid_log_level(self, database_url, monkeypatch, capsys, level):
        monkeypatch.setenv("SQLBIND_LOG_LEVEL", level)
        assert main(["--database-url", database_url]) == 1
