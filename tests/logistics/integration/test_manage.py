"""Tests for the database management CLI against the in-memory provider."""

import pytest
from logistics.domain import logistics
from logistics.utils.db import drop_db, setup_db


@pytest.fixture()
def manage(monkeypatch):
    import manage as manage_module

    # The session fixture has already initialized the domain.
    monkeypatch.setattr(logistics, "init", lambda: None)
    return manage_module


class TestSchemaHelpers:
    def test_memory_provider_needs_no_schema(self):
        assert setup_db(logistics) == []
        assert drop_db(logistics) == []


class TestManageCommands:
    def test_setup_db(self, manage, capsys):
        manage.main(["setup-db"])
        out = capsys.readouterr().out
        assert "nothing to create" in out
        assert out.strip().endswith("Done.")

    def test_drop_db(self, manage, capsys):
        manage.main(["drop-db"])
        assert "nothing to drop" in capsys.readouterr().out

    def test_unknown_command(self, manage):
        with pytest.raises(SystemExit):
            manage.main(["migrate"])
