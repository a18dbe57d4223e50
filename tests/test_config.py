import pytest

from proposal_engine.config import ConfigError, load_settings

BASE_ENV = {
    "NOTION_TOKEN": "secret_x",
    "NOTION_PROJECT_DB_ID": "proj",
    "NOTION_CHECKLIST_DB_ID": "check",
    "NOTION_TASK_DB_ID": "tasks",
}


def test_defaults():
    settings = load_settings(BASE_ENV)
    assert settings.notion_token == "secret_x"
    assert settings.sync_doc_id == "notion_project_sync"
    assert settings.proposal_db_path == "proposals.db"
    assert settings.sync_interval_minutes == 10


def test_overrides():
    env = {**BASE_ENV, "SYNC_DOC_ID": "other", "PROPOSAL_DB_PATH": "/tmp/p.db", "SYNC_INTERVAL_MINUTES": "5"}
    settings = load_settings(env)
    assert settings.sync_doc_id == "other"
    assert settings.proposal_db_path == "/tmp/p.db"
    assert settings.sync_interval_minutes == 5


@pytest.mark.parametrize("missing", sorted(BASE_ENV))
def test_missing_required_env_names_the_variable(missing):
    env = {key: value for key, value in BASE_ENV.items() if key != missing}
    with pytest.raises(ConfigError, match=missing):
        load_settings(env)


def test_bad_interval():
    with pytest.raises(ConfigError):
        load_settings({**BASE_ENV, "SYNC_INTERVAL_MINUTES": "soon"})
    with pytest.raises(ConfigError):
        load_settings({**BASE_ENV, "SYNC_INTERVAL_MINUTES": "0"})


def test_reads_process_environment(monkeypatch):
    for key, value in BASE_ENV.items():
        monkeypatch.setenv(key, value)
    assert load_settings().task_db_id == "tasks"
