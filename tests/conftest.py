import pytest

import mail2es.config


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep the user's ~/.config/mail2es and $MAIL2ES_CONFIG out of tests."""
    monkeypatch.delenv(mail2es.config.CONFIG_ENV, raising=False)
    monkeypatch.setattr(mail2es.config, "GLOBAL_CONFIG_DIR", tmp_path / "global-config")
