import pytest

from agent_vault.vault import VaultConfig, VaultStore


@pytest.fixture
def vault_config(tmp_path):
    """Config pointing at an isolated, not-yet-created vault directory."""
    return VaultConfig(vault_dir=tmp_path / "vault")


@pytest.fixture
def empty_store(vault_config):
    """A store whose vault has not been initialised."""
    return VaultStore(vault_config)


@pytest.fixture
def store(empty_store):
    """An initialised, empty vault."""
    empty_store.init()
    return empty_store


@pytest.fixture
def lookup():
    """Lookup function over a fixed set of secrets."""
    secrets = {
        "my-key": "real-secret-value",
        "other-key": "other-secret",
    }
    return secrets.get
