"""Test configuration for pytest."""
import pytest

from franzpy.config.credentials import CredentialResolver
from franzpy.config.store import ContextStore


@pytest.fixture
def config_path(tmp_path):
    """Location of a configuration document inside a temp directory."""
    return tmp_path / ".franz" / "config"


@pytest.fixture
def store(config_path):
    """ContextStore backed by a temp file."""
    return ContextStore(config_path)


@pytest.fixture
def env():
    """Mutable fake environment for credential resolution."""
    return {}


@pytest.fixture
def home_dir(tmp_path):
    home = tmp_path / "home"
    home.mkdir()
    return home


@pytest.fixture
def credential_resolver(home_dir, env):
    """CredentialResolver isolated from the real home directory and environment."""
    return CredentialResolver(home_dir=str(home_dir), env_provider=env.get)


@pytest.fixture
def sample_document_yaml():
    """A document covering a plain context and a SCRAM context."""
    return """\
apiVersion: v1
current-context: local
contexts:
- name: local
  cluster: local
- name: prod
  cluster: prod
  auth: prod-sasl
clusters:
- name: local
  bootstrap-servers: localhost:9092
- name: prod
  bootstrap-servers: broker1:9093,broker2:9093
auth-configs:
- name: prod-sasl
  security-protocol: SASL_SSL
  sasl:
    mechanism: SCRAM-SHA-512
    username: admin
    password: secret
  kafka-properties:
    client.id: franzpy
"""
