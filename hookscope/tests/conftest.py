import pytest

from hookscope.providers.credentials import Credential, StaticCredentialResolver


@pytest.fixture
def credential_resolver():
    return StaticCredentialResolver({
        "default": Credential(owner_tag="default", api_key="sk-default"),
        "sergio": Credential(owner_tag="sergio", api_key="sk-sergio"),
    })


@pytest.fixture
def work_root(tmp_path):
    root = tmp_path / "work"
    root.mkdir()
    return root
