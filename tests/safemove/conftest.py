import pytest
from fakes import FakeMailStore, make_messages

from icloud_mail_mcp.safemove.manifest import MemoryManifestStore


@pytest.fixture
def store() -> FakeMailStore:
    return FakeMailStore({"INBOX": make_messages(600), "Archive": []})


@pytest.fixture
def manifest() -> MemoryManifestStore:
    return MemoryManifestStore()
