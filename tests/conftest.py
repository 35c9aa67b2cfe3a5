"""共享测试夹具。"""

import itertools

import pytest

from models import MasterSecret
from vault_session import VaultSession

# Hardhat 默认助记词，派生结果为公开的已知测试向量
KNOWN_PHRASE = "test test test test test test test test test test test junk"
KNOWN_ADDRESS_0 = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
KNOWN_KEY_0 = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
KNOWN_ADDRESS_1 = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"
KNOWN_KEY_1 = "0x59c6995e998f97a5a0044966f0945389dc9e86dae88c7a8412f4603b6b78690d"

PASSWORD = "abcd"


@pytest.fixture
def known_secret():
    return MasterSecret(phrase=KNOWN_PHRASE)


@pytest.fixture
def id_factory():
    counter = itertools.count()
    return lambda: f"w{next(counter)}"


@pytest.fixture
def session(id_factory):
    """已创建账户并解锁、尚未生成助记词的会话。"""
    vault = VaultSession(secret_factory=lambda n: MasterSecret(phrase=KNOWN_PHRASE), id_factory=id_factory)
    vault.create_account(PASSWORD)
    return vault


@pytest.fixture
def seeded_session(session):
    session.generate_master_secret()
    return session
