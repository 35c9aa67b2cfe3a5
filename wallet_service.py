"""主助记词生成与分层确定性派生，支持 EVM 与 Solana 双链。"""

import hashlib
import hmac
import logging
from typing import Optional, Tuple

from base58 import b58encode
from eth_account import Account
from eth_keys import constants as eth_constants
from eth_keys import keys as eth_keys
from mnemonic import Mnemonic
from nacl.signing import SigningKey

from config import LOGGER_NAME, MNEMONIC_WORD_COUNT, ChainType
from errors import DerivationError
from models import HARDENED_OFFSET, DerivationPath, MasterSecret

logger = logging.getLogger(f"{LOGGER_NAME}.derivation")

# 使用标准 BIP39 英文词表的生成器
MNEMONIC_GEN = Mnemonic("english")

# 曲线阶常量
SECP256K1_N = eth_constants.SECPK1_N

# 词数与熵位数对应关系
WORDS_TO_STRENGTH = {12: 128, 15: 160, 18: 192, 21: 224, 24: 256}


def generate_master_secret(num_words: int = MNEMONIC_WORD_COUNT) -> MasterSecret:
    """使用系统安全随机源生成新的主助记词。"""
    if num_words not in WORDS_TO_STRENGTH:
        raise ValueError("助记词长度仅支持 12/15/18/21/24")
    phrase = MNEMONIC_GEN.generate(strength=WORDS_TO_STRENGTH[num_words])
    logger.debug("已生成 %d 词主助记词", num_words)
    return MasterSecret(phrase=phrase)


def _mnemonic_to_seed(master_secret: Optional[MasterSecret]) -> bytes:
    """通过 BIP39 标准将助记词转换为种子。"""
    if master_secret is None or not master_secret.phrase:
        raise DerivationError("缺少主助记词，无法派生")
    if not MNEMONIC_GEN.check(master_secret.phrase):
        raise DerivationError("助记词校验未通过")
    return MNEMONIC_GEN.to_seed(master_secret.phrase, "")


def _derive_child(private_key: bytes, chain_code: bytes, index: int, hardened: bool) -> Tuple[bytes, bytes]:
    """执行单步 BIP32 子密钥派生（secp256k1）。"""
    if hardened:
        data = b"\x00" + private_key + index.to_bytes(4, "big")
    else:
        pub_compressed = eth_keys.PrivateKey(private_key).public_key.to_compressed_bytes()
        data = pub_compressed + index.to_bytes(4, "big")
    I = hmac.new(chain_code, data, hashlib.sha512).digest()
    Il, Ir = I[:32], I[32:]
    child_int = (int.from_bytes(Il, "big") + int.from_bytes(private_key, "big")) % SECP256K1_N
    return child_int.to_bytes(32, "big"), Ir


def _derive_secp256k1_key(seed: bytes, path: DerivationPath) -> bytes:
    """从种子和路径计算最终 secp256k1 私钥。"""
    I = hmac.new(b"Bitcoin seed", seed, hashlib.sha512).digest()
    priv, chain = I[:32], I[32:]
    for index, hardened in path.segments:
        if hardened:
            index += HARDENED_OFFSET
        priv, chain = _derive_child(priv, chain, index, hardened)
    return priv


def _derive_ed25519_key(seed: bytes, path: DerivationPath) -> bytes:
    """依据 SLIP-0010 派生 ed25519 私钥种子。"""
    I = hmac.new(b"ed25519 seed", seed, hashlib.sha512).digest()
    key, chain_code = I[:32], I[32:]
    # ed25519 仅支持硬化派生，未加 ' 的段也按硬化处理
    for index, _ in path.segments:
        data = b"\x00" + key + (index | HARDENED_OFFSET).to_bytes(4, "big")
        I = hmac.new(chain_code, data, hashlib.sha512).digest()
        key, chain_code = I[:32], I[32:]
    return key


def _evm_account(seed: bytes, path: DerivationPath) -> Tuple[str, str]:
    priv_key_bytes = _derive_secp256k1_key(seed, path)
    acct = Account.from_key(priv_key_bytes)
    return acct.address, "0x" + bytes(acct.key).hex()


def _solana_account(seed: bytes, path: DerivationPath) -> Tuple[str, str]:
    signing_key = SigningKey(_derive_ed25519_key(seed, path))
    verify_key = signing_key.verify_key
    secret_key_bytes = signing_key.encode() + verify_key.encode()
    address = b58encode(bytes(verify_key)).decode("utf-8")
    return address, b58encode(secret_key_bytes).decode("utf-8")


def derive_wallet(
    master_secret: Optional[MasterSecret],
    path: str,
    chain_type: str = ChainType.EVM,
) -> Tuple[str, str]:
    """
    由主助记词与派生路径确定性地计算 (地址, 私钥)。

    :param master_secret: 主助记词，缺失或校验失败时抛出 DerivationError
    :param path: 形如 m/44'/60'/0'/0/0 的派生路径
    :param chain_type: 链类型，决定曲线与地址编码
    """
    parsed = DerivationPath.parse(path)
    seed = _mnemonic_to_seed(master_secret)
    if chain_type == ChainType.EVM:
        return _evm_account(seed, parsed)
    if chain_type == ChainType.SOLANA:
        return _solana_account(seed, parsed)
    raise DerivationError(f"未支持的链类型: {chain_type}")
