"""数据模型定义，包含会话状态、主助记词、派生路径与钱包记录。"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple

from config import ChainType
from errors import DerivationError

HARDENED_OFFSET = 0x80000000


class SessionState(Enum):
    """会话状态：未创建账户 / 已锁定 / 已解锁。"""

    NO_ACCOUNT = "no_account"
    LOCKED = "locked"
    UNLOCKED = "unlocked"


class DisclosureState(Enum):
    """单个钱包私钥的显示状态，仅存在于内存中。"""

    HIDDEN = "hidden"
    PENDING_CONFIRMATION = "pending_confirmation"
    REVEALED = "revealed"


@dataclass(frozen=True)
class MasterSecret:
    """主助记词，repr 中不展示内容。"""

    phrase: str = field(repr=False)

    @property
    def words(self) -> List[str]:
        return self.phrase.split()

    def __str__(self) -> str:
        return f"MasterSecret(<{len(self.words)} words>)"


@dataclass(frozen=True)
class DerivationPath:
    """BIP32 派生路径，segments 为 (索引, 是否硬化) 序列。"""

    segments: Tuple[Tuple[int, bool], ...]

    @classmethod
    def parse(cls, path: str) -> "DerivationPath":
        """解析 m/44'/60'/0'/0/0 形式的路径，格式不合法时抛出 DerivationError。"""
        if not isinstance(path, str):
            raise DerivationError("派生路径必须为字符串")
        parts = path.strip().split("/")
        if parts[0] != "m" or len(parts) < 2:
            raise DerivationError(f"派生路径格式错误: {path!r}")
        segments = []
        for seg in parts[1:]:
            hardened = seg.endswith("'")
            digits = seg[:-1] if hardened else seg
            if not (digits.isascii() and digits.isdecimal()):
                raise DerivationError(f"派生路径格式错误: {path!r}")
            index = int(digits)
            if index >= HARDENED_OFFSET:
                raise DerivationError(f"派生索引越界: {seg}")
            segments.append((index, hardened))
        return cls(segments=tuple(segments))

    @classmethod
    def from_template(cls, template: str, index: int) -> "DerivationPath":
        return cls.parse(template.format(index=index))

    @property
    def index(self) -> int:
        """路径最后一段的索引，即钱包序号。"""
        return self.segments[-1][0]

    def __str__(self) -> str:
        parts = ["m"]
        for index, hardened in self.segments:
            parts.append(f"{index}'" if hardened else str(index))
        return "/".join(parts)


@dataclass(frozen=True)
class WalletRecord:
    """单个派生钱包记录，私钥不参与 repr。"""

    wallet_id: str
    derivation_path: str
    address: str
    private_key: str = field(repr=False)
    network: str = ""
    chain_type: str = ChainType.EVM

    @property
    def index(self) -> int:
        return DerivationPath.parse(self.derivation_path).index

    def is_solana(self) -> bool:
        """是否为 Solana 链记录。"""
        return self.chain_type == ChainType.SOLANA
