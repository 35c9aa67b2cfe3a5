"""全局配置，提供预设网络、派生路径模板、保险库参数与用户设置文件路径。"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional


class ChainType:
    """链类型字符串枚举，决定派生算法与地址格式。"""

    EVM = "EVM"
    SOLANA = "Solana"


@dataclass(frozen=True)
class NetworkConfig:
    """网络配置模型，仅用于选择派生路径与地址格式，不会联网。"""

    name: str
    chain_type: str
    chain_id: Optional[int] = None
    derivation_path_template: Optional[str] = None

    @property
    def path_template(self) -> str:
        if self.derivation_path_template:
            return self.derivation_path_template
        if self.chain_type == ChainType.SOLANA:
            return DERIVATION_PATH_TEMPLATE_SOL
        return DERIVATION_PATH_TEMPLATE_EVM


# 默认 BIP44 派生路径模板
DERIVATION_PATH_TEMPLATE_EVM = "m/44'/60'/0'/0/{index}"
# Solana 采用全硬化路径，默认形式 m/44'/501'/0'/0'/{index}'
DERIVATION_PATH_TEMPLATE_SOL = "m/44'/501'/0'/0'/{index}'"

# 预设网络列表，EVM 系列共用 coin type 60
PRESET_NETWORKS: List[NetworkConfig] = [
    NetworkConfig(name="Ethereum", chain_type=ChainType.EVM, chain_id=1),
    NetworkConfig(name="BNB Smart Chain", chain_type=ChainType.EVM, chain_id=56),
    NetworkConfig(name="Polygon", chain_type=ChainType.EVM, chain_id=137),
    NetworkConfig(name="Arbitrum One", chain_type=ChainType.EVM, chain_id=42161),
    NetworkConfig(name="Optimism", chain_type=ChainType.EVM, chain_id=10),
    NetworkConfig(name="Sepolia Testnet", chain_type=ChainType.EVM, chain_id=11155111),
    NetworkConfig(
        name="Solana",
        chain_type=ChainType.SOLANA,
        derivation_path_template=DERIVATION_PATH_TEMPLATE_SOL,
    ),
]

DEFAULT_NETWORK = PRESET_NETWORKS[0]


def find_network(name: str) -> NetworkConfig:
    """按名称查找预设网络，找不到时回退到默认网络。"""
    for net in PRESET_NETWORKS:
        if net.name == name:
            return net
    return DEFAULT_NETWORK


# 账户密码最小长度
MIN_CREDENTIAL_LENGTH = 4

# 主助记词默认词数
MNEMONIC_WORD_COUNT = 12

# 私钥脱敏展示时保留的前后缀长度
MASK_PREFIX_LENGTH = 6
MASK_SUFFIX_LENGTH = 4
MASK_ELLIPSIS = "..."

# 日志
LOGGER_NAME = "vault"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DEFAULT_LOG_LEVEL = "INFO"

# 主题与设置存储位置（不保存任何密码、助记词或私钥）
DEFAULT_THEME = "light"
USER_SETTINGS_FILE = Path(os.environ.get("VAULT_SETTINGS_FILE", "user_settings.json"))
