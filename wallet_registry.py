"""会话内的钱包列表，维护插入顺序与只增不减的派生序号。"""

import logging
import uuid
from typing import Callable, Dict, Optional, Tuple, ValuesView

from config import DEFAULT_NETWORK, LOGGER_NAME, NetworkConfig
from errors import NoMasterSecret
from models import DerivationPath, MasterSecret, WalletRecord
from wallet_service import derive_wallet

logger = logging.getLogger(f"{LOGGER_NAME}.registry")


def _new_wallet_id() -> str:
    return uuid.uuid4().hex


class WalletRegistry:
    """
    持有当前会话派生出的全部钱包。

    删除钱包不会回退序号，同一会话内派生路径不会重复；只有 clear() 会把序号归零。
    """

    def __init__(
        self,
        network: NetworkConfig = DEFAULT_NETWORK,
        id_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        self.network = network
        self._id_factory = id_factory or _new_wallet_id
        self._wallets: Dict[str, WalletRecord] = {}
        self._next_index = 0

    @property
    def next_index(self) -> int:
        return self._next_index

    def reserve(self) -> Tuple[str, str]:
        """占用下一个序号，返回 (钱包 ID, 派生路径)。"""
        path = DerivationPath.from_template(self.network.path_template, self._next_index)
        self._next_index += 1
        return self._id_factory(), str(path)

    def append(self, wallet: WalletRecord) -> str:
        self._wallets[wallet.wallet_id] = wallet
        logger.info("已添加钱包 %s（%s）", wallet.wallet_id, wallet.derivation_path)
        return wallet.wallet_id

    def add_wallet(self, master_secret: Optional[MasterSecret]) -> str:
        """派生下一个钱包并追加到列表，返回钱包 ID。"""
        if master_secret is None:
            raise NoMasterSecret("请先生成主助记词")
        wallet_id, path = self.reserve()
        address, private_key = derive_wallet(master_secret, path, self.network.chain_type)
        return self.append(
            WalletRecord(
                wallet_id=wallet_id,
                derivation_path=path,
                address=address,
                private_key=private_key,
                network=self.network.name,
                chain_type=self.network.chain_type,
            )
        )

    def delete_wallet(self, wallet_id: str) -> bool:
        """删除指定钱包；ID 不存在时静默忽略。"""
        removed = self._wallets.pop(wallet_id, None)
        if removed is not None:
            logger.info("已删除钱包 %s", wallet_id)
        return removed is not None

    def clear(self) -> None:
        self._wallets.clear()
        self._next_index = 0

    def get(self, wallet_id: str) -> Optional[WalletRecord]:
        return self._wallets.get(wallet_id)

    def list(self) -> ValuesView[WalletRecord]:
        """按插入顺序返回可重复遍历的钱包视图。"""
        return self._wallets.values()

    def __len__(self) -> int:
        return len(self._wallets)

    def __contains__(self, wallet_id: object) -> bool:
        return wallet_id in self._wallets
