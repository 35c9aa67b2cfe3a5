"""保险库会话：组合密码门、派生、钱包列表与私钥显示门。"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple, Union

from auth_gate import AuthGate
from config import DEFAULT_NETWORK, LOGGER_NAME, MNEMONIC_WORD_COUNT, NetworkConfig
from disclosure import DisclosureController
from errors import NoMasterSecret, UnknownWallet
from models import DisclosureState, MasterSecret, SessionState, WalletRecord
from wallet_registry import WalletRegistry
from wallet_service import derive_wallet, generate_master_secret

logger = logging.getLogger(f"{LOGGER_NAME}.session")

Confirmation = Union[bool, Callable[[], bool]]


@dataclass(frozen=True)
class DerivationTicket:
    """一次后台派生所需的全部输入，derive() 无副作用，可在工作线程执行。"""

    generation: int
    wallet_id: str
    derivation_path: str
    network: NetworkConfig
    master_secret: MasterSecret = field(repr=False)

    def derive(self) -> WalletRecord:
        address, private_key = derive_wallet(
            self.master_secret, self.derivation_path, self.network.chain_type
        )
        return WalletRecord(
            wallet_id=self.wallet_id,
            derivation_path=self.derivation_path,
            address=address,
            private_key=private_key,
            network=self.network.name,
            chain_type=self.network.chain_type,
        )


class VaultSession:
    """
    单用户内存保险库。

    所有状态读写都在同一把锁内完成；重新生成助记词或重置都会递增 generation，
    使正在进行的后台派生结果失效。
    """

    def __init__(
        self,
        network: NetworkConfig = DEFAULT_NETWORK,
        secret_factory: Callable[[int], MasterSecret] = generate_master_secret,
        id_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        self._lock = threading.RLock()
        self._secret_factory = secret_factory
        self._auth = AuthGate()
        self._registry = WalletRegistry(network=network, id_factory=id_factory)
        self._disclosure = DisclosureController(self._auth.verify)
        self._master_secret: Optional[MasterSecret] = None
        self._generation = 0

    # ------------------------- 会话状态 ------------------------- #
    @property
    def state(self) -> SessionState:
        return self._auth.state

    @property
    def is_unlocked(self) -> bool:
        return self._auth.is_unlocked

    @property
    def network(self) -> NetworkConfig:
        return self._registry.network

    @property
    def has_master_secret(self) -> bool:
        return self._master_secret is not None

    def create_account(self, candidate: str) -> SessionState:
        with self._lock:
            state = self._auth.create_account(candidate)
            self._discard_derived_state()
            return state

    def authenticate(self, candidate: str) -> SessionState:
        with self._lock:
            return self._auth.authenticate(candidate)

    def lock(self) -> SessionState:
        with self._lock:
            self._disclosure.reset()
            return self._auth.lock()

    def reset_all(self, confirm: Confirmation) -> bool:
        """确认后销毁密码、助记词与全部钱包；未确认时不做任何事。"""
        with self._lock:
            confirmed = confirm() if callable(confirm) else bool(confirm)
            if not confirmed:
                logger.info("已取消重置")
                return False
            self._auth.reset()
            self._discard_derived_state()
            logger.info("保险库已重置")
            return True

    # ------------------------- 助记词 ------------------------- #
    def generate_master_secret(
        self,
        network: Optional[NetworkConfig] = None,
        num_words: int = MNEMONIC_WORD_COUNT,
    ) -> MasterSecret:
        """生成新助记词并在同一步内清空旧钱包，可顺带切换网络。"""
        with self._lock:
            self._auth.require_unlocked()
            secret = self._secret_factory(num_words)
            self._discard_derived_state()
            self._master_secret = secret
            if network is not None:
                self._registry.network = network
            logger.info("已生成新的主助记词（%s），旧钱包已清空", self.network.name)
            return secret

    def master_secret_words(self) -> List[str]:
        with self._lock:
            self._auth.require_unlocked()
            if self._master_secret is None:
                raise NoMasterSecret("请先生成主助记词")
            return self._master_secret.words

    # ------------------------- 钱包列表 ------------------------- #
    def add_wallet(self) -> str:
        with self._lock:
            self._auth.require_unlocked()
            return self._registry.add_wallet(self._master_secret)

    def begin_add_wallet(self) -> DerivationTicket:
        """占用序号并返回派生任务，由调用方在工作线程执行 ticket.derive()。"""
        with self._lock:
            self._auth.require_unlocked()
            if self._master_secret is None:
                raise NoMasterSecret("请先生成主助记词")
            wallet_id, path = self._registry.reserve()
            return DerivationTicket(
                generation=self._generation,
                wallet_id=wallet_id,
                derivation_path=path,
                network=self.network,
                master_secret=self._master_secret,
            )

    def complete_add_wallet(self, ticket: DerivationTicket, wallet: WalletRecord) -> Optional[str]:
        """写回后台派生结果；助记词已更换、已重置或会话已锁定时丢弃。"""
        with self._lock:
            if ticket.generation != self._generation or not self._auth.is_unlocked:
                logger.info("丢弃过期的派生结果 %s", ticket.derivation_path)
                return None
            return self._registry.append(wallet)

    def delete_wallet(self, wallet_id: str) -> bool:
        with self._lock:
            self._auth.require_unlocked()
            self._disclosure.forget(wallet_id)
            return self._registry.delete_wallet(wallet_id)

    def list_wallets(self) -> Tuple[WalletRecord, ...]:
        """返回当前钱包的快照，锁定或增删钱包后旧快照不受影响。"""
        with self._lock:
            self._auth.require_unlocked()
            return tuple(self._registry.list())

    def get_wallet(self, wallet_id: str) -> WalletRecord:
        with self._lock:
            self._auth.require_unlocked()
            return self._require_wallet(wallet_id)

    # ------------------------- 私钥显示 ------------------------- #
    def disclosure_state(self, wallet_id: str) -> DisclosureState:
        with self._lock:
            return self._disclosure.state(wallet_id)

    def request_reveal(self, wallet_id: str) -> DisclosureState:
        with self._lock:
            self._auth.require_unlocked()
            self._require_wallet(wallet_id)
            return self._disclosure.request_reveal(wallet_id)

    def confirm_reveal(self, wallet_id: str, candidate: str) -> str:
        with self._lock:
            self._auth.require_unlocked()
            wallet = self._require_wallet(wallet_id)
            return self._disclosure.confirm_reveal(wallet, candidate)

    def hide(self, wallet_id: str) -> DisclosureState:
        with self._lock:
            return self._disclosure.hide(wallet_id)

    def masked_view(self, wallet_id: str) -> str:
        with self._lock:
            self._auth.require_unlocked()
            return self._disclosure.masked_view(self._require_wallet(wallet_id))

    def display_value(self, wallet_id: str) -> str:
        with self._lock:
            self._auth.require_unlocked()
            return self._disclosure.display_value(self._require_wallet(wallet_id))

    # ------------------------- 内部 ------------------------- #
    def _require_wallet(self, wallet_id: str) -> WalletRecord:
        wallet = self._registry.get(wallet_id)
        if wallet is None:
            raise UnknownWallet("钱包不存在或已被删除")
        return wallet

    def _discard_derived_state(self) -> None:
        self._master_secret = None
        self._registry.clear()
        self._disclosure.reset()
        self._generation += 1
