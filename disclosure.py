"""单个钱包私钥的显示确认门。"""

import logging
from typing import Callable, Dict

from config import LOGGER_NAME, MASK_ELLIPSIS, MASK_PREFIX_LENGTH, MASK_SUFFIX_LENGTH
from errors import InvalidCredential, RevealNotRequested
from models import DisclosureState, WalletRecord

logger = logging.getLogger(f"{LOGGER_NAME}.disclosure")


def mask_private_key(
    value: str,
    prefix: int = MASK_PREFIX_LENGTH,
    suffix: int = MASK_SUFFIX_LENGTH,
) -> str:
    """保留固定长度前后缀，中间以省略号代替；过短的值整体隐藏。"""
    if len(value) <= prefix + suffix:
        return MASK_ELLIPSIS
    return value[:prefix] + MASK_ELLIPSIS + value[len(value) - suffix:]


class DisclosureController:
    """
    按钱包 ID 维护显示状态，展示完整私钥前需要再次输入密码。

    状态只保存在这里，不写入钱包记录；某个钱包确认失败不会影响其他钱包。
    """

    def __init__(self, verifier: Callable[[str], bool]) -> None:
        self._verifier = verifier
        self._states: Dict[str, DisclosureState] = {}

    def state(self, wallet_id: str) -> DisclosureState:
        return self._states.get(wallet_id, DisclosureState.HIDDEN)

    def request_reveal(self, wallet_id: str) -> DisclosureState:
        if self.state(wallet_id) == DisclosureState.HIDDEN:
            self._states[wallet_id] = DisclosureState.PENDING_CONFIRMATION
        return self.state(wallet_id)

    def confirm_reveal(self, wallet: WalletRecord, candidate: str) -> str:
        current = self.state(wallet.wallet_id)
        if current == DisclosureState.REVEALED:
            return wallet.private_key
        if current != DisclosureState.PENDING_CONFIRMATION:
            raise RevealNotRequested("请先点击显示私钥")
        if not self._verifier(candidate):
            logger.warning("钱包 %s 私钥显示确认失败", wallet.wallet_id)
            raise InvalidCredential("密码错误")
        self._states[wallet.wallet_id] = DisclosureState.REVEALED
        logger.info("钱包 %s 私钥已显示", wallet.wallet_id)
        return wallet.private_key

    def hide(self, wallet_id: str) -> DisclosureState:
        self._states.pop(wallet_id, None)
        return DisclosureState.HIDDEN

    def masked_view(self, wallet: WalletRecord) -> str:
        return mask_private_key(wallet.private_key)

    def display_value(self, wallet: WalletRecord) -> str:
        """已确认时返回完整私钥，否则返回脱敏值。"""
        if self.state(wallet.wallet_id) == DisclosureState.REVEALED:
            return wallet.private_key
        return self.masked_view(wallet)

    def forget(self, wallet_id: str) -> None:
        self._states.pop(wallet_id, None)

    def reset(self) -> None:
        self._states.clear()
