"""账户密码与会话锁定状态机。"""

import hmac
import logging
from typing import Optional

from config import LOGGER_NAME, MIN_CREDENTIAL_LENGTH
from errors import AccountExists, InvalidCredential, SessionNotUnlocked, WeakCredential
from models import SessionState

logger = logging.getLogger(f"{LOGGER_NAME}.auth")


class AuthGate:
    """
    持有会话密码并决定敏感操作能否进行。

    NO_ACCOUNT --create_account--> UNLOCKED --lock--> LOCKED --authenticate--> UNLOCKED，
    任意状态 reset() 后回到 NO_ACCOUNT。
    """

    def __init__(self) -> None:
        self._credential: Optional[str] = None
        self._state = SessionState.NO_ACCOUNT

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_unlocked(self) -> bool:
        return self._state == SessionState.UNLOCKED

    def create_account(self, candidate: str) -> SessionState:
        if self._state != SessionState.NO_ACCOUNT:
            raise AccountExists("账户已存在，如需重新创建请先重置")
        if len(candidate or "") < MIN_CREDENTIAL_LENGTH:
            raise WeakCredential(f"密码长度至少为 {MIN_CREDENTIAL_LENGTH} 位")
        self._credential = candidate
        self._state = SessionState.UNLOCKED
        logger.info("账户已创建，会话已解锁")
        return self._state

    def authenticate(self, candidate: str) -> SessionState:
        if self._state == SessionState.NO_ACCOUNT:
            raise SessionNotUnlocked("尚未创建账户")
        if self._state == SessionState.UNLOCKED:
            return self._state
        if not self.verify(candidate):
            logger.warning("解锁失败：密码错误")
            raise InvalidCredential("密码错误")
        self._state = SessionState.UNLOCKED
        logger.info("会话已解锁")
        return self._state

    def verify(self, candidate: str) -> bool:
        """比对密码，不改变会话状态。"""
        if self._credential is None or candidate is None:
            return False
        return hmac.compare_digest(candidate.encode("utf-8"), self._credential.encode("utf-8"))

    def lock(self) -> SessionState:
        if self._state == SessionState.UNLOCKED:
            self._state = SessionState.LOCKED
            logger.info("会话已锁定")
        return self._state

    def reset(self) -> SessionState:
        self._credential = None
        self._state = SessionState.NO_ACCOUNT
        return self._state

    def require_unlocked(self) -> None:
        if self._state != SessionState.UNLOCKED:
            raise SessionNotUnlocked("会话未解锁")
