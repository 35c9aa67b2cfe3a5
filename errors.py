"""保险库错误类型，均为可恢复的本地错误，由界面捕获后提示用户。"""


class VaultError(Exception):
    """所有保险库预期错误的基类。"""


class WeakCredential(VaultError):
    """密码长度不足。"""


class InvalidCredential(VaultError):
    """密码与当前账户不匹配。"""


class SessionNotUnlocked(VaultError):
    """会话未解锁（未创建账户或已锁定）。"""


class NoMasterSecret(VaultError):
    """尚未生成主助记词。"""


class DerivationError(VaultError):
    """助记词缺失/无效或派生路径格式错误。"""


class AccountExists(VaultError):
    """账户已存在，需先重置才能重新创建。"""


class UnknownWallet(VaultError):
    """钱包不存在或已被删除。"""


class RevealNotRequested(VaultError):
    """未发起显示私钥请求就提交了确认。"""
