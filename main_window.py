"""主窗口与界面逻辑：登录页、助记词与钱包列表、私钥显示确认与主题切换。"""

import logging
from typing import Optional

from PyQt5.QtCore import Qt, QThread, pyqtSignal
from PyQt5.QtGui import QIcon
from PyQt5.QtWidgets import (
    QApplication,
    QComboBox,
    QHBoxLayout,
    QInputDialog,
    QLabel,
    QLineEdit,
    QMainWindow,
    QMenu,
    QMessageBox,
    QPushButton,
    QStackedWidget,
    QStatusBar,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from config import LOGGER_NAME, PRESET_NETWORKS, ChainType, find_network
from errors import InvalidCredential, VaultError
from models import DisclosureState, SessionState, WalletRecord
from theme_manager import ThemeName, UserSettings, apply_theme, save_settings
from vault_session import DerivationTicket, VaultSession

logger = logging.getLogger(f"{LOGGER_NAME}.ui")

DISCLOSURE_LABELS = {
    DisclosureState.HIDDEN: "已隐藏",
    DisclosureState.PENDING_CONFIRMATION: "待确认",
    DisclosureState.REVEALED: "已显示",
}


class DerivationWorker(QThread):
    """后台派生钱包的线程，只做计算，结果交回主线程写入会话。"""

    derived = pyqtSignal(object, object)
    failed = pyqtSignal(str)

    def __init__(self, ticket: DerivationTicket, parent=None):
        super().__init__(parent)
        self.ticket = ticket
        self.finished.connect(self.deleteLater)

    def run(self) -> None:
        try:
            wallet = self.ticket.derive()
            self.derived.emit(self.ticket, wallet)
        except Exception as exc:  # noqa: BLE001
            self.failed.emit(str(exc))


class MainWindow(QMainWindow):
    """主窗口，只通过 VaultSession 访问敏感数据。"""

    def __init__(self, app: QApplication, session: VaultSession, settings: UserSettings) -> None:
        super().__init__()
        self.app = app
        self.session = session
        self.settings = settings
        self.worker: Optional[DerivationWorker] = None

        self.setWindowTitle("Web3 Vault - 本地分层钱包保险库")
        self.setMinimumSize(1100, 760)
        self.setWindowIcon(QIcon())  # 可在打包时替换为品牌图标

        self._setup_ui()
        self._init_menu()
        self._show_current_page()
        self._set_status("本地离线运行，准备就绪")

    # ------------------------- UI 构建 ------------------------- #
    def _setup_ui(self) -> None:
        """搭建登录页与仪表盘两个页面。"""
        self.pages = QStackedWidget(self)
        self.setCentralWidget(self.pages)
        self.auth_page = self._build_auth_page()
        self.dashboard_page = self._build_dashboard_page()
        self.pages.addWidget(self.auth_page)
        self.pages.addWidget(self.dashboard_page)

        self.status_bar = QStatusBar()
        self.setStatusBar(self.status_bar)

    def _build_auth_page(self) -> QWidget:
        page = QWidget()
        layout = QVBoxLayout(page)
        layout.setAlignment(Qt.AlignCenter)

        self.auth_title = QLabel()
        self.auth_title.setObjectName("TitleLabel")
        self.auth_title.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.auth_title)

        self.auth_hint = QLabel()
        self.auth_hint.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.auth_hint)

        self.password_input = QLineEdit()
        self.password_input.setEchoMode(QLineEdit.Password)
        self.password_input.setFixedWidth(360)
        self.password_input.returnPressed.connect(self._submit_password)
        layout.addWidget(self.password_input, alignment=Qt.AlignCenter)

        self.auth_error = QLabel()
        self.auth_error.setObjectName("ErrorLabel")
        self.auth_error.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.auth_error)

        self.auth_btn = QPushButton()
        self.auth_btn.clicked.connect(self._submit_password)
        layout.addWidget(self.auth_btn, alignment=Qt.AlignCenter)

        self.forgot_btn = QPushButton("忘记密码？重置保险库")
        self.forgot_btn.setObjectName("DangerButton")
        self.forgot_btn.clicked.connect(self._reset_vault)
        layout.addWidget(self.forgot_btn, alignment=Qt.AlignCenter)
        return page

    def _build_dashboard_page(self) -> QWidget:
        page = QWidget()
        main_layout = QVBoxLayout(page)

        top_layout = QHBoxLayout()
        title = QLabel("Web3 Vault")
        title.setObjectName("TitleLabel")
        top_layout.addWidget(title)
        top_layout.addStretch()
        self.lock_btn = QPushButton("锁定")
        self.lock_btn.clicked.connect(self._lock_vault)
        top_layout.addWidget(self.lock_btn)
        self.reset_btn = QPushButton("重置")
        self.reset_btn.setObjectName("DangerButton")
        self.reset_btn.clicked.connect(self._reset_vault)
        top_layout.addWidget(self.reset_btn)
        main_layout.addLayout(top_layout)

        warning = QLabel("安全提醒：请妥善保管助记词和私钥，不要截图或分享。本工具仅在内存中保存，关闭即丢失。")
        warning.setWordWrap(True)
        warning.setObjectName("WarningLabel")
        main_layout.addWidget(warning)

        seed_layout = QHBoxLayout()
        seed_layout.setAlignment(Qt.AlignLeft)
        self.network_combo = QComboBox()
        for net in PRESET_NETWORKS:
            self.network_combo.addItem(net.name)
        self.network_combo.setCurrentText(self.session.network.name)
        seed_layout.addWidget(QLabel("网络"))
        seed_layout.addWidget(self.network_combo)
        self.seed_btn = QPushButton()
        self.seed_btn.clicked.connect(self._generate_seed)
        seed_layout.addWidget(self.seed_btn)
        self.add_btn = QPushButton("添加钱包")
        self.add_btn.clicked.connect(self._add_wallet)
        seed_layout.addWidget(self.add_btn)
        seed_layout.addStretch()
        main_layout.addLayout(seed_layout)

        self.mnemonic_label = QLabel()
        self.mnemonic_label.setObjectName("MnemonicLabel")
        self.mnemonic_label.setWordWrap(True)
        self.mnemonic_label.setTextInteractionFlags(Qt.TextSelectableByMouse)
        main_layout.addWidget(self.mnemonic_label)

        self.table = QTableWidget(0, 6)
        self.table.setHorizontalHeaderLabels(["操作", "序号", "地址", "派生路径", "私钥", "状态"])
        self.table.setSelectionBehavior(QTableWidget.SelectRows)
        self.table.setEditTriggers(QTableWidget.NoEditTriggers)
        self.table.horizontalHeader().setStretchLastSection(True)
        self.table.verticalHeader().setVisible(False)
        main_layout.addWidget(self.table)
        return page

    def _init_menu(self) -> None:
        """初始化菜单栏（主题切换）。"""
        menu_bar = self.menuBar()
        view_menu: QMenu = menu_bar.addMenu("视图")
        theme_menu = view_menu.addMenu("主题")

        self.light_action = theme_menu.addAction("浅色模式")
        self.dark_action = theme_menu.addAction("深色模式")
        self.light_action.setCheckable(True)
        self.dark_action.setCheckable(True)

        self.light_action.triggered.connect(lambda: self._switch_theme("light"))
        self.dark_action.triggered.connect(lambda: self._switch_theme("dark"))

        self._refresh_theme_actions()

    # ------------------------- 页面切换 ------------------------- #
    def _show_current_page(self) -> None:
        """根据会话状态决定显示登录页还是仪表盘。"""
        state = self.session.state
        if state == SessionState.UNLOCKED:
            self.pages.setCurrentWidget(self.dashboard_page)
            self._refresh_dashboard()
            return
        has_account = state == SessionState.LOCKED
        self.auth_title.setText("欢迎回来" if has_account else "创建保险库")
        self.auth_hint.setText("输入密码解锁钱包。" if has_account else "设置一个密码来保护你的钱包。")
        self.password_input.setPlaceholderText("输入密码" if has_account else "创建密码（至少 4 位）")
        self.auth_btn.setText("解锁" if has_account else "创建并进入")
        self.forgot_btn.setVisible(has_account)
        self.password_input.clear()
        self.pages.setCurrentWidget(self.auth_page)

    def _refresh_dashboard(self) -> None:
        has_secret = self.session.has_master_secret
        self.seed_btn.setText("重新生成助记词" if has_secret else "生成助记词")
        self.add_btn.setEnabled(has_secret and self.worker is None)
        if has_secret:
            words = self.session.master_secret_words()
            self.mnemonic_label.setText("   ".join(f"{i}. {w}" for i, w in enumerate(words, start=1)))
        else:
            self.mnemonic_label.setText("尚未生成助记词")
        self._refresh_table()

    def _refresh_table(self) -> None:
        """根据当前钱包列表刷新表格。"""
        wallets = list(self.session.list_wallets())
        self.table.setRowCount(len(wallets))
        for row, w in enumerate(wallets):
            self.table.setCellWidget(row, 0, self._build_action_buttons(w))
            items = [
                (1, QTableWidgetItem(str(w.index))),
                (2, QTableWidgetItem(w.address)),
                (3, QTableWidgetItem(w.derivation_path)),
                (4, QTableWidgetItem(self.session.display_value(w.wallet_id))),
                (5, QTableWidgetItem(DISCLOSURE_LABELS[self.session.disclosure_state(w.wallet_id)])),
            ]
            for col, item in items:
                item.setFlags(item.flags() & ~Qt.ItemIsEditable)
                self.table.setItem(row, col, item)
        self.table.resizeColumnsToContents()
        self.table.horizontalHeader().setStretchLastSection(True)

    def _build_action_buttons(self, wallet: WalletRecord) -> QWidget:
        """为指定钱包创建操作按钮组。"""
        container = QWidget()
        layout = QHBoxLayout(container)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(6)

        revealed = self.session.disclosure_state(wallet.wallet_id) == DisclosureState.REVEALED
        btn_key = QPushButton("隐藏私钥" if revealed else "显示私钥")
        if revealed:
            btn_key.clicked.connect(lambda _, wid=wallet.wallet_id: self._hide_key(wid))
        else:
            btn_key.clicked.connect(lambda _, wid=wallet.wallet_id: self._reveal_key(wid))
        layout.addWidget(btn_key)

        btn_addr = QPushButton("复制地址")
        btn_addr.setToolTip("复制钱包地址到剪贴板")
        btn_addr.clicked.connect(lambda _, addr=wallet.address: self._copy_address(addr))
        layout.addWidget(btn_addr)

        btn_del = QPushButton("删除")
        btn_del.setObjectName("DangerButton")
        btn_del.clicked.connect(lambda _, wid=wallet.wallet_id: self._delete_wallet(wid))
        layout.addWidget(btn_del)

        layout.addStretch()
        return container

    # ------------------------- 事件与逻辑 ------------------------- #
    def _submit_password(self) -> None:
        """创建账户或解锁。"""
        candidate = self.password_input.text()
        try:
            if self.session.state == SessionState.NO_ACCOUNT:
                self.session.create_account(candidate)
            else:
                self.session.authenticate(candidate)
        except VaultError as exc:
            self.auth_error.setText(str(exc))
            self.password_input.clear()
            return
        self.auth_error.clear()
        self._show_current_page()

    def _lock_vault(self) -> None:
        self.session.lock()
        self._show_current_page()
        self._set_status("已锁定")

    def _reset_vault(self) -> None:
        """重置前弹窗确认，确认后销毁全部数据。"""

        def _confirm() -> bool:
            answer = QMessageBox.question(
                self,
                "确认重置",
                "确定要重置吗？密码、助记词与所有钱包将被永久删除。",
                QMessageBox.Yes | QMessageBox.No,
                QMessageBox.No,
            )
            return answer == QMessageBox.Yes

        if self.session.reset_all(_confirm):
            self.auth_error.clear()
            self._show_current_page()
            self._set_status("保险库已重置")

    def _generate_seed(self) -> None:
        """生成或重新生成助记词，会清空现有钱包。"""
        if self.session.has_master_secret and len(self.session.list_wallets()) > 0:
            answer = QMessageBox.question(
                self,
                "重新生成",
                "重新生成助记词会清空当前所有钱包，是否继续？",
                QMessageBox.Yes | QMessageBox.No,
                QMessageBox.No,
            )
            if answer != QMessageBox.Yes:
                return
        network = find_network(self.network_combo.currentText())
        try:
            self.session.generate_master_secret(network=network)
        except VaultError as exc:
            QMessageBox.warning(self, "生成失败", str(exc))
            return
        self.settings.network = network.name
        save_settings(self.settings)
        self._refresh_dashboard()
        self._set_status(f"已生成新的助记词（{self._display_chain_type(network.chain_type)}）")

    def _add_wallet(self) -> None:
        """在后台线程派生下一个钱包。"""
        try:
            ticket = self.session.begin_add_wallet()
        except VaultError as exc:
            QMessageBox.warning(self, "添加失败", str(exc))
            return
        self.add_btn.setEnabled(False)
        self._set_status(f"正在派生 {ticket.derivation_path}…")

        self.worker = DerivationWorker(ticket, parent=self)
        self.worker.derived.connect(self._on_derived)
        self.worker.failed.connect(self._on_failed)
        self.worker.start()

    def _on_derived(self, ticket: DerivationTicket, wallet: WalletRecord) -> None:
        """派生完成后在主线程写回会话。"""
        self.worker = None
        wallet_id = self.session.complete_add_wallet(ticket, wallet)
        if wallet_id is None:
            self._set_status("派生结果已过期，已丢弃")
        else:
            self._set_status(f"已添加钱包 {wallet.derivation_path}")
        if self.session.is_unlocked:
            self._refresh_dashboard()

    def _on_failed(self, message: str) -> None:
        """错误处理。"""
        self.worker = None
        logger.error("后台派生失败: %s", message)
        QMessageBox.critical(self, "派生失败", message)
        self._set_status("派生失败")
        if self.session.is_unlocked:
            self._refresh_dashboard()

    def _delete_wallet(self, wallet_id: str) -> None:
        try:
            self.session.delete_wallet(wallet_id)
        except VaultError as exc:
            QMessageBox.warning(self, "删除失败", str(exc))
            return
        self._refresh_table()
        self._set_status("已删除钱包")

    def _reveal_key(self, wallet_id: str) -> None:
        """再次输入密码后显示完整私钥；取消则恢复隐藏。"""
        try:
            self.session.request_reveal(wallet_id)
        except VaultError as exc:
            QMessageBox.warning(self, "无法显示", str(exc))
            return
        self._refresh_table()

        candidate, ok = QInputDialog.getText(self, "确认密码", "请输入密码以显示私钥：", QLineEdit.Password)
        if not ok:
            self.session.hide(wallet_id)
        else:
            try:
                self.session.confirm_reveal(wallet_id, candidate)
            except InvalidCredential as exc:
                QMessageBox.warning(self, "密码错误", str(exc))
            except VaultError as exc:
                QMessageBox.warning(self, "无法显示", str(exc))
        self._refresh_table()

    def _hide_key(self, wallet_id: str) -> None:
        self.session.hide(wallet_id)
        self._refresh_table()

    def _copy_address(self, address: str) -> None:
        QApplication.clipboard().setText(address)
        self._set_status("地址已复制到剪贴板")

    def _set_status(self, text: str) -> None:
        """更新底部状态文本。"""
        self.status_bar.showMessage(text, 3000)

    # ------------------------- 主题 ------------------------- #
    def _switch_theme(self, theme: ThemeName) -> None:
        """切换主题并持久化。"""
        if theme == self.settings.theme:
            self._refresh_theme_actions()
            return
        self.settings.theme = theme
        apply_theme(self.app, theme)
        save_settings(self.settings)
        self._refresh_theme_actions()
        self._set_status("已切换为深色模式" if theme == "dark" else "已切换为浅色模式")

    def _refresh_theme_actions(self) -> None:
        """同步菜单勾选状态。"""
        self.light_action.setChecked(self.settings.theme == "light")
        self.dark_action.setChecked(self.settings.theme == "dark")

    @staticmethod
    def _display_chain_type(chain_type: str) -> str:
        """将内部链类型值转换为中文标签。"""
        return "Solana 链" if chain_type == ChainType.SOLANA else "EVM 链"
