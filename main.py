"""应用入口，负责配置日志、读取偏好并启动主窗口。"""

import logging
import sys

from PyQt5.QtWidgets import QApplication

from config import LOG_FORMAT, find_network
from main_window import MainWindow
from theme_manager import apply_theme, load_settings
from vault_session import VaultSession


def run_app() -> None:
    """启动保险库主窗口。"""
    settings = load_settings()
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)

    app = QApplication(sys.argv)
    apply_theme(app, settings.theme)

    session = VaultSession(network=find_network(settings.network))
    window = MainWindow(app=app, session=session, settings=settings)
    window.show()
    sys.exit(app.exec_())


if __name__ == "__main__":
    run_app()
