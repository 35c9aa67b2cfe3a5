"""用户偏好与主题：主题、默认网络与日志级别的持久化，以及浅色/深色 QSS。"""

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Literal

from PyQt5.QtWidgets import QApplication

from config import DEFAULT_LOG_LEVEL, DEFAULT_NETWORK, DEFAULT_THEME, LOGGER_NAME, USER_SETTINGS_FILE

logger = logging.getLogger(f"{LOGGER_NAME}.settings")

ThemeName = Literal["light", "dark"]

THEMES = ("light", "dark")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass
class UserSettings:
    """可持久化的界面偏好，不包含任何密码、助记词或私钥。"""

    theme: str = DEFAULT_THEME
    network: str = DEFAULT_NETWORK.name
    log_level: str = DEFAULT_LOG_LEVEL


def load_settings(settings_path: Path = USER_SETTINGS_FILE) -> UserSettings:
    """读取本地配置；文件缺失或损坏时返回默认值。"""
    settings = UserSettings()
    try:
        data = json.loads(settings_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return settings
    except (OSError, ValueError):
        logger.warning("配置文件 %s 无法解析，使用默认设置", settings_path)
        return settings
    if not isinstance(data, dict):
        return settings

    if data.get("theme") in THEMES:
        settings.theme = data["theme"]
    if isinstance(data.get("network"), str):
        settings.network = data["network"]
    level = str(data.get("log_level", "")).upper()
    if level in LOG_LEVELS:
        settings.log_level = level
    return settings


def save_settings(settings: UserSettings, settings_path: Path = USER_SETTINGS_FILE) -> None:
    """将偏好写入本地配置，便于下次启动还原。"""
    settings_path.write_text(json.dumps(asdict(settings), ensure_ascii=False, indent=2), encoding="utf-8")


BASE_QSS = """
* {
    font-family: "Microsoft YaHei", "PingFang SC", Arial;
    font-size: 15px;
}
#TitleLabel {
    font-size: 24px;
    font-weight: 700;
    padding: 12px;
}
#WarningLabel, #MnemonicLabel {
    border-radius: 10px;
    padding: 12px;
    font-size: 14px;
}
#MnemonicLabel {
    font-family: Consolas, "Courier New", monospace;
}
#ErrorLabel {
    font-size: 13px;
}
QPushButton {
    border: none;
    padding: 10px 14px;
    border-radius: 8px;
    font-weight: 600;
}
QLineEdit, QComboBox {
    border-radius: 8px;
    padding: 8px 10px;
}
QHeaderView::section {
    padding: 8px 10px;
    font-weight: 700;
    font-size: 14px;
}
QTableWidget {
    border-radius: 10px;
}
"""

LIGHT_QSS = """
QWidget { background: #f7f8fa; color: #1f2d3d; }
#WarningLabel { background: #fff7e6; border: 1px solid #ffd591; color: #ad6800; }
#MnemonicLabel { background: #ffffff; border: 1px solid #d9d9d9; }
#ErrorLabel { color: #cf1322; }
QPushButton { background-color: #4b7bec; color: white; }
QPushButton:hover { background-color: #3a63c7; }
QPushButton#DangerButton { background-color: #e5484d; }
QLineEdit, QComboBox { border: 1px solid #d9d9d9; background: #ffffff; }
QTableWidget { background: #ffffff; border: 1px solid #e5e7eb; gridline-color: #e5e7eb; }
QHeaderView::section { background: #f0f2f5; border: 1px solid #e5e7eb; }
QStatusBar { background: #eef2f7; color: #1f2d3d; }
"""

DARK_QSS = """
QWidget { background: #1b1f2a; color: #e8ebf0; }
#WarningLabel { background: #2a3242; border: 1px solid #3f4a60; color: #e3ad63; }
#MnemonicLabel { background: #202532; border: 1px solid #2f3849; }
#ErrorLabel { color: #ff7875; }
QPushButton { background-color: #3a7bd5; color: #e8ebf0; }
QPushButton:hover { background-color: #2f68b3; }
QPushButton#DangerButton { background-color: #b4232a; }
QLineEdit, QComboBox { border: 1px solid #3b455a; background: #1f2533; color: #e8ebf0; }
QTableWidget { background: #161b26; border: 1px solid #2f3849; gridline-color: #2f3849; }
QHeaderView::section { background: #202836; border: 1px solid #2f3849; color: #d7deea; }
QTableWidget::item:selected { background: #2f68b3; color: #ffffff; }
QStatusBar { background: #141821; color: #d7deea; }
"""


def build_stylesheet(theme: ThemeName) -> str:
    """组合基础 QSS 与主题色系。"""
    if theme == "dark":
        return BASE_QSS + DARK_QSS
    return BASE_QSS + LIGHT_QSS


def apply_theme(app: QApplication, theme: ThemeName) -> None:
    """将主题样式表应用到 QApplication。"""
    app.setStyleSheet(build_stylesheet(theme))
