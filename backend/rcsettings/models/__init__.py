"""
数据模型层 - 定义系统核心数据结构

- Setting / SettingName: 设置项与名称
- ReloadState: rc 文件轮询状态
- SettingsSnapshot / StoreStats: 快照与计数
- RcDocument / LogRule / SkippedLine: rc 文件解析结果
"""

from .rc_document import LogRule, RcDocument, SkippedLine
from .setting import (
    ReloadState,
    Setting,
    SettingName,
    SettingsSnapshot,
    StoreStats,
    validate_setting,
)

__all__ = [
    "Setting",
    "SettingName",
    "ReloadState",
    "SettingsSnapshot",
    "StoreStats",
    "validate_setting",
    "RcDocument",
    "LogRule",
    "SkippedLine",
]
