"""
rc 文件模块 - 行格式解析

子模块：
- parser: [general] 设置指令与 [logfile] 日志段解析
"""

from .parser import SETTING_ALIASES, RcFileParser

__all__ = [
    "RcFileParser",
    "SETTING_ALIASES",
]
