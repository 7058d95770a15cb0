"""
日志配置模块 - 处理 rc 文件中的 [logfile ...] 段
"""

from .configurator import CONSOLE_TARGET, LogConfigurator

__all__ = [
    "LogConfigurator",
    "CONSOLE_TARGET",
]
