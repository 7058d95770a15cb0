"""
模块接口契约 - 定义各模块的抽象接口

设计原则：
1. 设置存储通过接口调用 rc 解析器与日志配置器，不直接依赖具体实现
2. 便于单元测试和mock替换

使用方式：
    from rcsettings.interfaces import ILogConfigurator

    class RecordingConfigurator(ILogConfigurator):
        def apply(self, rules: list[LogRule]) -> None:
            ...
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import LogRule, RcDocument


# ============================================================================
# rc 文件接口
# ============================================================================

class IRcParser(ABC):
    """rc 文件解析器接口"""

    @abstractmethod
    def parse(self, text: str) -> RcDocument:
        """
        解析 rc 文件文本

        单行格式错误或取值非法时跳过该行，不中断整体解析。

        Args:
            text: 文件全文

        Returns:
            解析结果（设置指令 + 日志规则 + 跳过的行）
        """
        ...


class ILogConfigurator(ABC):
    """日志配置器接口 - 处理 [logfile ...] 段"""

    @abstractmethod
    def apply(self, rules: list[LogRule]) -> None:
        """
        应用日志规则（替换上一次应用的规则）

        Args:
            rules: rc 文件中的全部日志规则
        """
        ...


# ============================================================================
# 异常定义
# ============================================================================

class RcSettingsError(Exception):
    """基础异常"""
    pass


class RcParseError(RcSettingsError):
    """rc 行解析错误"""
    pass


class SettingValueError(RcSettingsError, ValueError):
    """设置取值非法"""
    pass


class StoreInitError(RcSettingsError):
    """设置存储构造失败"""
    pass
