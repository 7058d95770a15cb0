"""
设置模型 - 设置项、重载状态与快照

对应 rc 文件中的 [general] 段
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

from ..interfaces import SettingValueError

T = TypeVar("T")


class SettingName(str, Enum):
    """设置项名称"""
    DEFAULT_NUM_THREADS = "default_num_threads"   # 块处理默认线程数
    SYSTEM_CACHE_SIZE = "system_cache_size"       # 系统缓存大小（MB）


# 各设置项允许的最小值
_MIN_VALUES: dict[SettingName, int] = {
    SettingName.DEFAULT_NUM_THREADS: 1,
    SettingName.SYSTEM_CACHE_SIZE: 0,
}


def validate_setting(name: SettingName | str, value: object) -> tuple[SettingName, int]:
    """校验设置名与取值，非法时抛出 SettingValueError"""
    try:
        name = SettingName(name)
    except ValueError:
        raise SettingValueError(f"未知设置项: {name}") from None

    if isinstance(value, bool) or not isinstance(value, int):
        raise SettingValueError(f"{name.value} 必须为整数: {value!r}")
    if value < _MIN_VALUES[name]:
        raise SettingValueError(f"{name.value} 不能小于 {_MIN_VALUES[name]}: {value}")
    return name, value


class Setting(BaseModel, Generic[T]):
    """单个设置项（值 + 是否已被覆盖）"""
    value: T
    overridden: bool = False


class ReloadState(BaseModel):
    """rc 文件轮询状态"""
    rc_path: Path
    poll_period: float = Field(default=5.0, ge=0, allow_inf_nan=False)
    last_polltime: float | None = Field(default=None, description="单调时钟秒，None 表示需立即轮询")
    last_modification: float | None = Field(default=None, description="最近一次观测到的 mtime")

    def poll_due(self, now: float) -> bool:
        """是否到达轮询时间"""
        if self.last_polltime is None:
            return True
        return now - self.last_polltime >= self.poll_period


class SettingsSnapshot(BaseModel):
    """设置快照（同一把锁下读取，保证一致）"""
    default_num_threads: int
    default_num_threads_override: bool
    system_cache_size: int
    system_cache_size_override: bool


class StoreStats(BaseModel):
    """重载协议计数"""
    polls: int = 0
    stats: int = 0
    reloads: int = 0
    reload_failures: int = 0
