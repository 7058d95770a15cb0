"""
设置存储模块 - 单例与 rc 文件热加载

子模块：
- settings_store: SettingsStore 与全局访问函数
"""

from .settings_store import (
    SettingsStore,
    default_num_threads,
    get_settings,
    reset_settings,
    set_settings,
    system_cache_size,
)

__all__ = [
    "SettingsStore",
    "get_settings",
    "set_settings",
    "reset_settings",
    "default_num_threads",
    "system_cache_size",
]
