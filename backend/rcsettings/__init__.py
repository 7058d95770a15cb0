"""
rcsettings - 进程级运行期设置存储

模块结构：
- config/     启动配置（环境变量 / YAML）
- models/     数据模型定义
- rcfile/     rc 文件解析（~/.vwrc）
- logconf/    日志规则应用（logfile 段）
- store/      设置存储单例与轮询热加载
"""

from .store import (
    SettingsStore,
    default_num_threads,
    get_settings,
    reset_settings,
    set_settings,
    system_cache_size,
)

__version__ = "0.1.0"

__all__ = [
    "SettingsStore",
    "get_settings",
    "set_settings",
    "reset_settings",
    "default_num_threads",
    "system_cache_size",
]
