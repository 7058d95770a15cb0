"""
配置层 - 设置存储的启动配置

职责：
- 提供默认值（线程数/缓存大小/轮询周期/rc 文件路径）
- 提供环境变量覆盖机制（RCSETTINGS_ 前缀）
- 可选从 YAML 加载启动配置
"""

from .store_config import DefaultsConfig, LoggingConfig, StoreConfig, get_config, reload_config

__all__ = [
    "StoreConfig",
    "DefaultsConfig",
    "LoggingConfig",
    "get_config",
    "reload_config",
]
