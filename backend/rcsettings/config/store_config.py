"""
启动配置 - 设置存储构造时使用的默认值

职责：
- 提供线程数/缓存大小的内置默认值
- 提供 rc 文件路径与轮询周期
- 提供环境变量覆盖机制（RCSETTINGS_ 前缀）
- 可选读取 YAML 启动配置
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


class DefaultsConfig(BaseModel):
    """设置项内置默认值"""

    num_threads: int = Field(default_factory=lambda: os.cpu_count() or 1, ge=1)
    cache_size_mb: int = Field(default=1024, ge=0)


class LoggingConfig(BaseModel):
    """日志配置"""

    log_level: str = "INFO"


class StoreConfig(BaseSettings):
    """设置存储启动配置（支持环境变量覆盖）"""

    # rc 文件
    app_name: str = "vw"
    rc_path: Path | None = None
    poll_period: float = Field(default=5.0, ge=0, allow_inf_nan=False)

    # 各子配置
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {
        "env_prefix": "RCSETTINGS_",
        "env_nested_delimiter": "__",
    }

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> StoreConfig:
        """从YAML文件加载配置"""
        path = Path(yaml_path)
        if not path.exists():
            return cls()

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        section = data.get("rcsettings", {}) or {}

        kwargs: dict[str, Any] = {}
        for key in ("app_name", "rc_path", "poll_period"):
            value = cls._scalar(section.get(key))
            if value is not None:
                kwargs[key] = value

        config = cls(
            defaults=DefaultsConfig(**cls._extract(section, "defaults")),
            logging=LoggingConfig(**cls._extract(section, "logging")),
            **kwargs,
        )

        config._resolve_paths(base_dir=path.parent)
        return config

    @staticmethod
    def _scalar(value: Any) -> Any:
        if isinstance(value, dict):
            return value.get("default")
        return value

    @staticmethod
    def _extract(data: dict[str, Any], key: str) -> dict[str, Any]:
        """提取并展平配置"""
        section = data.get(key, {}) or {}
        result = {}
        for k, v in section.items():
            if isinstance(v, dict) and "default" in v:
                result[k] = v["default"]
            elif not isinstance(v, dict):
                result[k] = v
        return result

    def _resolve_paths(self, base_dir: Path) -> None:
        """解析相对路径配置为绝对路径（基于配置文件所在目录）"""
        if self.rc_path is None:
            return
        rc_path = self.rc_path.expanduser()
        if not rc_path.is_absolute():
            rc_path = (base_dir / rc_path).resolve()
        self.rc_path = rc_path

    def resolved_rc_path(self) -> Path:
        """获取 rc 文件路径（默认 ~/.<app_name>rc）"""
        if self.rc_path is not None:
            return self.rc_path.expanduser()
        return Path.home() / f".{self.app_name}rc"


# 全局配置实例
_config: StoreConfig | None = None


def get_config() -> StoreConfig:
    """获取全局配置（惰性加载）"""
    global _config
    if _config is None:
        _config = StoreConfig()
    return _config


def reload_config(yaml_path: str | Path | None = None) -> StoreConfig:
    """重新加载配置"""
    global _config
    _config = StoreConfig.from_yaml(yaml_path) if yaml_path else StoreConfig()
    return _config
