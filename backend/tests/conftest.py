"""
pytest 配置与公共 fixtures

使用方式：
    def test_something(store, write_rc, fake_clock):
        write_rc("cache_size = 2048")
        fake_clock.advance(10)
        assert store.system_cache_size() == 2048
"""

from __future__ import annotations

import itertools
import os
import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest

from rcsettings.config import DefaultsConfig, StoreConfig
from rcsettings.interfaces import ILogConfigurator
from rcsettings.models import LogRule
from rcsettings.store import SettingsStore, reset_settings


# ============================================================================
# 辅助类
# ============================================================================

class FakeClock:
    """可手动推进的单调时钟"""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingLogConfigurator(ILogConfigurator):
    """记录每次 apply 的日志配置器"""

    def __init__(self):
        self.calls: list[list[LogRule]] = []

    def apply(self, rules: list[LogRule]) -> None:
        self.calls.append(list(rules))


# ============================================================================
# 文件 Fixtures
# ============================================================================

@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """临时目录"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def rc_path(temp_dir: Path) -> Path:
    """rc 文件路径（默认不存在）"""
    return temp_dir / ".vwrc"


@pytest.fixture
def write_rc(rc_path: Path) -> Callable[..., Path]:
    """写入 rc 文件并设置递增的 mtime（避免文件系统时间精度影响）"""
    mtimes = itertools.count(1_700_000_000, 10)

    def _write(text: str, mtime: float | None = None, path: Path | None = None) -> Path:
        target = path or rc_path
        target.write_text(text, encoding="utf-8")
        stamp = next(mtimes) if mtime is None else mtime
        os.utime(target, (stamp, stamp))
        return target

    return _write


# ============================================================================
# 设置存储 Fixtures
# ============================================================================

@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def recording_log_configurator() -> RecordingLogConfigurator:
    return RecordingLogConfigurator()


@pytest.fixture
def store_config(rc_path: Path) -> StoreConfig:
    """测试用启动配置"""
    return StoreConfig(
        rc_path=rc_path,
        poll_period=5.0,
        defaults=DefaultsConfig(num_threads=4, cache_size_mb=1024),
    )


@pytest.fixture
def store(
    store_config: StoreConfig,
    fake_clock: FakeClock,
    recording_log_configurator: RecordingLogConfigurator,
) -> SettingsStore:
    """注入假时钟与记录型日志配置器的设置存储"""
    return SettingsStore(
        store_config,
        clock=fake_clock,
        log_configurator=recording_log_configurator,
    )


@pytest.fixture
def clean_global_store() -> Generator[None, None, None]:
    """隔离全局单例"""
    reset_settings()
    yield
    reset_settings()
