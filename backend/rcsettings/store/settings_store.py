"""
设置存储 - 进程级单例，按需轮询 rc 文件并热加载

职责：
1. 提供线程数/缓存大小的类型化读写
2. 每次读取前执行 轮询门 → stat 检查 → 重载
3. rc 文件缺失或损坏时保持现有设置，不向调用方抛错

锁约定（各锁互不嵌套）：
- _polltime_lock: 仅保护 last_polltime 与轮询周期
- _file_lock:     保护 stat + 读取 + 解析，同一时刻至多一个线程访问文件
- _settings_lock: 保护设置值与覆盖标记
- _log_lock:      保护日志规则转交顺序（叶子锁，仅在设置锁释放后获取）

测试要点：
- test_poll_rate_limited: 轮询周期内至多 stat 一次
- test_reload_on_mtime_change: mtime 变化触发重载
- test_explicit_set_after_reload: 最近一次写入生效
- test_missing_file_keeps_settings: 文件删除后设置不变
- test_concurrent_access: 并发读写无撕裂
"""

from __future__ import annotations

import logging
import math
import os
import threading
import time
from pathlib import Path
from typing import Callable

from ..config import StoreConfig, get_config
from ..interfaces import (
    ILogConfigurator,
    IRcParser,
    RcSettingsError,
    SettingValueError,
    StoreInitError,
)
from ..logconf import LogConfigurator
from ..models import (
    RcDocument,
    ReloadState,
    Setting,
    SettingName,
    SettingsSnapshot,
    StoreStats,
    validate_setting,
)
from ..rcfile import RcFileParser

logger = logging.getLogger(__name__)


class SettingsStore:
    """设置存储实现

    请通过 get_settings() 获取进程级实例；直接构造仅用于测试或嵌入场景。
    """

    def __init__(
        self,
        config: StoreConfig | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
        parser: IRcParser | None = None,
        log_configurator: ILogConfigurator | None = None,
    ):
        config = config or StoreConfig()
        self._clock = clock
        self._parser = parser or RcFileParser()
        self._log_configurator = log_configurator or LogConfigurator()

        # 设置项
        self._num_threads = Setting[int](value=config.defaults.num_threads)
        self._cache_size = Setting[int](value=config.defaults.cache_size_mb)

        # rc 文件轮询状态
        self._state = ReloadState(
            rc_path=config.resolved_rc_path(),
            poll_period=config.poll_period,
        )
        self._generation = 0          # 文件锁内递增
        self._applied_generation = 0  # 设置锁内更新
        self._log_generation = 0      # 日志锁内更新
        self._stats = StoreStats()

        self._polltime_lock = threading.Lock()
        self._file_lock = threading.Lock()
        self._settings_lock = threading.Lock()
        self._log_lock = threading.Lock()

    # ------------------------------------------------------------------
    # 重载配置
    # ------------------------------------------------------------------

    @property
    def rc_path(self) -> Path:
        with self._file_lock:
            return self._state.rc_path

    @property
    def poll_period(self) -> float:
        with self._polltime_lock:
            return self._state.poll_period

    @property
    def stats(self) -> StoreStats:
        """重载协议计数（副本）

        各计数分别在其所属阶段的锁内读取，单个计数准确，
        但不同阶段之间不保证是同一时刻的值。
        """
        with self._polltime_lock:
            polls = self._stats.polls
        with self._file_lock:
            stats = self._stats.stats
            reload_failures = self._stats.reload_failures
        with self._settings_lock:
            reloads = self._stats.reloads
        return StoreStats(
            polls=polls,
            stats=stats,
            reloads=reloads,
            reload_failures=reload_failures,
        )

    def set_rc_path(self, path: str | Path) -> None:
        """更换 rc 文件路径（默认 ~/.vwrc），并立即检查新文件"""
        path = Path(path).expanduser()
        with self._file_lock:
            self._state.rc_path = path
            self._state.last_modification = None
        with self._polltime_lock:
            self._state.last_polltime = None
        logger.info(f"rc 文件路径已更新: {path}")
        self._poll()

    def set_poll_period(self, period: float) -> None:
        """修改 rc 文件最小轮询周期（默认 5 秒），并立即检查文件

        文件只在读取设置时才会被轮询，该值是两次检查之间的最小间隔。
        """
        if (
            isinstance(period, bool)
            or not isinstance(period, (int, float))
            or not math.isfinite(period)
            or period < 0
        ):
            raise SettingValueError(f"轮询周期必须为有限非负数: {period!r}")
        with self._polltime_lock:
            self._state.poll_period = float(period)
            self._state.last_polltime = None
        self._poll()

    # ------------------------------------------------------------------
    # 设置读写
    # ------------------------------------------------------------------

    def get(self, name: SettingName | str) -> int:
        """读取设置（可能触发 rc 文件重载）"""
        setting = self._setting(name)
        self._poll()
        with self._settings_lock:
            return setting.value

    def set(self, name: SettingName | str, value: int) -> None:
        """写入设置并标记为已覆盖（不触发轮询）"""
        name, value = validate_setting(name, value)
        setting = self._setting(name)
        with self._settings_lock:
            setting.value = value
            setting.overridden = True

    def is_overridden(self, name: SettingName | str) -> bool:
        setting = self._setting(name)
        self._poll()
        with self._settings_lock:
            return setting.overridden

    def snapshot(self) -> SettingsSnapshot:
        """一致性快照"""
        self._poll()
        with self._settings_lock:
            return SettingsSnapshot(
                default_num_threads=self._num_threads.value,
                default_num_threads_override=self._num_threads.overridden,
                system_cache_size=self._cache_size.value,
                system_cache_size_override=self._cache_size.overridden,
            )

    def default_num_threads(self) -> int:
        """块处理默认线程数"""
        return self.get(SettingName.DEFAULT_NUM_THREADS)

    def set_default_num_threads(self, num: int) -> None:
        self.set(SettingName.DEFAULT_NUM_THREADS, num)

    def system_cache_size(self) -> int:
        """系统缓存大小（MB）"""
        return self.get(SettingName.SYSTEM_CACHE_SIZE)

    def set_system_cache_size(self, size: int) -> None:
        """设置系统缓存大小，单位 MB"""
        self.set(SettingName.SYSTEM_CACHE_SIZE, size)

    def _setting(self, name: SettingName | str) -> Setting[int]:
        try:
            name = SettingName(name)
        except ValueError:
            raise SettingValueError(f"未知设置项: {name}") from None
        if name is SettingName.DEFAULT_NUM_THREADS:
            return self._num_threads
        return self._cache_size

    # ------------------------------------------------------------------
    # 轮询 → stat → 重载
    # ------------------------------------------------------------------

    def _poll(self) -> None:
        """轮询门：未到周期直接返回"""
        now = self._clock()
        with self._polltime_lock:
            if not self._state.poll_due(now):
                return
            self._state.last_polltime = now
            self._stats.polls += 1

        doc = self._stat_rc()
        if doc is not None:
            self._reload(doc)

    def _stat_rc(self) -> RcDocument | None:
        """检查 rc 文件 mtime，变化时读取并解析"""
        with self._file_lock:
            path = self._state.rc_path
            self._stats.stats += 1
            try:
                mtime = os.stat(path).st_mtime
            except OSError as e:
                logger.debug(f"rc 文件不可用，保持当前设置: {path}: {e}")
                return None

            last = self._state.last_modification
            if last is not None and mtime <= last:
                return None
            self._state.last_modification = mtime

            try:
                text = path.read_text(encoding="utf-8")
                doc = self._parser.parse(text)
            except (OSError, UnicodeDecodeError, RcSettingsError) as e:
                self._stats.reload_failures += 1
                logger.warning(f"rc 文件读取失败，保持当前设置: {path}: {e}")
                return None

            self._generation += 1
            doc.generation = self._generation
            return doc

    def _reload(self, doc: RcDocument) -> None:
        """应用解析结果（设置锁内），日志规则在锁外转交日志配置器"""
        if doc.is_empty:
            logger.debug("rc 文件无有效指令，保持当前设置")
            return

        with self._settings_lock:
            if doc.generation <= self._applied_generation:
                return
            self._applied_generation = doc.generation
            for name, value in doc.settings.items():
                setting = self._setting(name)
                setting.value = value
                setting.overridden = True
            self._stats.reloads += 1

        applied = ", ".join(f"{k.value}={v}" for k, v in doc.settings.items()) or "无设置指令"
        logger.info(f"rc 文件已重载: {applied}（跳过 {len(doc.skipped)} 行）")

        self._apply_log_rules(doc)

    def _apply_log_rules(self, doc: RcDocument) -> None:
        """转交日志规则（日志锁内，过期代次丢弃）"""
        with self._log_lock:
            if doc.generation <= self._log_generation:
                return
            self._log_generation = doc.generation
            try:
                self._log_configurator.apply(doc.log_rules)
            except Exception as e:
                logger.warning(f"日志规则应用失败: {e}")


# ============================================================================
# 全局实例
# ============================================================================

_store: SettingsStore | None = None
_store_lock = threading.Lock()


def get_settings() -> SettingsStore:
    """获取进程级设置存储（惰性构造，并发首次调用只构造一次）

    示例：
        get_settings().set_system_cache_size(2048)
    """
    global _store
    store = _store
    if store is None:
        with _store_lock:
            if _store is None:
                _store = _build_store()
            store = _store
    return store


def set_settings(store: SettingsStore) -> None:
    """替换全局实例（测试注入）"""
    global _store
    with _store_lock:
        _store = store


def reset_settings() -> None:
    """清除全局实例，下次访问时重新构造"""
    global _store
    with _store_lock:
        _store = None


def default_num_threads() -> int:
    return get_settings().default_num_threads()


def system_cache_size() -> int:
    return get_settings().system_cache_size()


def _build_store() -> SettingsStore:
    try:
        return SettingsStore(get_config())
    except (ValueError, RuntimeError, KeyError, OSError) as e:
        logger.critical(f"设置存储构造失败: {e}")
        raise StoreInitError(f"设置存储构造失败: {e}") from e
