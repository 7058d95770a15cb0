"""
日志配置器 - 将 rc 文件中的 [logfile ...] 段应用到 logging

规则行格式：
    <level> = <logger>

- level: DEBUG/INFO/WARNING/ERROR/CRITICAL 或整数
- logger: 点分 logger 名称，* 表示根 logger
- 目标 console 输出到 stderr，其余目标视为日志文件路径

每次 apply 会先移除上一次安装的 handler 并恢复 logger 原级别，
因此重复应用同一份规则结果一致。
"""

from __future__ import annotations

import logging
import sys
import threading

from ..interfaces import ILogConfigurator, RcParseError
from ..models import LogRule

logger = logging.getLogger(__name__)

CONSOLE_TARGET = "console"
DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class LogConfigurator(ILogConfigurator):
    """日志配置器实现"""

    def __init__(self, fmt: str = DEFAULT_FORMAT):
        self._formatter = logging.Formatter(fmt)
        self._lock = threading.Lock()
        self._installed: list[tuple[logging.Logger, logging.Handler]] = []
        self._saved_levels: dict[str, int] = {}

    @property
    def installed(self) -> list[tuple[logging.Logger, logging.Handler]]:
        return list(self._installed)

    def apply(self, rules: list[LogRule]) -> None:
        """应用日志规则（替换上一次应用的规则）"""
        with self._lock:
            self._uninstall()
            for rule in rules:
                for line in rule.lines():
                    try:
                        level, target_logger = self._parse_rule_line(line)
                    except RcParseError as e:
                        logger.warning(f"日志规则已跳过 [{rule.target}]: {e}")
                        continue
                    self._install(rule.target, level, target_logger)

    def clear(self) -> None:
        """移除全部已安装的 handler"""
        with self._lock:
            self._uninstall()

    def _install(self, target: str, level: int, target_logger: logging.Logger) -> None:
        try:
            handler = self._make_handler(target)
        except OSError as e:
            logger.warning(f"无法打开日志目标 {target}: {e}")
            return

        handler.setLevel(level)
        handler.setFormatter(self._formatter)

        if target_logger.name not in self._saved_levels:
            self._saved_levels[target_logger.name] = target_logger.level
        if target_logger.getEffectiveLevel() > level:
            target_logger.setLevel(level)

        target_logger.addHandler(handler)
        self._installed.append((target_logger, handler))

    def _uninstall(self) -> None:
        for target_logger, handler in self._installed:
            target_logger.removeHandler(handler)
            handler.close()
        self._installed.clear()

        for name, level in self._saved_levels.items():
            logging.getLogger(None if name == "root" else name).setLevel(level)
        self._saved_levels.clear()

    @staticmethod
    def _make_handler(target: str) -> logging.Handler:
        if target.lower() == CONSOLE_TARGET:
            return logging.StreamHandler(sys.stderr)
        return logging.FileHandler(target, encoding="utf-8")

    @staticmethod
    def _parse_rule_line(line: str) -> tuple[int, logging.Logger]:
        """解析 <level> = <logger>"""
        if "=" not in line:
            raise RcParseError(f"规则格式错误: {line}")

        level_text, name = (part.strip() for part in line.split("=", 1))
        if not level_text or not name:
            raise RcParseError(f"规则格式错误: {line}")

        if level_text.lstrip("-").isdigit():
            level = int(level_text)
        else:
            level = logging.getLevelName(level_text.upper())
            if not isinstance(level, int):
                raise RcParseError(f"未知日志级别: {level_text}")
        if level < 0:
            raise RcParseError(f"日志级别不能为负: {level_text}")

        return level, logging.getLogger(None if name == "*" else name)
