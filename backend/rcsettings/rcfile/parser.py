"""
rc 文件解析器 - 解析 ~/.vwrc

文件格式（按行）：
    # 注释
    [general]
    default_num_threads = 8
    system_cache_size = 2048

    [logfile console]
    DEBUG = rcsettings.store
    WARNING = *

    [logfile /tmp/vw_log.txt]
    INFO = *

规则：
1. 文件开头默认处于 [general] 段；行首或空白后的 # 起为注释
2. [general] 段内为 key = value 设置指令，后出现的同名指令覆盖先出现的
3. [logfile <target>] 段内各行原样收集为日志规则文本，由日志配置器解释
4. 格式错误或取值非法的行跳过，不影响其余行

测试要点：
- test_parse_settings: 设置指令解析
- test_parse_log_sections: 日志段收集
- test_skip_malformed: 错误行跳过
"""

from __future__ import annotations

import logging
import re

from ..interfaces import IRcParser, RcParseError, SettingValueError
from ..models import LogRule, RcDocument, SettingName, SkippedLine, validate_setting

logger = logging.getLogger(__name__)

# 设置指令别名（小写）
SETTING_ALIASES: dict[str, SettingName] = {
    "default_num_threads": SettingName.DEFAULT_NUM_THREADS,
    "num_threads": SettingName.DEFAULT_NUM_THREADS,
    "thread_count": SettingName.DEFAULT_NUM_THREADS,
    "system_cache_size": SettingName.SYSTEM_CACHE_SIZE,
    "cache_size": SettingName.SYSTEM_CACHE_SIZE,
}

_SECTION_RE = re.compile(r"^\[\s*(?P<kind>[A-Za-z_]+)(?:\s+(?P<arg>[^\]]*?))?\s*\]$")
_ASSIGN_RE = re.compile(r"^(?P<key>[^=\s]+)\s*=\s*(?P<value>\S.*)$")
_COMMENT_RE = re.compile(r"(?:^|\s)#.*$")


class RcFileParser(IRcParser):
    """rc 文件解析器实现"""

    def parse(self, text: str) -> RcDocument:
        """解析 rc 文件全文"""
        doc = RcDocument()
        section: LogRule | None = None  # None 表示 [general]
        in_unknown = False  # 未知段内的行一律跳过

        for lineno, raw in enumerate(text.splitlines(), start=1):
            line = self._strip_comment(raw)
            if not line:
                continue

            try:
                if line.startswith("["):
                    in_unknown = True
                    section = self._parse_section(line)
                    in_unknown = False
                    if section is not None:
                        doc.log_rules.append(section)
                elif in_unknown:
                    raise RcParseError("位于未知段内")
                elif section is not None:
                    section.rules += line + "\n"
                else:
                    name, value = self._parse_assignment(line)
                    doc.settings[name] = value
            except (RcParseError, SettingValueError) as e:
                logger.warning(f"rc 第 {lineno} 行已跳过: {e}")
                doc.skipped.append(SkippedLine(lineno=lineno, text=raw, reason=str(e)))

        return doc

    @staticmethod
    def _strip_comment(raw: str) -> str:
        """行首或空白后的 # 起为注释，路径中的 # 保留"""
        return _COMMENT_RE.sub("", raw).strip()

    @staticmethod
    def _parse_section(line: str) -> LogRule | None:
        """解析段头，返回新的日志段；[general] 返回 None"""
        match = _SECTION_RE.match(line)
        if not match:
            raise RcParseError(f"段头格式错误: {line}")

        kind = match.group("kind").lower()
        arg = (match.group("arg") or "").strip()
        if kind == "general" and not arg:
            return None
        if kind == "logfile" and arg:
            return LogRule(target=arg)
        raise RcParseError(f"未知段: {line}")

    @staticmethod
    def _parse_assignment(line: str) -> tuple[SettingName, int]:
        """解析 key = value 设置指令"""
        match = _ASSIGN_RE.match(line)
        if not match:
            raise RcParseError(f"指令格式错误: {line}")

        key = match.group("key").lower()
        if key not in SETTING_ALIASES:
            raise RcParseError(f"未知设置项: {key}")

        text = match.group("value").strip()
        try:
            value = int(text)
        except ValueError:
            raise SettingValueError(f"{key} 必须为整数: {text}") from None

        return validate_setting(SETTING_ALIASES[key], value)
