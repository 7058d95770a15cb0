"""
rc 文件解析结果模型

- LogRule: 单个 [logfile <target>] 段（目标 + 规则文本）
- SkippedLine: 被跳过的行及原因
- RcDocument: 一次解析的完整结果
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from .setting import SettingName


class LogRule(BaseModel):
    """日志规则（交由日志配置器处理）"""
    target: str = Field(..., description="日志文件路径或 console")
    rules: str = ""

    def lines(self) -> list[str]:
        return [ln.strip() for ln in self.rules.splitlines() if ln.strip()]


class SkippedLine(BaseModel):
    """跳过的行"""
    lineno: int
    text: str
    reason: str


class RcDocument(BaseModel):
    """rc 文件解析结果"""
    settings: dict[SettingName, int] = Field(default_factory=dict)
    log_rules: list[LogRule] = Field(default_factory=list)
    skipped: list[SkippedLine] = Field(default_factory=list)

    # 由设置存储在文件锁内分配，用于保证重载按顺序生效
    generation: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.settings and not self.log_rules
