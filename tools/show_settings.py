"""
查看当前生效的设置（可持续观察 rc 文件热加载效果）。

示例：
    python tools/show_settings.py
    python tools/show_settings.py --rc ~/.vwrc --poll-period 1 --watch 2
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path


def _add_backend_to_path() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    backend_root = repo_root / "backend"
    if str(backend_root) not in sys.path:
        sys.path.insert(0, str(backend_root))


def main() -> int:
    parser = argparse.ArgumentParser(description="Show live rc settings.")
    parser.add_argument("--config", default="", help="可选：启动配置 YAML")
    parser.add_argument("--rc", default="", help="rc 文件路径（默认：~/.vwrc）")
    parser.add_argument("--poll-period", type=float, default=None, help="轮询周期（秒）")
    parser.add_argument("--watch", type=float, default=0.0, help="每隔 N 秒打印一次，0 表示只打印一次")
    args = parser.parse_args()

    _add_backend_to_path()
    from rcsettings import get_settings
    from rcsettings.config import reload_config
    from rcsettings.interfaces import RcSettingsError

    try:
        config = reload_config(args.config or None)
        logging.basicConfig(level=config.logging.log_level)
        settings = get_settings()
        if args.rc:
            settings.set_rc_path(args.rc)
        if args.poll_period is not None:
            settings.set_poll_period(args.poll_period)
    except (RcSettingsError, ValueError) as exc:
        print(f"设置存储初始化失败: {exc}", file=sys.stderr)
        return 1

    print(f"rc: {settings.rc_path}")
    while True:
        print(json.dumps(settings.snapshot().model_dump(), ensure_ascii=False))
        if args.watch <= 0:
            return 0
        try:
            time.sleep(args.watch)
        except KeyboardInterrupt:
            return 0


if __name__ == "__main__":
    raise SystemExit(main())
