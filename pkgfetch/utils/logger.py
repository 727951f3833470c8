"""pkgfetch 日志配置

命令行默认输出简洁的 "级别 消息" 文本；设置 PKGFETCH_LOG_JSON=1 时每行一个 JSON 对象，
供 CI 收集。跳过提示等细节走 DEBUG 级别，由 --verbose 打开。
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone

LEVEL_ENV = "PKGFETCH_LOG_LEVEL"
JSON_ENV = "PKGFETCH_LOG_JSON"

_TEXT_FORMAT = "%(asctime)s %(levelname)-5s %(message)s"
_DEBUG_TEXT_FORMAT = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d %(message)s"


class JSONFormatter(logging.Formatter):
    """每条记录一行 JSON

        {"timestamp": "...", "level": "INFO", "logger": "pkgfetch.core.dep.resolver",
         "message": "SUCC GET github.com/a/b@branch:", "line": 98}
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "line": record.lineno,
        }
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def setup_logging(level: str = "INFO", json_output: bool = False) -> None:
    """配置根日志器，输出到 stderr（stdout 留给运行汇总）

    重复调用会先移除已有 handler，不会重复输出。
    无法识别的级别名按 INFO 处理。
    """
    reset_logging()
    root = logging.getLogger()
    numeric = getattr(logging, level.upper(), None)
    root.setLevel(numeric if isinstance(numeric, int) else logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    if json_output:
        handler.setFormatter(JSONFormatter())
    else:
        fmt = _DEBUG_TEXT_FORMAT if root.level <= logging.DEBUG else _TEXT_FORMAT
        handler.setFormatter(logging.Formatter(fmt, datefmt="%H:%M:%S"))
    root.addHandler(handler)


def setup_logging_from_env() -> None:
    """按 PKGFETCH_LOG_LEVEL / PKGFETCH_LOG_JSON 配置日志"""
    setup_logging(
        level=os.getenv(LEVEL_ENV, "INFO"),
        json_output=os.getenv(JSON_ENV, "") == "1",
    )


def set_verbose(verbose: bool) -> None:
    """-v 开启时将根日志器降到 DEBUG"""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


def reset_logging() -> None:
    """移除并关闭根日志器上的全部 handler"""
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
