"""ame 日志配置

终端输出沿用 makepkg 的 "==>" 前缀风格；设置 AME_LOG_JSON=1 时改为
每行一个 JSON 对象，便于脚本消费。日志统一写 stderr，stdout 留给命令结果。

环境变量:
    AME_LOG_LEVEL  覆盖 -v 推导出的日志级别
    AME_LOG_JSON   为 "1" 时输出 JSON
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone

_PREFIXES = {
    logging.WARNING: "==> 警告: ",
    logging.ERROR: "==> 错误: ",
    logging.CRITICAL: "==> 错误: ",
}


class ConsoleFormatter(logging.Formatter):
    """终端格式: INFO 为 "==> msg"，告警/错误带级别；verbose 时附带来源模块"""

    def __init__(self, verbose: bool = False) -> None:
        super().__init__()
        self.verbose = verbose

    def format(self, record: logging.LogRecord) -> str:
        if record.levelno < logging.INFO:
            prefix = "  -> "
        else:
            prefix = _PREFIXES.get(record.levelno, "==> ")
        line = prefix + record.getMessage()
        if self.verbose:
            line = f"{line}  [{record.name}]"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


class JSONFormatter(logging.Formatter):
    """JSON 行格式

    通过 extra={"package": name} 记录的日志会带上 package 字段:
        {"time": "...", "level": "INFO", "logger": "ame.services.install_service",
         "package": "yay", "message": "安装完成: yay"}
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
        }
        package = getattr(record, "package", None)
        if package:
            entry["package"] = package
        entry["message"] = record.getMessage()
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def level_for_verbosity(verbosity: int) -> str:
    """-v 次数映射为日志级别"""
    return "DEBUG" if verbosity >= 1 else "INFO"


def setup_logging(
    verbosity: int = 0,
    *,
    level: str | None = None,
    json_output: bool | None = None,
) -> None:
    """按 -v 次数配置根日志器，显式参数优先于环境变量"""
    if level is None:
        level = os.getenv("AME_LOG_LEVEL") or level_for_verbosity(verbosity)
    if json_output is None:
        json_output = os.getenv("AME_LOG_JSON", "") == "1"

    reset_logging()
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler(sys.stderr)
    if json_output:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(ConsoleFormatter(verbose=verbosity >= 1))
    root.addHandler(handler)


def reset_logging() -> None:
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
