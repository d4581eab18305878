"""AUR 元数据查询

通过 AUR RPC 接口按包名查询元数据:
  - info:   精确查询，返回 PackageMetadata 或 None（未找到）
  - search: 关键字搜索

“未找到”与“服务异常”严格区分：网络错误、非 JSON 响应、
RPC 返回 type=error 均抛 ServiceError，绝不当作未找到处理。
"""

from __future__ import annotations

import json
import logging
import re
import urllib.error
import urllib.request
from typing import Any
from urllib.parse import urlencode

from ame.core.exceptions import ServiceError
from ame.core.models import PackageMetadata
from ame.utils.net import check_endpoint

logger = logging.getLogger(__name__)

RPC_VERSION = "5"

# 依赖串中的版本约束: foo>=1.2 / foo=1.0 / foo<2
_CONSTRAINT_RE = re.compile(r"[<>=]")


def strip_constraint(dep: str) -> str:
    """去掉依赖串中的版本约束，只保留包名"""
    return _CONSTRAINT_RE.split(dep, maxsplit=1)[0].strip()


def _names(values: Any) -> tuple[str, ...]:
    if not values:
        return ()
    if not isinstance(values, list):
        raise ServiceError(f"依赖字段格式异常: {values!r}")
    result = [strip_constraint(str(v)) for v in values]
    return tuple(dict.fromkeys(n for n in result if n))


def parse_package(entry: dict[str, Any]) -> PackageMetadata:
    """把 RPC 结果中的单个条目转换为 PackageMetadata"""
    name = entry.get("Name")
    if not isinstance(name, str) or not name:
        raise ServiceError(f"RPC 结果缺少 Name 字段: {entry!r}")
    return PackageMetadata(
        name=name,
        version=str(entry.get("Version") or ""),
        description=str(entry.get("Description") or ""),
        runtime_depends=_names(entry.get("Depends")),
        build_depends=_names(entry.get("MakeDepends")),
    )


class MetadataLookup:
    """AUR RPC 客户端（只读查询，无副作用）"""

    def __init__(self, rpc_url: str, timeout: int = 30) -> None:
        self.rpc_url = check_endpoint(rpc_url, context="AUR RPC")
        self.timeout = timeout

    def info(self, name: str) -> PackageMetadata | None:
        """精确查询单个包，未找到返回 None"""
        body = self._request([("v", RPC_VERSION), ("type", "info"), ("arg[]", name)])
        results = body["results"]
        if not results:
            logger.debug("AUR 未找到: %s", name)
            return None
        for entry in results:
            if isinstance(entry, dict) and entry.get("Name") == name:
                return parse_package(entry)
        if not isinstance(results[0], dict):
            raise ServiceError(f"RPC 结果格式异常: {results[0]!r}")
        return parse_package(results[0])

    def search(self, term: str) -> list[PackageMetadata]:
        """按关键字搜索，结果按包名排序"""
        body = self._request([("v", RPC_VERSION), ("type", "search"), ("arg", term)])
        packages = [parse_package(e) for e in body["results"] if isinstance(e, dict)]
        return sorted(packages, key=lambda p: p.name)

    def _request(self, params: list[tuple[str, str]]) -> dict[str, Any]:
        url = f"{self.rpc_url}?{urlencode(params)}"
        logger.debug("RPC 请求: %s", url)
        req = urllib.request.Request(url, headers={"Accept": "application/json"})
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:  # nosec B310
                raw = resp.read()
        except (urllib.error.URLError, OSError) as e:
            raise ServiceError(f"AUR RPC 请求失败: {e}") from e

        try:
            body = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ServiceError(f"AUR RPC 返回非 JSON 内容: {e}") from e

        if not isinstance(body, dict):
            raise ServiceError(f"AUR RPC 返回格式异常: {type(body).__name__}")
        if body.get("type") == "error":
            raise ServiceError(f"AUR RPC 报告错误: {body.get('error', 'unknown')}")
        results = body.get("results")
        if not isinstance(results, list):
            raise ServiceError("AUR RPC 响应缺少 results 列表")
        return body
