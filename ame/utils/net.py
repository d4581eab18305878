"""AUR 端点地址

RPC 地址和 git 克隆根地址都来自配置文件，使用前统一检查:
只接受带主机名的 http/https 地址。
"""

from __future__ import annotations

from urllib.parse import urlparse

from ame.core.exceptions import ValidationError

_ALLOWED_SCHEMES = frozenset(("http", "https"))


def check_endpoint(url: str, *, context: str) -> str:
    """检查 AUR 端点地址，返回原地址

    Raises:
        ValidationError: 协议不是 http/https，或缺少主机名
    """
    parsed = urlparse(url)
    if parsed.scheme not in _ALLOWED_SCHEMES:
        raise ValidationError(f"{context} 地址只支持 http/https，收到 '{parsed.scheme}': {url}")
    if not parsed.netloc:
        raise ValidationError(f"{context} 地址缺少主机名: {url}")
    return url


def clone_base(url: str) -> str:
    """克隆根地址，去掉末尾的 /，拼接 <base>/<name>.git"""
    return check_endpoint(url, context="AUR clone").rstrip("/")


def repo_url(base: str, name: str) -> str:
    return f"{base}/{name}.git"
