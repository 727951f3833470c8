"""网络工具 — 克隆地址构造与协议校验"""

from __future__ import annotations

from urllib.parse import urlparse

from pkgfetch.core.exceptions import ValidationError

_ALLOWED_SCHEMES = frozenset(("http", "https", "ssh", "git"))


def validate_url_scheme(url: str, *, context: str = "") -> None:
    """校验 URL 仅使用白名单协议，防止 file:// 等非预期协议访问

    Raises:
        ValidationError: URL scheme 不在白名单内
    """
    parsed = urlparse(url)
    if parsed.scheme not in _ALLOWED_SCHEMES:
        label = f" ({context})" if context else ""
        raise ValidationError(
            f"不允许的 URL 协议 '{parsed.scheme}'{label}，"
            f"仅支持 {'/'.join(sorted(_ALLOWED_SCHEMES))}: {url}"
        )


def clone_url(root_path: str, *, scheme: str = "https") -> str:
    """根据仓库根路径构造克隆地址，如 github.com/a/b -> https://github.com/a/b"""
    url = f"{scheme}://{root_path}"
    validate_url_scheme(url, context=root_path)
    return url
