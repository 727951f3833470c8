"""pkgfetch - 依赖包递归拉取工具"""

__version__ = "0.3.0"
