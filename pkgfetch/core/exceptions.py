"""统一异常体系

所有业务异常继承 PkgFetchError。
单个包级别的错误（非法路径、拉取失败）在解析器内被计数并吞下，
配置级别的错误（选项冲突、缺少参数）一路抛到 CLI 层，在解析开始前中止。
"""

from __future__ import annotations


class PkgFetchError(Exception):
    """基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(PkgFetchError):
    """配置文件缺失或内容无效"""

    code = "CONFIG_ERROR"


class ValidationError(PkgFetchError):
    """输入数据校验失败"""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.details = details or []


class InvalidVersionError(ValidationError):
    """版本描述无法解析，如 'tags:v1' 或缺少冒号"""

    code = "INVALID_VERSION"


class FetchError(PkgFetchError):
    """单个包拉取或更新失败"""

    code = "FETCH_ERROR"


class ExecutionError(PkgFetchError):
    """外部命令执行失败"""

    code = "EXECUTION_ERROR"


class OptionConflictError(PkgFetchError):
    """互斥的命令行选项被同时指定"""

    code = "OPTION_CONFLICT"

    def __init__(self, names: list[str]) -> None:
        super().__init__(
            "命令选项冲突，以下选项不能同时使用: " + " 和 ".join(names)
        )
        self.names = names


class MissingArgumentError(PkgFetchError):
    """选项缺少必需的参数"""

    code = "MISSING_ARGUMENT"
