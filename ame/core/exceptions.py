"""统一异常体系

所有业务异常继承 AmeError，替代散落的 ValueError / RuntimeError。
CLI 层据此输出友好提示，并以 exit_code 作为进程退出码。

严格程度:
  - 依赖图正确性相关 (NotFoundError / ServiceError) → 中止整批安装
  - 单包构建相关 (CloneError / BuildError) → 清理工作目录后中止整批
  - UserCancelled → 预期内的终止，不按错误记录
"""

from __future__ import annotations


class AmeError(Exception):
    """基础异常"""

    code: str = "UNKNOWN"
    exit_code: int = 63

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(AmeError):
    """配置文件缺失或内容无效"""

    code = "CONFIG_ERROR"
    exit_code = 12


class ValidationError(AmeError):
    """输入数据校验失败"""

    code = "VALIDATION_ERROR"
    exit_code = 2

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.details = details or []


class DependencyError(AmeError):
    """依赖解析失败"""

    code = "DEPENDENCY_ERROR"
    exit_code = 7


class NotFoundError(DependencyError):
    """包名在官方仓库和 AUR 中均无法解析"""

    code = "NOT_FOUND"

    def __init__(self, message: str, *, package: str = "", missing: list[str] | None = None) -> None:
        super().__init__(message)
        self.package = package
        self.missing = missing or []


class DependencyCycleError(DependencyError):
    """依赖链中出现环"""

    code = "DEPENDENCY_CYCLE"

    def __init__(self, message: str, chain: list[str] | None = None) -> None:
        super().__init__(message)
        self.chain = chain or []


class ServiceError(AmeError):
    """AUR 元数据服务不可达或返回异常内容（区别于“未找到”）"""

    code = "SERVICE_ERROR"
    exit_code = 13


class CloneError(AmeError):
    """拉取包源码失败"""

    code = "CLONE_ERROR"
    exit_code = 10


class BuildError(AmeError):
    """makepkg 构建失败"""

    code = "BUILD_ERROR"
    exit_code = 11

    def __init__(self, message: str, *, package: str = "") -> None:
        super().__init__(message)
        self.package = package


class InstallError(AmeError):
    """pacman 安装或卸载返回失败"""

    code = "INSTALL_ERROR"
    exit_code = 9


class DatabaseError(AmeError):
    """本地安装数据库读写失败"""

    code = "DATABASE_ERROR"
    exit_code = 4


class UserCancelled(AmeError):
    """用户审阅 PKGBUILD 后放弃安装"""

    code = "USER_CANCELLED"
    exit_code = 8
