"""服务层

- pacman.py: 官方包管理器封装（查询 / 安装 / 卸载）
- workspace.py: 构建工作目录（git clone + 保证释放）
- makepkg.py: makepkg 构建
- review.py: PKGBUILD 审阅交互
- install_service.py: 递归构建安装流水线
- purge_service.py: 卸载与缓存清理
- container.py: 服务容器
"""
