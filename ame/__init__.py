"""ame - pacman 辅助工具，支持从 AUR 构建安装软件包"""

__version__ = "0.4.0"
