"""
通用辅助函数：数据目录与路径处理、日志用的字符串截断。
"""

from pathlib import Path

DATA_DIR_NAME = ".monitorpanel"


def ensure_dir(path: Path) -> Path:
    """递归创建目录（已存在时什么也不做），返回该路径。"""
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_path() -> Path:
    """monitorpanel 的数据目录 ~/.monitorpanel。只计算路径，不创建目录。"""
    return Path.home() / DATA_DIR_NAME


def expand_path(value: str | Path) -> Path:
    """展开配置中的路径：支持 ~ 前缀，不要求路径存在。"""
    return Path(value).expanduser()


def truncate_string(s: str, max_len: int = 100, suffix: str = "...") -> str:
    """
    截断过长的字符串。

    请求载荷可能很大（例如整张 SVG、带查询串的长 URL），记录日志时只保留开头部分。
    """
    if len(s) <= max_len:
        return s
    return s[: max_len - len(suffix)] + suffix
