"""工具函数。"""

from monitorpanel.utils.helpers import ensure_dir, expand_path, get_data_path, truncate_string

__all__ = ["ensure_dir", "expand_path", "get_data_path", "truncate_string"]
