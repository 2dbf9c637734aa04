"""
配置系统入口。

- schema.py：Pydantic 配置模型（view / state / backend 三个分组，以及不可变的 RuntimeConfig）
- loader.py：读写 ~/.monitorpanel/config.json，文件中使用 camelCase 键名
"""

from monitorpanel.config.loader import get_config_path, load_config, save_config
from monitorpanel.config.schema import Config, RuntimeConfig

__all__ = ["Config", "RuntimeConfig", "load_config", "save_config", "get_config_path"]
