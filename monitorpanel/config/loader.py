"""
配置文件读写 (config/loader.py)

config.json 面向用户，键名使用 camelCase（与渲染端、宿主设置保持一致）；
Python 侧的模型字段使用 snake_case。读入时整棵树转换为 snake_case，
写出时再转换回 camelCase。

文件不存在或内容非法都不会阻止启动：记录警告，回退到默认配置
（环境变量覆盖依然生效）。
"""

import json
import re
from pathlib import Path
from typing import Any, Callable

from loguru import logger
from pydantic import ValidationError

from monitorpanel.config.schema import Config
from monitorpanel.utils.helpers import ensure_dir, get_data_path

CONFIG_FILE_NAME = "config.json"

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def get_config_path() -> Path:
    """默认配置文件：~/.monitorpanel/config.json"""
    return get_data_path() / CONFIG_FILE_NAME


def load_config(config_path: Path | None = None) -> Config:
    """
    加载配置。

    参数:
        config_path: 配置文件路径，None 表示默认路径

    返回:
        Config 实例；文件缺失、不是合法 JSON 或字段校验失败时返回默认配置
    """
    path = config_path or get_config_path()
    if not path.exists():
        logger.debug(f"No config file at {path}, using defaults")
        return Config()

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        return Config.model_validate(convert_keys(raw))
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        logger.warning(f"Failed to load config from {path}: {e}. Using default configuration.")
        return Config()


def save_config(config: Config, config_path: Path | None = None) -> Path:
    """把配置以 camelCase 键名写入 JSON 文件，返回写入的路径。"""
    path = config_path or get_config_path()
    ensure_dir(path.parent)
    payload = convert_to_camel(config.model_dump(mode="json"))
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    return path


def _rename_keys(data: Any, rename: Callable[[str], str]) -> Any:
    if isinstance(data, dict):
        return {rename(k): _rename_keys(v, rename) for k, v in data.items()}
    if isinstance(data, list):
        return [_rename_keys(v, rename) for v in data]
    return data


def convert_keys(data: Any) -> Any:
    """递归地把 camelCase 键名转为 snake_case：{"showTimeAs": ...} → {"show_time_as": ...}"""
    return _rename_keys(data, camel_to_snake)


def convert_to_camel(data: Any) -> Any:
    """convert_keys 的逆操作。"""
    return _rename_keys(data, snake_to_camel)


def camel_to_snake(name: str) -> str:
    # "timeoutS" → "timeout_s"
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def snake_to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)
