"""
状态存储实现模块 - 全局状态后端与按 hub 合并写入的适配器。

本模块包含三个核心类：
- GlobalState：全局状态后端的抽象契约（与编辑器 memento 接口同形：get / update）
- MemoryGlobalState / JsonFileGlobalState：内存与 JSON 文件两种后端实现
- ViewStateStore：会话使用的适配器，负责 hub 级别的读取和单键合并写入

【并发约束】
write() 是 read-modify-write 操作，中间存在 await（持久化往返）。
为保证"不会观察到半合并状态"，所有写入都串行化在同一把 asyncio.Lock 之后。
"""

import asyncio
import copy
import json
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from loguru import logger

from monitorpanel.config.schema import GLOBAL_STATE_NAME
from monitorpanel.utils.helpers import ensure_dir


class GlobalState(ABC):
    """
    全局状态后端抽象基类。

    进程内共享的持久化存储，按记录名读写整条记录。
    多个功能共用同一个后端，因此实现方不得假定对任何记录拥有独占权。
    """

    @abstractmethod
    def get(self, name: str, default: Any = None) -> Any:
        """读取整条记录，不存在时返回 default。"""
        pass

    @abstractmethod
    async def update(self, name: str, value: Any) -> None:
        """用 value 整体替换记录 name 并持久化。底层存储失败时直接抛出异常。"""
        pass


class MemoryGlobalState(GlobalState):
    """基于字典的全局状态后端。用于测试和预览渲染。"""

    def __init__(self, initial: dict[str, Any] | None = None):
        self._records: dict[str, Any] = dict(initial or {})

    def get(self, name: str, default: Any = None) -> Any:
        return self._records.get(name, default)

    async def update(self, name: str, value: Any) -> None:
        self._records[name] = value


class JsonFileGlobalState(GlobalState):
    """
    基于 JSON 文件的全局状态后端。

    所有记录保存在同一个 JSON 文件中（默认 ~/.monitorpanel/global_state.json）。
    首次访问时懒加载；写入时先写临时文件再 os.replace，
    保证文件要么是旧内容要么是新内容，不会出现写了一半的文件。

    属性:
        path: 状态文件路径
        _records: 内存中的记录缓存（None 表示尚未加载）
    """

    def __init__(self, path: Path):
        self.path = path
        self._records: dict[str, Any] | None = None

    def _load(self) -> dict[str, Any]:
        if self._records is not None:
            return self._records

        self._records = {}
        if self.path.exists():
            try:
                data = json.loads(self.path.read_text(encoding="utf-8"))
                if isinstance(data, dict):
                    self._records = data
                else:
                    logger.warning(f"Ignoring state file {self.path}: top level is not an object")
            except (OSError, json.JSONDecodeError) as e:
                # 文件损坏时优雅降级，从空状态开始
                logger.warning(f"Failed to load state file {self.path}: {e}")

        return self._records

    def get(self, name: str, default: Any = None) -> Any:
        return copy.deepcopy(self._load().get(name, default))

    async def update(self, name: str, value: Any) -> None:
        records = dict(self._load())
        records[name] = value

        ensure_dir(self.path.parent)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".state-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(records, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        # 只有落盘成功后才更新缓存
        self._records = records


class ViewStateStore:
    """
    视图状态存储适配器 - 会话读写持久化状态的唯一入口。

    在全局记录 global_state_name 之下，以 hub 名为键保存每个会话的状态切片。
    写入单个键时会保留：
    - 同一 hub 切片中的其他键
    - 全局记录中属于其他 hub / 其他功能的键

    属性:
        global_state: 全局状态后端
        global_state_name: 全局记录名
    """

    def __init__(self, global_state: GlobalState, global_state_name: str = GLOBAL_STATE_NAME):
        self.global_state = global_state
        self.global_state_name = global_state_name
        self._lock = asyncio.Lock()

    def _read_global(self) -> dict[str, Any]:
        record = self.global_state.get(self.global_state_name)
        return dict(record) if isinstance(record, dict) else {}

    def read(self, hub: str) -> dict[str, Any] | None:
        """
        读取某个 hub 的持久化状态。

        参数:
            hub: hub 标识

        返回:
            该 hub 的状态字典副本，不存在时返回 None
        """
        record = self._read_global().get(hub)
        return dict(record) if isinstance(record, dict) else None

    async def write(self, hub: str, key: str, value: Any) -> None:
        """
        将 value 合并到 hub 状态的 key 字段并持久化。

        整个读-改-写过程持有锁；底层存储抛出的异常原样传播给调用方。

        参数:
            hub: hub 标识
            key: 字段名
            value: 字段值（任意可 JSON 序列化的值）
        """
        async with self._lock:
            record = self._read_global()
            hub_record = record.get(hub)
            hub_record = dict(hub_record) if isinstance(hub_record, dict) else {}
            hub_record[key] = value
            record[hub] = hub_record
            await self.global_state.update(self.global_state_name, record)

        logger.debug(f"Persisted state key '{key}' for hub {hub}")

    async def clear(self, hub: str) -> bool:
        """
        删除某个 hub 的整个状态切片。

        返回:
            True 表示确实删除了数据，False 表示原本就不存在
        """
        async with self._lock:
            record = self._read_global()
            if hub not in record:
                return False
            del record[hub]
            await self.global_state.update(self.global_state_name, record)
        return True
