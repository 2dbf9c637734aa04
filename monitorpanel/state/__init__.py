"""
持久化状态模块 - 按 hub 划分的视图状态存储。

存储结构：
    所有数据保存在一条全局记录（GLOBAL_STATE_NAME）中，
    每个 hub 的视图状态是该记录下以 hub 名为键的子对象：

    {
        "my-hub": {"myKey": "..."},      ← 本会话的状态切片
        "someOtherFeature": {...}        ← 其他功能的数据，不得被覆盖
    }

【Java 开发者类比】
- GlobalState 类似于一个只有 get/put 的 KeyValueRepository 接口
- ViewStateStore.write() 类似于带悲观锁的 read-modify-write 事务
"""

from monitorpanel.state.store import (
    GlobalState,
    JsonFileGlobalState,
    MemoryGlobalState,
    ViewStateStore,
)

__all__ = ["GlobalState", "JsonFileGlobalState", "MemoryGlobalState", "ViewStateStore"]
