"""
请求总线模块 - 实现面板消息与路由器之间的解耦通信。

消息流向：
  面板脚本 → Panel.on_did_receive_message → ViewRequest → 请求总线（按视图分通道）→ 路由器
  路由器回复 → Panel.post_message（单向推送，不经过总线）

每个视图拥有独立的请求通道（lane）：同一视图的请求严格按到达顺序处理，
不同视图的请求互不阻塞，可以交错执行。

【Java 开发者类比】
- 每个 lane 类似于一个单线程的 ExecutorService（保证同一来源的任务顺序）
- ViewRequest 类似于一个入站 DTO
"""

from monitorpanel.bus.events import ViewRequest
from monitorpanel.bus.queue import RequestBus

__all__ = ["RequestBus", "ViewRequest"]
