"""
请求总线实现模块 - 按视图划分的有序请求通道。

入站流程（面板 → 路由器）：
  宿主消息回调 → publish_request() → 该视图的 asyncio.Queue → 通道 worker → handler

【核心设计】
- 每个视图一个 asyncio.Queue + 一个 worker 任务，worker 逐条 await handler，
  从而保证同一视图内的请求按到达顺序处理
- 单条请求处理失败（例如持久化存储抛出异常）只记录错误日志并丢弃该请求，
  通道继续服务后续请求
- 关闭通道不会取消正在处理的请求；worker 在处理完当前请求后退出，
  队列中剩余的请求被丢弃
"""

import asyncio
from typing import Awaitable, Callable

from loguru import logger

from monitorpanel.bus.events import ViewRequest

RequestHandler = Callable[[ViewRequest], Awaitable[None]]


class RequestBus:
    """
    请求总线 - 为每个视图维护一条独立的有序请求通道。

    属性:
        _lanes: 请求队列字典 {view_id: asyncio.Queue}
        _workers: 通道 worker 任务字典 {view_id: asyncio.Task}
    """

    def __init__(self):
        self._lanes: dict[str, asyncio.Queue[ViewRequest | None]] = {}
        self._workers: dict[str, asyncio.Task] = {}

    def open_lane(self, view_id: str, handler: RequestHandler) -> None:
        """
        为视图打开请求通道并启动 worker。必须在事件循环中调用。

        参数:
            view_id: 视图句柄 ID
            handler: 异步请求处理函数
        """
        if view_id in self._lanes:
            raise ValueError(f"Request lane already open for view {view_id}")

        queue: asyncio.Queue[ViewRequest | None] = asyncio.Queue()
        self._lanes[view_id] = queue
        self._workers[view_id] = asyncio.create_task(self._drain(view_id, queue, handler))

    def publish_request(self, request: ViewRequest) -> bool:
        """
        发布一条入站请求到对应视图的通道。

        返回:
            True 表示已入队；视图没有打开的通道（例如已释放）时返回 False
        """
        queue = self._lanes.get(request.view_id)
        if queue is None:
            logger.warning(f"Dropping {request.method or 'malformed'} request for unknown view {request.view_id}")
            return False
        queue.put_nowait(request)
        return True

    def close_lane(self, view_id: str) -> None:
        """关闭视图的请求通道。重复关闭无副作用。"""
        queue = self._lanes.pop(view_id, None)
        self._workers.pop(view_id, None)
        if queue is not None:
            queue.put_nowait(None)  # 唤醒空闲的 worker 使其退出

    def close_all(self) -> None:
        """关闭所有通道。"""
        for view_id in list(self._lanes):
            self.close_lane(view_id)

    async def join(self, view_id: str) -> None:
        """等待视图通道中已入队的请求全部处理完毕。通道不存在时立即返回。"""
        queue = self._lanes.get(view_id)
        if queue is not None:
            await queue.join()

    async def _drain(
        self,
        view_id: str,
        queue: asyncio.Queue[ViewRequest | None],
        handler: RequestHandler,
    ) -> None:
        while True:
            request = await queue.get()
            try:
                if request is None or self._lanes.get(view_id) is not queue:
                    break
                try:
                    await handler(request)
                except Exception as e:
                    # 单条请求失败不影响通道和会话
                    logger.error(f"Error handling {request.method} request from view {view_id}: {e}")
            finally:
                queue.task_done()

        # 通道关闭后丢弃剩余请求
        dropped = 0
        while not queue.empty():
            if queue.get_nowait() is not None:
                dropped += 1
            queue.task_done()
        if dropped:
            logger.debug(f"Dropped {dropped} queued requests of closed view {view_id}")

    def is_open(self, view_id: str) -> bool:
        """视图通道是否处于打开状态。"""
        return view_id in self._lanes

    @property
    def lane_count(self) -> int:
        """当前打开的通道数量。"""
        return len(self._lanes)

    def pending(self, view_id: str) -> int:
        """视图通道中等待处理的请求数。"""
        queue = self._lanes.get(view_id)
        return queue.qsize() if queue is not None else 0
