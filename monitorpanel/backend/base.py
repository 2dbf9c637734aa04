"""
后端协作者抽象基类。

被监控后端进程的启动、端口分配等生命周期管理不在本包范围内，
会话只依赖下面这个最小契约：请求进，结果出。
"""

from abc import ABC, abstractmethod
from typing import Any

# 需要透传给后端的请求方法集合
PROXY_METHODS = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE"})


class Backend(ABC):
    """后端协作者契约。"""

    @abstractmethod
    async def request(self, hub: str, method: str, url: str, data: Any = None) -> Any:
        """
        执行一次透传请求。

        参数:
            hub: 发起请求的会话所属 hub
            method: HTTP 动词
            url: 相对于该 hub 的请求路径（如 "/orchestrations?top=100"）
            data: 请求体（可选，原样发送）

        返回:
            后端返回的数据（不做解释）

        异常:
            BackendError: 传输失败、后端返回错误状态码或响应体无法解析
        """
        pass

    async def close(self) -> None:
        """释放后端占用的资源（如连接池）。默认无操作。"""
        return None
