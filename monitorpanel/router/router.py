"""
消息路由器实现模块 (router/router.py)

模块职责：
    维护"方法名 → 处理器"的路由表，提供注册、注销、分发能力。
    是请求通道与具体处理逻辑之间的中间层。

设计模式对比（Java 视角）：
    类似于 Spring MVC 的 HandlerMapping：
    - register() 相当于注册一个 @RequestMapping
    - dispatch() 相当于 DispatcherServlet 查找处理器并调用
    区别是这里的"URL"是请求对象里的 method 字段，且找不到处理器时不报错。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from loguru import logger

from monitorpanel.backend.base import PROXY_METHODS
from monitorpanel.bus.events import ViewRequest
from monitorpanel.router import handlers

if TYPE_CHECKING:
    from monitorpanel.session.monitor import MonitorSession
    from monitorpanel.session.view import View


@dataclass
class RequestContext:
    """
    单次请求的处理上下文。

    属性:
        session: 请求所属会话
        view: 来源视图（回复和子视图递归都以它为目标）
        request: 请求本身
        message_to_view: 调用方显式传入的待转发消息（IAmReady 时投递）
    """

    session: MonitorSession
    view: View
    request: ViewRequest
    message_to_view: Any = None

    def reply(self, message: Any) -> bool:
        """向来源视图推送回复。视图已释放时回复被丢弃，返回 False。"""
        return self.session.post_message(self.view, message)


Handler = Callable[[RequestContext], Awaitable[None]]


class MessageRouter:
    """
    消息路由器。

    内部使用 dict[str, Handler] 存储路由表，以方法名为键。
    HTTP 动词类方法在没有显式注册处理器时统一走后端透传。
    """

    def __init__(self):
        self._handlers: dict[str, Handler] = {}
        self._register_default_handlers()

    def _register_default_handlers(self) -> None:
        self.register("IAmReady", handlers.handle_i_am_ready)
        self.register("PersistState", handlers.handle_persist_state)
        self.register("OpenInNewWindow", handlers.handle_open_in_new_window)
        self.register("SaveAs", handlers.handle_save_as)

    def register(self, method: str, handler: Handler) -> None:
        """注册处理器。同名处理器会被覆盖（后注册的优先）。"""
        self._handlers[method] = handler

    def unregister(self, method: str) -> None:
        """注销处理器，不存在时静默忽略。"""
        self._handlers.pop(method, None)

    def get(self, method: str) -> Handler | None:
        """按方法名查找处理器（包括后端透传）。"""
        handler = self._handlers.get(method)
        if handler is None and method in PROXY_METHODS:
            return handlers.handle_backend_proxy
        return handler

    async def dispatch(
        self,
        session: MonitorSession,
        view: View,
        request: ViewRequest,
        message_to_view: Any = None,
    ) -> None:
        """
        分发一条请求。

        处理器抛出的异常（例如持久化失败）原样传播给调用方，
        由请求通道记录日志并丢弃该请求。

        参数:
            session: 请求所属会话
            view: 来源视图
            request: 请求
            message_to_view: 可选的待转发消息
        """
        handler = self.get(request.method)
        if handler is None:
            logger.debug(f"Ignoring unknown method '{request.method}' from view {view.id}")
            return

        logger.debug(f"Dispatching {request.method} from view {view.id} (hub {session.hub})")
        await handler(RequestContext(session, view, request, message_to_view))

    @property
    def methods(self) -> list[str]:
        """所有显式注册的方法名。"""
        return list(self._handlers.keys())

    def __len__(self) -> int:
        return len(self._handlers)

    def __contains__(self, method: str) -> bool:
        return self.get(method) is not None
