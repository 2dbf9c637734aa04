"""
监控会话实现模块 - 一个 hub 的根视图与子视图的完整生命周期。

【生命周期】
- show()：根视图存活时显示到前台；否则创建根视图、安装引导页面、
  打开请求通道、注册释放监听（根视图释放 → 拆除整个会话）
- open_child()：创建子视图，子视图释放时只把它自己移出注册表
- cleanup()：先释放所有子视图再释放根视图，关闭所有请求通道，
  触发拆除回调；可重复调用

【消息流】
面板消息 → 请求总线（按视图排队）→ MessageRouter → 处理器
处理器通过 post_message() 单向回复来源视图，目标已释放时回复被丢弃。
"""

import asyncio
from typing import Any, Callable

from loguru import logger

from monitorpanel.backend.base import Backend
from monitorpanel.bootstrap.builder import PayloadBuilder
from monitorpanel.bus.events import ViewRequest
from monitorpanel.bus.queue import RequestBus
from monitorpanel.config.schema import RuntimeConfig
from monitorpanel.host.base import PanelHost
from monitorpanel.router.router import MessageRouter
from monitorpanel.session.view import View, ViewRegistry
from monitorpanel.session.visibility import VisibilityTracker
from monitorpanel.state.store import ViewStateStore

VIEW_TYPE = "durableFunctionsMonitor"


def root_title(hub: str) -> str:
    return f"Durable Functions Monitor ({hub})"


def child_title(identity: str) -> str:
    return f"Instance '{identity}'"


class MonitorSession:
    """
    单个 hub 的监控会话。

    属性:
        hub: hub 标识（同时是持久化状态的命名空间）
        host: 宿主运行时
        state_store: 视图状态存储
        builder: 引导页面构建器
        backend: 后端协作者（可选，透传请求使用）
        router: 消息路由器
        bus: 请求总线
        registry: 视图注册表
        visibility: 根视图可见性跟踪器
    """

    def __init__(
        self,
        host: PanelHost,
        hub: str,
        state_store: ViewStateStore,
        builder: PayloadBuilder,
        backend: Backend | None = None,
        on_teardown: Callable[[], None] | None = None,
        runtime_config: Callable[[], RuntimeConfig] | None = None,
        router: MessageRouter | None = None,
    ):
        self.host = host
        self.hub = hub
        self.state_store = state_store
        self.builder = builder
        self.backend = backend
        self.on_teardown = on_teardown
        self.router = router or MessageRouter()
        self.bus = RequestBus()
        self.registry = ViewRegistry()
        self.visibility = VisibilityTracker()
        self._make_runtime_config = runtime_config or RuntimeConfig
        self._runtime_config: RuntimeConfig | None = None
        self._torn_down = False

    # ------------------------------------------------------------------
    # 视图生命周期
    # ------------------------------------------------------------------

    async def show(self, message_to_view: Any = None) -> View:
        """
        显示根视图（幂等）。

        参数:
            message_to_view: 可选的消息，在根视图就绪（IAmReady）后投递给它；
                             根视图已就绪时立即投递

        返回:
            根视图
        """
        root = self.registry.root
        if root is not None and not root.disposed:
            if message_to_view is not None:
                if root.is_ready:
                    root.post(message_to_view)
                else:
                    root.set_pending_message(message_to_view)
            root.panel.reveal()
            return root

        # 先读状态、生成页面，再创建面板：读取失败时不会留下半初始化的根视图
        self._runtime_config = self._make_runtime_config()
        content = self.builder.build(self.state_store.read(self.hub), self._runtime_config, "")

        panel = self.host.create_panel(VIEW_TYPE, root_title(self.hub))
        view = View(panel=panel, identity="", is_root=True)
        view.set_pending_message(message_to_view)

        self.registry.set_root(view)
        self.visibility.attach(panel)
        self._attach(view)
        view.html = content
        self._torn_down = False

        logger.info(f"Monitor view shown for hub {self.hub}")
        return view

    async def open_child(self, identity: str) -> View:
        """
        打开下钻子视图。子视图从不继承根视图的持久化状态。

        参数:
            identity: 实体 ID

        返回:
            新的子视图
        """
        runtime_config = self._runtime_config or self._make_runtime_config()
        content = self.builder.build({}, runtime_config, identity)

        panel = self.host.create_panel(VIEW_TYPE, child_title(identity))
        view = View(panel=panel, identity=identity, is_root=False)

        self.registry.add_child(view)
        self._attach(view)
        view.html = content

        logger.info(f"Opened child view '{identity}' for hub {self.hub} ({len(self.registry.children)} children)")
        return view

    def cleanup(self) -> None:
        """
        释放所有子视图和根视图，关闭请求通道，触发拆除回调。

        无论宿主是否已经释放了这些面板都可以调用，重复调用无副作用。
        """
        for child in self.registry.children:
            self._release(child)

        root = self.registry.root
        if root is not None:
            self._release(root)
            self.visibility.detach()

        self.registry.clear()
        self.bus.close_all()

        if not self._torn_down:
            self._torn_down = True
            logger.info(f"Monitor session for hub {self.hub} cleaned up")
            if self.on_teardown:
                self.on_teardown()

    def _release(self, view: View) -> None:
        view.disposed = True
        self.bus.close_lane(view.id)
        try:
            view.release_panel()
        except Exception as e:
            logger.warning(f"Error disposing view {view.id}: {e}")

    def _attach(self, view: View) -> None:
        """为视图打开请求通道并挂接宿主事件。"""

        async def dispatch(request: ViewRequest) -> None:
            await self.router.dispatch(self, view, request)

        self.bus.open_lane(view.id, dispatch)
        view.panel.on_did_receive_message(lambda message: self._on_message(view, message))
        view.panel.on_did_dispose(lambda: self._on_disposed(view))

    def _on_message(self, view: View, message: Any) -> None:
        if view.disposed:
            return
        self.bus.publish_request(ViewRequest.from_message(view.id, message))

    def _on_disposed(self, view: View) -> None:
        """宿主报告面板已释放（通常是用户关闭了面板）。"""
        if view.disposed:
            return
        view.disposed = True
        self.bus.close_lane(view.id)

        if view is self.registry.root:
            logger.info(f"Root view for hub {self.hub} was closed, tearing down session")
            self.cleanup()
        else:
            self.registry.remove(view.id)
            logger.debug(f"Child view '{view.identity}' closed ({len(self.registry.children)} children left)")

    # ------------------------------------------------------------------
    # 消息
    # ------------------------------------------------------------------

    async def handle_message(self, view: View, message: Any, message_to_view: Any = None) -> None:
        """
        直接处理一条来自视图的消息（不经过请求通道）。

        供自行保证顺序的调用方使用；处理器异常原样抛出。
        """
        await self.router.dispatch(self, view, ViewRequest.from_message(view.id, message), message_to_view)

    def post_message(self, view: View, message: Any) -> bool:
        """向视图单向推送消息。视图已释放时丢弃并返回 False。"""
        return view.post(message)

    async def wait_until_ready(self, timeout: float | None = None) -> bool:
        """
        等待根视图发来 IAmReady。

        返回:
            True 表示根视图已就绪；没有根视图或超时返回 False
        """
        root = self.registry.root
        if root is None:
            return False
        try:
            await asyncio.wait_for(root.ready.wait(), timeout)
        except asyncio.TimeoutError:
            return False
        return True

    # ------------------------------------------------------------------
    # 状态查询
    # ------------------------------------------------------------------

    @property
    def is_visible(self) -> bool:
        """根视图是否可见（读取缓存，不访问宿主）。"""
        return self.visibility.is_visible

    @property
    def root(self) -> View | None:
        return self.registry.root

    @property
    def children(self) -> list[View]:
        return self.registry.children

    @property
    def views(self) -> list[View]:
        return self.registry.views

    @property
    def runtime_config(self) -> RuntimeConfig | None:
        """最近一次 show() 计算出的运行时配置。"""
        return self._runtime_config
