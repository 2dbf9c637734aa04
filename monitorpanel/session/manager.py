"""
会话管理器实现模块 - 按 hub 维护监控会话。

【架构定位】
SessionManager 组装每个会话共享的协作者：
- 一个 ViewStateStore（所有 hub 共用同一条全局记录）
- 一个 PayloadBuilder（静态资源清单只扫描一次）
- 一个 MessageRouter（路由表是无状态的）
- 一个后端协作者（未注入时按 config.backend 创建 HttpBackend）

会话在根视图被关闭或显式 close() 后拆除，拆除回调把它从会话表中移除，
下次 get_or_create() 会创建一个全新的会话。
"""

from typing import Any, Callable

from loguru import logger

from monitorpanel.backend.base import Backend
from monitorpanel.backend.http import HttpBackend
from monitorpanel.bootstrap.assets import AssetManifest
from monitorpanel.bootstrap.builder import PayloadBuilder
from monitorpanel.config.schema import Config
from monitorpanel.host.base import PanelHost
from monitorpanel.router.router import MessageRouter
from monitorpanel.session.monitor import MonitorSession
from monitorpanel.state.store import GlobalState, JsonFileGlobalState, ViewStateStore


class SessionManager:
    """
    会话管理器。

    属性:
        host: 宿主运行时
        config: 全局配置
        state_store: 共享的视图状态存储
        builder: 共享的引导页面构建器
        router: 共享的消息路由器
        backend: 共享的后端协作者，aclose() 时关闭
        _sessions: 会话表 {hub: MonitorSession}
    """

    def __init__(
        self,
        host: PanelHost,
        config: Config | None = None,
        global_state: GlobalState | None = None,
        backend: Backend | None = None,
        is_graph_available: Callable[[str], bool] | None = None,
        router: MessageRouter | None = None,
    ):
        self.host = host
        self.config = config or Config()
        self.state_store = ViewStateStore(
            global_state or JsonFileGlobalState(self.config.state_path),
            self.config.state.global_state_name,
        )
        self.builder = PayloadBuilder(
            host,
            AssetManifest.discover(self.config.statics_path),
            is_graph_available,
        )
        self.router = router or MessageRouter()
        self.backend = backend if backend is not None else HttpBackend(
            self.config.backend.base_url,
            nonce=self.config.backend.nonce,
            timeout_s=self.config.backend.timeout_s,
        )
        self._sessions: dict[str, MonitorSession] = {}

    def get_or_create(self, hub: str) -> MonitorSession:
        """获取已有会话或为 hub 创建新会话（不显示）。"""
        session = self._sessions.get(hub)
        if session is not None:
            return session

        session = MonitorSession(
            self.host,
            hub,
            self.state_store,
            self.builder,
            backend=self.backend,
            runtime_config=self.config.runtime_config,
            router=self.router,
        )
        session.on_teardown = lambda: self._forget(hub, session)
        self._sessions[hub] = session
        logger.debug(f"Created monitor session for hub {hub}")
        return session

    def _forget(self, hub: str, session: MonitorSession) -> None:
        # 只移除自己：同一 hub 可能已经有了新的会话
        if self._sessions.get(hub) is session:
            del self._sessions[hub]

    async def show(self, hub: str, message_to_view: Any = None) -> MonitorSession:
        """获取或创建 hub 的会话并显示根视图。"""
        session = self.get_or_create(hub)
        await session.show(message_to_view)
        return session

    def get(self, hub: str) -> MonitorSession | None:
        return self._sessions.get(hub)

    def close(self, hub: str) -> bool:
        """
        拆除 hub 的会话。

        返回:
            True 表示会话存在并已拆除
        """
        session = self._sessions.get(hub)
        if session is None:
            return False
        session.cleanup()
        self._sessions.pop(hub, None)
        return True

    def close_all(self) -> None:
        """拆除所有会话。单个会话拆除失败不影响其他会话。"""
        for hub in list(self._sessions):
            try:
                self.close(hub)
            except Exception as e:
                logger.error(f"Error closing session for hub {hub}: {e}")

    async def aclose(self) -> None:
        """拆除所有会话并关闭后端连接。管理器关闭后不应再使用。"""
        self.close_all()
        try:
            await self.backend.close()
        except Exception as e:
            logger.error(f"Error closing backend: {e}")

    def list_sessions(self) -> list[dict[str, Any]]:
        """
        列出所有会话的概要信息。

        返回:
            字典列表，每个字典包含 hub、visible、views、children
        """
        return [
            {
                "hub": hub,
                "visible": session.is_visible,
                "views": len(session.views),
                "children": len(session.children),
            }
            for hub, session in sorted(self._sessions.items())
        ]

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, hub: str) -> bool:
        return hub in self._sessions
