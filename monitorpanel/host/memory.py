"""
内存宿主实现 - 不依赖任何编辑器的 PanelHost / Panel 实现。

用途：
- CLI 的 render 命令用它生成引导页面，而不需要真正的编辑器
- 测试用它模拟用户操作：receive() 模拟面板发来消息，
  set_view_state() 模拟焦点切换，dispose() 模拟用户关闭面板
"""

from pathlib import Path
from typing import Any, Callable

from loguru import logger

from monitorpanel.host.base import (
    DisposeCallback,
    MessageCallback,
    Panel,
    PanelHost,
    ViewState,
    ViewStateCallback,
)


class MemoryPanel(Panel):
    """
    内存面板。

    属性:
        view_type: 面板类型标识
        title: 面板标题
        html: 面板内容
        sent: 已推送给面板的消息列表（按推送顺序）
        disposed: 是否已释放
    """

    def __init__(self, view_type: str, title: str):
        self.view_type = view_type
        self.title = title
        self.html = ""
        self.sent: list[Any] = []
        self.disposed = False
        self._visible = True
        self._active = True
        self._message_callbacks: list[MessageCallback] = []
        self._dispose_callbacks: list[DisposeCallback] = []
        self._view_state_callbacks: list[ViewStateCallback] = []

    @property
    def visible(self) -> bool:
        return self._visible

    @property
    def active(self) -> bool:
        return self._active

    def post_message(self, message: Any) -> bool:
        if self.disposed:
            return False
        self.sent.append(message)
        return True

    def reveal(self) -> None:
        if not self.disposed:
            self.set_view_state(visible=True, active=True)

    def dispose(self) -> None:
        if self.disposed:
            return
        self.disposed = True
        self._visible = False
        self._active = False
        for callback in list(self._dispose_callbacks):
            callback()

    def on_did_receive_message(self, callback: MessageCallback) -> None:
        self._message_callbacks.append(callback)

    def on_did_dispose(self, callback: DisposeCallback) -> None:
        self._dispose_callbacks.append(callback)

    def on_did_change_view_state(self, callback: ViewStateCallback) -> None:
        self._view_state_callbacks.append(callback)

    # ---- 以下方法模拟宿主一侧发生的事件 ----

    def receive(self, message: Any) -> None:
        """模拟面板脚本发来一条消息。已释放的面板不再产生消息。"""
        if self.disposed:
            return
        for callback in list(self._message_callbacks):
            callback(message)

    def set_view_state(self, visible: bool, active: bool) -> None:
        """模拟宿主报告面板可见性/焦点变化。"""
        self._visible = visible
        self._active = active
        state = ViewState(visible=visible, active=active)
        for callback in list(self._view_state_callbacks):
            callback(state)


class MemoryHost(PanelHost):
    """
    内存宿主。

    属性:
        resource_scheme: 资源 URI 的 scheme（as_resource_uri 输出形如 scheme:///abs/path）
        save_path: 保存对话框的返回值；可以是固定路径、None（模拟取消），
                   或者接收 filters 返回路径的函数
        panels: 创建过的所有面板（按创建顺序）
        errors: 通过 show_error_message 显示过的错误
        save_requests: 每次保存对话框收到的 filters
    """

    def __init__(
        self,
        resource_scheme: str = "memory-resource",
        save_path: Path | Callable[[dict[str, list[str]]], Path | None] | None = None,
    ):
        self.resource_scheme = resource_scheme
        self.save_path = save_path
        self.panels: list[MemoryPanel] = []
        self.errors: list[str] = []
        self.save_requests: list[dict[str, list[str]]] = []

    def create_panel(self, view_type: str, title: str) -> MemoryPanel:
        panel = MemoryPanel(view_type, title)
        self.panels.append(panel)
        return panel

    def as_resource_uri(self, path: Path) -> str:
        return f"{self.resource_scheme}://{Path(path).resolve().as_posix()}"

    async def show_save_dialog(self, filters: dict[str, list[str]]) -> Path | None:
        self.save_requests.append(filters)
        if callable(self.save_path):
            return self.save_path(filters)
        return self.save_path

    def show_error_message(self, message: str) -> None:
        logger.error(message)
        self.errors.append(message)

    @property
    def live_panels(self) -> list[MemoryPanel]:
        """尚未释放的面板。"""
        return [p for p in self.panels if not p.disposed]
