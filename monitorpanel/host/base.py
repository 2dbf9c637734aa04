"""
宿主接口基类模块 - 定义面板与宿主的统一契约。

【核心抽象】
- Panel：由宿主拥有的渲染面板。会话只持有非拥有型引用，
  通过事件回调得知面板被用户关闭（dispose）、收到消息或可见性变化。
- PanelHost：宿主提供的全局能力。

【所有权约定】
面板对象的真实生命周期由宿主掌控。会话只在 cleanup() 时对每个面板
调用一次 dispose()，其余时候只响应宿主发出的 dispose 事件。
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable


@dataclass(frozen=True)
class ViewState:
    """面板可见性快照：visible 表示面板在界面上可见，active 表示面板拥有焦点。"""
    visible: bool
    active: bool


MessageCallback = Callable[[Any], None]
DisposeCallback = Callable[[], None]
ViewStateCallback = Callable[[ViewState], None]


class Panel(ABC):
    """
    渲染面板抽象基类。

    属性:
        title: 面板标题
        html: 面板内容（引导页面 HTML）
    """

    title: str = ""
    html: str = ""

    @property
    @abstractmethod
    def visible(self) -> bool:
        """面板当前是否可见。"""
        pass

    @property
    @abstractmethod
    def active(self) -> bool:
        """面板当前是否拥有焦点。"""
        pass

    @abstractmethod
    def post_message(self, message: Any) -> bool:
        """
        向面板推送一条消息（单向，不等待确认）。

        返回:
            True 表示已交给宿主投递；面板已释放时返回 False
        """
        pass

    @abstractmethod
    def reveal(self) -> None:
        """把面板显示到前台并获取焦点。"""
        pass

    @abstractmethod
    def dispose(self) -> None:
        """释放面板。实现方需保证重复调用无副作用，并在首次释放时触发 dispose 事件。"""
        pass

    @abstractmethod
    def on_did_receive_message(self, callback: MessageCallback) -> None:
        """注册入站消息回调（面板 → 宿主）。"""
        pass

    @abstractmethod
    def on_did_dispose(self, callback: DisposeCallback) -> None:
        """注册释放事件回调。"""
        pass

    @abstractmethod
    def on_did_change_view_state(self, callback: ViewStateCallback) -> None:
        """注册可见性/焦点变化回调。"""
        pass


class PanelHost(ABC):
    """宿主运行时抽象基类。"""

    @abstractmethod
    def create_panel(self, view_type: str, title: str) -> Panel:
        """
        创建并显示一个新面板。

        参数:
            view_type: 面板类型标识（同类面板共享同一标识）
            title: 初始标题
        """
        pass

    @abstractmethod
    def as_resource_uri(self, path: Path) -> str:
        """把本地文件路径映射为面板可访问的 URI。相同输入必须得到相同输出。"""
        pass

    @abstractmethod
    async def show_save_dialog(self, filters: dict[str, list[str]]) -> Path | None:
        """
        弹出保存对话框。

        参数:
            filters: 文件类型过滤器，格式为 {显示名: [扩展名列表]}

        返回:
            用户选择的路径；用户取消时返回 None
        """
        pass

    @abstractmethod
    def show_error_message(self, message: str) -> None:
        """通过宿主的通知界面向用户显示错误。"""
        pass
