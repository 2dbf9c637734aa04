"""
视图与视图注册表。

View 是对宿主面板的非拥有型包装：面板对象属于宿主，
View 只记录会话关心的状态（身份、是否已释放、是否就绪、待投递消息）。

ViewRegistry 以不透明的句柄 ID 为键保存根视图和子视图，
负责"至多一个根视图"这一不变量。
"""

import asyncio
import uuid
from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from monitorpanel.errors import RegistryError
from monitorpanel.host.base import Panel


def _new_view_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclass(eq=False)
class View:
    """
    单个渲染视图。

    属性:
        panel: 宿主面板（非拥有型引用）
        identity: 视图身份，根视图为空串，子视图为下钻的实体 ID
        is_root: 是否为根视图
        id: 不透明句柄 ID
        disposed: 会话是否已把该视图视为释放
        ready: 视图脚本发来 IAmReady 后置位
    """

    panel: Panel
    identity: str = ""
    is_root: bool = False
    id: str = field(default_factory=_new_view_id)
    disposed: bool = False
    ready: asyncio.Event = field(default_factory=asyncio.Event)
    _pending_message: Any = field(default=None, init=False, repr=False)
    _panel_released: bool = field(default=False, init=False, repr=False)

    @property
    def title(self) -> str:
        return self.panel.title

    @property
    def html(self) -> str:
        return self.panel.html

    @html.setter
    def html(self, content: str) -> None:
        if self.disposed:
            logger.debug(f"Discarding content for disposed view {self.id}")
            return
        self.panel.html = content

    @property
    def is_ready(self) -> bool:
        return self.ready.is_set()

    def mark_ready(self) -> None:
        self.ready.set()

    def set_pending_message(self, message: Any) -> None:
        """暂存一条消息，等视图就绪（IAmReady）时投递。"""
        self._pending_message = message

    def take_pending_message(self) -> Any:
        """取出并清空暂存的消息。"""
        message, self._pending_message = self._pending_message, None
        return message

    def post(self, message: Any) -> bool:
        """
        向视图推送消息。已释放的视图直接丢弃消息，不报错。

        返回:
            True 表示消息已交给宿主投递
        """
        if self.disposed:
            logger.debug(f"Discarding message for disposed view {self.id}")
            return False
        return self.panel.post_message(message)

    def release_panel(self) -> None:
        """调用宿主面板的 dispose()。每个视图最多调用一次。"""
        if self._panel_released:
            return
        self._panel_released = True
        self.disposed = True
        self.panel.dispose()


class ViewRegistry:
    """
    视图注册表。

    属性:
        root: 根视图（不存在时为 None）
        _children: 子视图字典 {view_id: View}
    """

    def __init__(self):
        self.root: View | None = None
        self._children: dict[str, View] = {}

    def set_root(self, view: View) -> None:
        """登记根视图。已有存活的根视图时抛出 RegistryError。"""
        if self.root is not None and not self.root.disposed:
            raise RegistryError(f"Root view {self.root.id} is still alive, refusing to register {view.id}")
        if not view.is_root:
            raise RegistryError(f"View {view.id} is not a root view")
        self.root = view

    def add_child(self, view: View) -> None:
        """登记子视图。"""
        if view.is_root:
            raise RegistryError(f"Root view {view.id} cannot be registered as a child")
        if view.id in self._children:
            raise RegistryError(f"Child view {view.id} is already registered")
        self._children[view.id] = view

    def remove(self, view_id: str) -> View | None:
        """移除视图（根视图或子视图），返回被移除的视图。"""
        if self.root is not None and self.root.id == view_id:
            view, self.root = self.root, None
            return view
        return self._children.pop(view_id, None)

    def get(self, view_id: str) -> View | None:
        if self.root is not None and self.root.id == view_id:
            return self.root
        return self._children.get(view_id)

    def clear(self) -> None:
        self.root = None
        self._children.clear()

    @property
    def children(self) -> list[View]:
        """所有子视图（顺序无意义）。"""
        return list(self._children.values())

    @property
    def views(self) -> list[View]:
        """所有登记的视图（根视图在前）。"""
        views = [self.root] if self.root is not None else []
        return views + self.children

    def __len__(self) -> int:
        return len(self.views)

    def __contains__(self, view: View) -> bool:
        return self.get(view.id) is view
