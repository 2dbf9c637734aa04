"""
可见性跟踪器 - 缓存根视图最近一次上报的可见/焦点状态。

is_visible 只读缓存，从不向宿主发起查询；缓存在宿主发出
view-state 变化事件时更新，两次事件之间可能短暂过期。
"""

from loguru import logger

from monitorpanel.host.base import Panel, ViewState


class VisibilityTracker:
    """根视图可见性跟踪器。"""

    def __init__(self):
        self._panel: Panel | None = None
        self._visible = False
        self._active = False

    def attach(self, panel: Panel) -> None:
        """
        开始跟踪某个面板。以面板当前状态作为初始值，之后只依赖事件更新。
        已被替换的旧面板发来的事件会被忽略。
        """
        self._panel = panel
        self._visible = panel.visible
        self._active = panel.active

        def on_change(state: ViewState) -> None:
            if self._panel is not panel:
                return
            self._visible = state.visible
            self._active = state.active
            logger.debug(f"Root view state changed: visible={state.visible} active={state.active}")

        panel.on_did_change_view_state(on_change)

    def detach(self) -> None:
        """停止跟踪（根视图被释放）。"""
        self._panel = None
        self._visible = False
        self._active = False

    @property
    def is_visible(self) -> bool:
        return self._visible

    @property
    def is_active(self) -> bool:
        return self._active
