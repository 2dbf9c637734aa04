"""
会话管理模块 - 监控面板视图的生命周期管理。

每个被监控的 hub 对应一个 MonitorSession，会话内：
- 最多一个根视图（show() 创建或显示）
- 任意多个子视图（OpenInNewWindow 下钻打开）
- 根视图被关闭时整个会话随之拆除（先子视图后根视图）

SessionManager 按 hub 维护会话表，会话拆除后自动从表中移除。

【Java 开发者类比】
- SessionManager 类似于 Spring Session 的 SessionRepository
- ViewRegistry 类似于一个以句柄 ID 为键的对象池（arena）
"""

from monitorpanel.session.manager import SessionManager
from monitorpanel.session.monitor import MonitorSession
from monitorpanel.session.view import View, ViewRegistry
from monitorpanel.session.visibility import VisibilityTracker

__all__ = ["MonitorSession", "SessionManager", "View", "ViewRegistry", "VisibilityTracker"]
