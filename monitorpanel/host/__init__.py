"""
宿主运行时接口模块 - 定义核心代码与编辑器宿主之间的边界。

monitorpanel 不直接依赖任何具体编辑器。视图面板的创建、资源地址映射、
保存对话框和错误通知都通过 PanelHost / Panel 两个抽象接口完成：

- PanelHost：宿主级能力（创建面板、映射资源 URI、保存对话框、错误通知）
- Panel：单个渲染面板的句柄（内容、标题、消息收发、可见性事件、释放）

内置的 MemoryHost 是一个纯内存实现，CLI 预览和测试都使用它。

【Java 开发者类比】
- PanelHost/Panel 相当于 SPI（Service Provider Interface）
- MemoryHost 相当于测试用的 in-memory 实现（类似 H2 之于 JDBC）
"""

from monitorpanel.host.base import Panel, PanelHost, ViewState
from monitorpanel.host.memory import MemoryHost, MemoryPanel

__all__ = ["Panel", "PanelHost", "ViewState", "MemoryHost", "MemoryPanel"]
