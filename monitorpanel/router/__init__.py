"""
消息路由模块 - 把视图发来的请求分发给对应的处理器。

路由表以方法名（字符串）为键，默认注册以下处理器：
- IAmReady：视图脚本启动完成的存活信号
- PersistState：持久化一个状态字段
- OpenInNewWindow：下钻打开子视图
- SaveAs：把视图导出的内容保存到磁盘
- GET/POST/PUT/PATCH/DELETE：透传给后端协作者

未注册的方法按"无操作"处理，以容忍宿主与渲染端版本不一致时的协议差异。
"""

from monitorpanel.router.router import MessageRouter, RequestContext

__all__ = ["MessageRouter", "RequestContext"]
