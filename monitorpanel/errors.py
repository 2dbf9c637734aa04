"""
异常类型定义 - monitorpanel 中所有自定义异常的集中地。

异常分类（与错误处理设计一一对应）：
- RegistryError：视图注册表的不变量被破坏（如重复创建根视图），属于编程错误，
  直接抛出，只让当前操作失败，不影响进程
- BackendError：后端透传请求失败，由路由器转换为带 err 字段的回复

存储失败与保存失败不定义专门的异常类型：前者原样向上传播到请求通道，
后者由路由器捕获后通过宿主的通知接口告知用户。
"""


class MonitorPanelError(Exception):
    """monitorpanel 所有自定义异常的基类。"""


class RegistryError(MonitorPanelError):
    """视图注册表不变量被破坏（例如同一会话出现第二个根视图）。"""


class BackendError(MonitorPanelError):
    """
    后端透传请求失败。

    属性:
        status: HTTP 状态码（传输层错误时为 None）
    """

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status
