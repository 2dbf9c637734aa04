"""
请求事件类型定义模块 - 定义请求总线中传输的数据结构。

面板发来的原始消息是一个 JSON 对象，必填字段为 method，
其余字段由具体方法决定，路由器对它们不做类型约束。
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class ViewRequest:
    """
    入站请求 - 某个视图发来的一条消息。

    属性:
        view_id: 来源视图的不透明句柄 ID
        payload: 原始消息对象（包含 method 及方法相关字段）
        timestamp: 到达时间
    """

    view_id: str
    payload: dict[str, Any]
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def method(self) -> str:
        """请求方法名。缺失或非字符串时返回空串（空串不匹配任何处理器）。"""
        method = self.payload.get("method")
        return method if isinstance(method, str) else ""

    def get(self, name: str, default: Any = None) -> Any:
        """读取方法相关字段。"""
        return self.payload.get(name, default)

    @classmethod
    def from_message(cls, view_id: str, message: Any) -> "ViewRequest":
        """
        从面板原始消息构造请求。

        非对象消息（例如字符串）被包装为 {"method": ""}，路由时按未知方法忽略。
        """
        payload = message if isinstance(message, dict) else {"method": ""}
        return cls(view_id=view_id, payload=payload)
