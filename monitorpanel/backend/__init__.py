"""
后端协作者模块 - 渲染端数据请求的透传通道。

渲染端通过 HTTP 动词（GET/POST/...）作为 method 发来的请求，
由路由器原样转发给后端协作者，结果再原样回复给来源视图。
本模块对请求和结果都不做任何解释。
"""

from monitorpanel.backend.base import Backend, PROXY_METHODS
from monitorpanel.backend.http import HttpBackend

__all__ = ["Backend", "HttpBackend", "PROXY_METHODS"]
