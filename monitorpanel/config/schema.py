"""
配置数据模型定义 (config/schema.py)
=================================
本模块使用 Pydantic 定义 monitorpanel 的完整配置结构。
所有配置项都有默认值，用户只需在 config.json 中覆盖需要修改的部分。

整体配置结构（树形）：
Config (根配置)
├── view      - 视图相关配置（主题、时间显示模式、视图模式、静态资源目录）
├── state     - 持久化状态配置（状态文件路径、全局记录名）
└── backend   - 后端透传配置（基础 URL、nonce、超时）

对于 Java 开发者：
- BaseModel 类似于 Java 的 POJO/Record，但自带字段验证和默认值
- BaseSettings 类似于 Spring 的 @ConfigurationProperties，额外支持从环境变量读取配置
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

from monitorpanel.utils.helpers import expand_path


# 全局状态记录的固定名称。渲染端代码与其他功能共用这一条记录，
# 修改它会让已有用户的持久化状态"丢失"。
GLOBAL_STATE_NAME = "durableFunctionsMonitorWebViewState"


class RuntimeConfig(BaseModel):
    """
    运行时配置 - 每次 show() 计算一次并嵌入引导页面，不做持久化。

    属性:
        theme: 渲染端主题（'light' / 'dark'）
        show_time_as: 时间显示模式（'UTC' / 'Local'）
        view_mode: 视图模式标志（0 = 普通模式，其他值由渲染端解释）
        function_graph_available: 当前视图是否可用补充的可视化功能
    """
    model_config = ConfigDict(frozen=True)

    theme: str = "light"
    show_time_as: Literal["UTC", "Local"] = "UTC"
    view_mode: int = 0
    function_graph_available: bool = False


class ViewConfig(BaseModel):
    """视图配置。statics_folder 指向渲染端打包产物（manifest.json、static/css、static/js 所在目录）。"""
    theme: str = "light"  # 默认主题
    show_time_as: Literal["UTC", "Local"] = "UTC"  # 时间显示模式
    view_mode: int = 0  # 视图模式标志
    statics_folder: str = "~/.monitorpanel/statics"  # 渲染端静态资源目录


class StateConfig(BaseModel):
    """持久化状态配置。"""
    path: str = "~/.monitorpanel/global_state.json"  # 全局状态 JSON 文件
    global_state_name: str = GLOBAL_STATE_NAME  # 全局记录名


class BackendConfig(BaseModel):
    """后端透传配置。渲染端发来的 GET/POST 等请求会被转发到这里。"""
    base_url: str = "http://localhost:7072/a/p/i"  # 后端基础地址，实际请求为 base_url/<hub><url>
    nonce: str = ""  # 随每个请求发送的 x-dfm-nonce 头
    timeout_s: float = 60.0  # 单次请求超时（秒）


class Config(BaseSettings):
    """
    monitorpanel 根配置类。

    除了从 JSON 文件加载外，还支持从环境变量读取配置：
    - 环境变量前缀: MONITORPANEL_
    - 嵌套分隔符: __ (双下划线)
    - 示例: MONITORPANEL_VIEW__THEME=dark 可覆盖 view.theme
    """
    model_config = SettingsConfigDict(env_prefix="MONITORPANEL_", env_nested_delimiter="__")

    view: ViewConfig = Field(default_factory=ViewConfig)
    state: StateConfig = Field(default_factory=StateConfig)
    backend: BackendConfig = Field(default_factory=BackendConfig)

    @property
    def statics_path(self) -> Path:
        """获取展开后的静态资源目录绝对路径。"""
        return expand_path(self.view.statics_folder)

    @property
    def state_path(self) -> Path:
        """获取展开后的全局状态文件路径。"""
        return expand_path(self.state.path)

    def runtime_config(self, function_graph_available: bool = False) -> RuntimeConfig:
        """根据视图配置生成一份不可变的运行时配置。"""
        return RuntimeConfig(
            theme=self.view.theme,
            show_time_as=self.view.show_time_as,
            view_mode=self.view.view_mode,
            function_graph_available=function_graph_available,
        )
