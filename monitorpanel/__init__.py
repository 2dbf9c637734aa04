"""
monitorpanel - 编辑器内嵌监控面板的宿主端会话管理器

模块概述：
    本文件是 monitorpanel 包的入口文件（__init__.py），定义了包的元信息。
    monitorpanel 负责监控面板在宿主进程一侧的全部逻辑：

    - 视图（View）生命周期：一个根视图 + 任意多个下钻子视图
    - 宿主与视图之间的请求/回复消息路由
    - 按 hub 划分的持久化状态（合并写入，不覆盖其他键）
    - 视图首次加载时的引导页面（Bootstrap Payload）生成

    渲染端的 HTML/JS 资源和被监控后端本身都不在本包内，
    只在接口边界上与之交互。
"""

# 版本号，遵循语义化版本规范（主版本.次版本.修订号）
__version__ = "0.1.0"

# 项目 logo 表情符号，用于 CLI 输出
__logo__ = "📟"
