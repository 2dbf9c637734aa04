"""
引导页面模块 - 生成视图首次加载时的 HTML 内容。

引导页面把三类数据嵌入为页面脚本中的全局变量，供渲染端代码在启动时读取：
- 视图身份（根视图为空串，子视图为实体 ID）与持久化状态
- 运行时配置（主题、时间显示模式、视图模式、补充可视化是否可用）
- 渲染端静态资源（manifest、favicon、CSS、JS）的宿主 URI
"""

from monitorpanel.bootstrap.assets import AssetManifest
from monitorpanel.bootstrap.builder import PayloadBuilder, build_payload

__all__ = ["AssetManifest", "PayloadBuilder", "build_payload"]
