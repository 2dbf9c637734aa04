"""
引导页面构建模块 - 把持久化状态、运行时配置和资源链接拼装为 HTML。

嵌入格式（渲染端代码按这些全局变量名读取，格式不可随意改动）：

    <script>var OrchestrationIdFromVsCode="<identity>",StateFromVsCode=<state JSON></script>
    <script>var DfmClientConfig={'theme':'light','showTimeAs':'UTC'}</script>
    <script>var DfmViewMode=0</script>
    <script>var IsFunctionGraphAvailable=1</script>

状态 JSON 采用紧凑格式、保留键的插入顺序、不转义非 ASCII 字符，
与浏览器端 JSON.stringify 的输出一致。
"""

import html
import json
from typing import Any, Callable

from monitorpanel.bootstrap.assets import AssetManifest
from monitorpanel.config.schema import RuntimeConfig
from monitorpanel.host.base import PanelHost

PAGE_TITLE = "Durable Functions Monitor"

UriResolver = Callable[[Any], str]


def _to_json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _single_quoted(value: str) -> str:
    return "'" + str(value).replace("\\", "\\\\").replace("'", "\\'") + "'"


def state_script(identity: str, state: dict[str, Any] | None) -> str:
    """生成视图身份与持久化状态的脚本绑定。"""
    return (
        f"<script>var OrchestrationIdFromVsCode={_to_json(identity or '')},"
        f"StateFromVsCode={_to_json(state if state is not None else {})}</script>"
    )


def client_config_script(runtime_config: RuntimeConfig) -> str:
    """生成客户端配置的脚本绑定。"""
    return (
        f"<script>var DfmClientConfig={{'theme':{_single_quoted(runtime_config.theme)},"
        f"'showTimeAs':{_single_quoted(runtime_config.show_time_as)}}}</script>"
    )


def build_payload(
    state: dict[str, Any] | None,
    runtime_config: RuntimeConfig,
    identity: str,
    manifest: AssetManifest,
    resolve_uri: UriResolver,
) -> str:
    """
    构建视图的引导页面。

    纯函数：相同的输入（包括 resolve_uri 的映射结果）一定得到逐字节相同的输出。

    参数:
        state: 该视图的持久化状态，None 时嵌入空对象
        runtime_config: 运行时配置
        identity: 视图身份，根视图为空串
        manifest: 静态资源清单
        resolve_uri: 本地路径 → 宿主 URI 的映射函数，每个资源调用一次

    返回:
        完整的 HTML 文本
    """

    def href(path) -> str:
        return html.escape(resolve_uri(path), quote=True)

    head = [
        '<meta charset="utf-8">',
        '<meta name="viewport" content="width=device-width,initial-scale=1">',
    ]
    if manifest.favicon is not None:
        head.append(f'<link rel="shortcut icon" href="{href(manifest.favicon)}">')
    if manifest.manifest is not None:
        head.append(f'<link rel="manifest" href="{href(manifest.manifest)}">')
    head.append(f"<title>{PAGE_TITLE}</title>")
    head.extend(f'<link href="{href(css)}" rel="stylesheet">' for css in manifest.stylesheets)

    head.append(state_script(identity, state))
    head.append(client_config_script(runtime_config))
    head.append(f"<script>var DfmViewMode={int(runtime_config.view_mode)}</script>")
    head.append(
        f"<script>var IsFunctionGraphAvailable={1 if runtime_config.function_graph_available else 0}</script>"
    )

    body = [
        "<noscript>You need to enable JavaScript to run this app.</noscript>",
        '<div id="root"></div>',
    ]
    body.extend(f'<script src="{href(js)}"></script>' for js in manifest.scripts)

    return (
        '<!doctype html><html lang="en"><head>'
        + "".join(head)
        + "</head><body>"
        + "".join(body)
        + "</body></html>"
    )


class PayloadBuilder:
    """
    引导页面构建器 - 绑定宿主与资源清单，供会话反复调用。

    属性:
        host: 宿主运行时（提供 as_resource_uri）
        manifest: 静态资源清单
        is_graph_available: 判断某个身份是否可用补充可视化功能的谓词
    """

    def __init__(
        self,
        host: PanelHost,
        manifest: AssetManifest,
        is_graph_available: Callable[[str], bool] | None = None,
    ):
        self.host = host
        self.manifest = manifest
        self.is_graph_available = is_graph_available or (lambda identity: False)

    def build(
        self,
        state: dict[str, Any] | None,
        runtime_config: RuntimeConfig,
        identity: str = "",
    ) -> str:
        """
        构建引导页面。可用性标志由注入的谓词按 identity 计算，覆盖 runtime_config 中的值。
        """
        available = bool(self.is_graph_available(identity))
        config = runtime_config.model_copy(update={"function_graph_available": available})
        return build_payload(state, config, identity, self.manifest, self.host.as_resource_uri)
