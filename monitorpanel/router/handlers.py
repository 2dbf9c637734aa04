"""
内置请求处理器。

每个处理器接收一个 RequestContext，通过 ctx.session 访问会话的协作者
（状态存储、宿主、后端、子视图注册），通过 ctx.reply() 回复来源视图。
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from monitorpanel.errors import BackendError
from monitorpanel.utils.helpers import truncate_string

if TYPE_CHECKING:
    from monitorpanel.router.router import RequestContext

# SaveAs 只导出 SVG 图像
SAVE_AS_FILTERS = {"SVG Images": ["svg"]}


async def handle_i_am_ready(ctx: RequestContext) -> None:
    """
    视图脚本启动完成。

    如果有待转发给该视图的消息（显式传入，或 show() 时暂存在视图上），
    此时投递；否则什么也不发送。
    """
    view = ctx.view
    view.mark_ready()

    message = ctx.message_to_view
    if message is None:
        message = view.take_pending_message()
    if message is not None:
        ctx.reply(message)


async def handle_persist_state(ctx: RequestContext) -> None:
    """把 {key, data} 合并写入本会话 hub 的持久化状态。"""
    key = ctx.request.get("key")
    if not isinstance(key, str):
        logger.warning(f"PersistState without a valid key from view {ctx.view.id}")
        return

    await ctx.session.state_store.write(ctx.session.hub, key, ctx.request.get("data"))


async def handle_open_in_new_window(ctx: RequestContext) -> None:
    """下钻：以请求中的 url 作为身份打开一个子视图。"""
    identity = ctx.request.get("url")
    if not isinstance(identity, str) or not identity:
        logger.warning(f"OpenInNewWindow without a valid url from view {ctx.view.id}")
        return

    await ctx.session.open_child(identity)


def _encode_utf8(text: str) -> bytes:
    """
    按 UTF-8 编码，孤立的代理码元替换为 U+FFFD。

    渲染端字符串可能带有不成对的代理码元，直接 encode("utf-8") 会抛 UnicodeEncodeError。
    """
    text = text.encode("utf-16", "surrogatepass").decode("utf-16", "replace")
    return text.encode("utf-8")


async def handle_save_as(ctx: RequestContext) -> None:
    """
    弹出保存对话框，把 data 原样写入用户选择的文件。

    不向视图回复。写入失败通过宿主通知用户，不影响会话。
    """
    data = ctx.request.get("data")
    if data is None:
        logger.warning(f"SaveAs without data from view {ctx.view.id}")
        return
    text = data if isinstance(data, str) else json.dumps(data, ensure_ascii=False)

    host = ctx.session.host
    path = await host.show_save_dialog(SAVE_AS_FILTERS)
    if path is None:
        logger.debug("SaveAs cancelled by user")
        return

    try:
        # 先完成编码再打开文件：编码失败时不会截断用户选中的已有文件
        content = _encode_utf8(text)
        Path(path).write_bytes(content)
        logger.info(f"Saved {len(content)} bytes to {path}")
    except (OSError, ValueError) as e:
        host.show_error_message(f"Failed to save {path}: {e}")


async def handle_backend_proxy(ctx: RequestContext) -> None:
    """
    透传请求给后端，结果回复给来源视图。

    回复格式：
    - 成功：{"id": <请求 id>, "data": <后端结果>}
    - 失败：{"id": <请求 id>, "err": {"message": ..., "status": ...}}
    """
    request = ctx.request
    request_id = request.get("id")
    backend = ctx.session.backend

    if backend is None:
        ctx.reply({"id": request_id, "err": {"message": "No backend available", "status": None}})
        return

    try:
        result = await backend.request(
            ctx.session.hub,
            request.method,
            request.get("url", ""),
            request.get("data"),
        )
    except BackendError as e:
        logger.warning(f"Backend request {request.method} {truncate_string(str(request.get('url')))} failed: {e}")
        ctx.reply({"id": request_id, "err": {"message": str(e), "status": e.status}})
        return
    except Exception as e:
        # 每个带 id 的请求都必须得到回复
        logger.error(f"Backend request {request.method} {truncate_string(str(request.get('url')))} raised: {e}")
        ctx.reply({"id": request_id, "err": {"message": str(e), "status": None}})
        return

    ctx.reply({"id": request_id, "data": result})
