"""
CLI 命令模块 - monitorpanel 的所有命令行命令定义。

本模块使用 Typer 框架定义 monitorpanel 的 CLI 命令：
- onboard：生成默认配置文件
- render：用内存宿主生成某个 hub 的引导页面（可直接在浏览器中打开）
- state：查看/修改/清除某个 hub 的持久化状态
- status：查看配置、静态资源和状态文件的概况

技术栈：
- Typer：CLI 框架（基于 Click，支持类型注解自动生成帮助文档）
- Rich：终端美化输出（表格、彩色状态标记）
"""

import asyncio
import json
import sys
from pathlib import Path

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from monitorpanel import __logo__, __version__

app = typer.Typer(
    name="monitorpanel",
    help=f"{__logo__} monitorpanel - monitoring panel session manager",
    no_args_is_help=True,
)

state_app = typer.Typer(help="Inspect and edit persisted view state")
app.add_typer(state_app, name="state")

console = Console()


def version_callback(value: bool):
    """版本号回调：传入 --version 时打印版本号并退出。"""
    if value:
        console.print(f"{__logo__} monitorpanel v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", callback=version_callback, is_eager=True
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
):
    """monitorpanel CLI 根命令回调。处理全局选项并配置日志级别。"""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")


def _load(config_path: Path | None):
    from monitorpanel.config.loader import load_config
    return load_config(config_path)


def _state_store(config):
    from monitorpanel.state.store import JsonFileGlobalState, ViewStateStore
    return ViewStateStore(JsonFileGlobalState(config.state_path), config.state.global_state_name)


# ============================================================================
# Onboard
# ============================================================================


@app.command()
def onboard(
    config_path: Path = typer.Option(None, "--config", "-c", help="Config file path"),
):
    """在 ~/.monitorpanel/ 下创建默认配置文件 config.json。"""
    from monitorpanel.config.loader import get_config_path, save_config
    from monitorpanel.config.schema import Config

    path = config_path or get_config_path()
    if path.exists():
        console.print(f"[yellow]Config already exists at {path}[/yellow]")
        if not typer.confirm("Overwrite?"):
            raise typer.Exit()

    save_config(Config(), path)
    console.print(f"[green]✓[/green] Created config at {path}")
    console.print("\nNext steps:")
    console.print("  1. Point [cyan]view.staticsFolder[/cyan] at the UI bundle")
    console.print("  2. Preview: [cyan]monitorpanel render my-hub --out monitor.html[/cyan]")


# ============================================================================
# Render
# ============================================================================


@app.command()
def render(
    hub: str = typer.Argument(..., help="Hub name"),
    identity: str = typer.Option("", "--identity", "-i", help="Render a child view for this entity id"),
    out: Path = typer.Option(None, "--out", "-o", help="Write HTML to this file instead of stdout"),
    config_path: Path = typer.Option(None, "--config", "-c", help="Config file path"),
):
    """
    生成 hub 的引导页面。

    使用内存宿主和 file:// 资源地址，输出的 HTML 可以直接用浏览器打开。
    不带 --identity 时渲染根视图（嵌入持久化状态），否则渲染子视图（状态为空）。
    """
    from monitorpanel.host.memory import MemoryHost
    from monitorpanel.session.manager import SessionManager
    from monitorpanel.state.store import JsonFileGlobalState

    config = _load(config_path)
    host = MemoryHost(resource_scheme="file")
    manager = SessionManager(host, config, global_state=JsonFileGlobalState(config.state_path))

    async def run() -> str:
        session = manager.get_or_create(hub)
        try:
            if identity:
                view = await session.open_child(identity)
            else:
                view = await session.show()
            return view.html
        finally:
            await manager.aclose()

    content = asyncio.run(run())

    if out:
        out.write_text(content, encoding="utf-8")
        console.print(f"[green]✓[/green] Wrote {len(content)} characters to {out}")
    else:
        typer.echo(content)


# ============================================================================
# State
# ============================================================================


@state_app.command("show")
def state_show(
    hub: str = typer.Argument(..., help="Hub name"),
    config_path: Path = typer.Option(None, "--config", "-c", help="Config file path"),
):
    """显示 hub 的持久化状态。"""
    config = _load(config_path)
    record = _state_store(config).read(hub)

    if not record:
        console.print(f"No persisted state for hub [cyan]{hub}[/cyan]")
        return

    table = Table(title=f"State for {hub}")
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for key, value in record.items():
        table.add_row(key, json.dumps(value, ensure_ascii=False))
    console.print(table)


@state_app.command("set")
def state_set(
    hub: str = typer.Argument(..., help="Hub name"),
    key: str = typer.Argument(..., help="State key"),
    value: str = typer.Argument(..., help="Value (parsed as JSON when possible)"),
    config_path: Path = typer.Option(None, "--config", "-c", help="Config file path"),
):
    """设置 hub 持久化状态中的一个键，其余键保持不变。"""
    try:
        data = json.loads(value)
    except json.JSONDecodeError:
        data = value

    config = _load(config_path)
    asyncio.run(_state_store(config).write(hub, key, data))
    console.print(f"[green]✓[/green] Set {key} for hub {hub}")


@state_app.command("clear")
def state_clear(
    hub: str = typer.Argument(..., help="Hub name"),
    config_path: Path = typer.Option(None, "--config", "-c", help="Config file path"),
):
    """删除 hub 的全部持久化状态。"""
    config = _load(config_path)
    if asyncio.run(_state_store(config).clear(hub)):
        console.print(f"[green]✓[/green] Cleared state for hub {hub}")
    else:
        console.print(f"[yellow]No persisted state for hub {hub}[/yellow]")


# ============================================================================
# Status
# ============================================================================


@app.command()
def status(
    config_path: Path = typer.Option(None, "--config", "-c", help="Config file path"),
):
    """显示配置文件、静态资源目录与状态文件的概况。"""
    from monitorpanel.bootstrap.assets import AssetManifest
    from monitorpanel.config.loader import get_config_path

    path = config_path or get_config_path()
    config = _load(config_path)
    statics = config.statics_path

    console.print(f"{__logo__} monitorpanel Status\n")
    console.print(f"Config: {path} {'[green]✓[/green]' if path.exists() else '[red]✗[/red]'}")
    console.print(f"Statics: {statics} {'[green]✓[/green]' if statics.is_dir() else '[red]✗[/red]'}")
    console.print(f"State: {config.state_path} {'[green]✓[/green]' if config.state_path.exists() else '[dim]not created[/dim]'}")
    console.print(f"Theme: {config.view.theme}, time shown as {config.view.show_time_as}")

    if statics.is_dir():
        manifest = AssetManifest.discover(statics)
        console.print(
            f"Assets: {len(manifest.stylesheets)} stylesheets, {len(manifest.scripts)} scripts"
            f"{', manifest' if manifest.manifest else ''}{', favicon' if manifest.favicon else ''}"
        )


if __name__ == "__main__":
    app()
