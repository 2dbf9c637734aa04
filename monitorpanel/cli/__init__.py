"""
命令行模块 - monitorpanel 的 CLI 入口（基于 Typer）。
"""
