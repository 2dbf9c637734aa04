"""
静态资源清单模块 - 扫描渲染端打包产物目录。

目录约定（与渲染端打包工具的输出一致）：

    <statics_folder>/
    ├── manifest.json
    ├── favicon.png
    └── static/
        ├── css/*.css
        └── js/*.js          （runtime-main.*.js 由渲染端自行内联，不单独引用）

同一目录内的文件按文件名排序，保证多次构建的输出逐字节一致。
"""

from dataclasses import dataclass
from pathlib import Path

from loguru import logger

MANIFEST_FILE = "manifest.json"
FAVICON_FILE = "favicon.png"
CSS_FOLDER = Path("static") / "css"
JS_FOLDER = Path("static") / "js"
RUNTIME_CHUNK_PREFIX = "runtime-main."


def _list_files(folder: Path, extension: str) -> list[Path]:
    if not folder.is_dir():
        return []
    return sorted(
        (p for p in folder.iterdir() if p.is_file() and p.suffix.lower() == extension),
        key=lambda p: p.name,
    )


@dataclass(frozen=True)
class AssetManifest:
    """
    渲染端静态资源清单。

    属性:
        root: 静态资源根目录
        manifest: manifest.json 路径（不存在时为 None）
        favicon: favicon.png 路径（不存在时为 None）
        stylesheets: 所有 CSS 文件，按文件名排序
        scripts: 除运行时引导 chunk 外的所有 JS 文件，按文件名排序
    """

    root: Path
    manifest: Path | None = None
    favicon: Path | None = None
    stylesheets: tuple[Path, ...] = ()
    scripts: tuple[Path, ...] = ()

    @classmethod
    def discover(cls, statics_folder: Path) -> "AssetManifest":
        """
        扫描静态资源目录生成清单。

        目录不存在时返回空清单并记录警告：引导页面仍然可以生成，
        只是不会引用任何资源。
        """
        root = Path(statics_folder)
        if not root.is_dir():
            logger.warning(f"Statics folder not found: {root}")
            return cls(root=root)

        manifest = root / MANIFEST_FILE
        favicon = root / FAVICON_FILE
        scripts = [
            p for p in _list_files(root / JS_FOLDER, ".js")
            if not p.name.startswith(RUNTIME_CHUNK_PREFIX)
        ]

        return cls(
            root=root,
            manifest=manifest if manifest.is_file() else None,
            favicon=favicon if favicon.is_file() else None,
            stylesheets=tuple(_list_files(root / CSS_FOLDER, ".css")),
            scripts=tuple(scripts),
        )

    @property
    def is_empty(self) -> bool:
        return not (self.manifest or self.favicon or self.stylesheets or self.scripts)

    def all_files(self) -> list[Path]:
        """按页面中的引用顺序返回所有资源文件。"""
        files = [p for p in (self.favicon, self.manifest) if p is not None]
        return files + list(self.stylesheets) + list(self.scripts)
