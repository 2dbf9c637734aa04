"""
Shared test fixtures for monitorpanel tests.

This module provides common fixtures used across the test modules:
- A statics folder laid out like the UI bundle
- An in-memory host and global state
- A session wired to all of the above
"""

from pathlib import Path

import pytest

from monitorpanel.bootstrap.assets import AssetManifest
from monitorpanel.bootstrap.builder import PayloadBuilder
from monitorpanel.config.schema import GLOBAL_STATE_NAME
from monitorpanel.host.memory import MemoryHost
from monitorpanel.session.monitor import MonitorSession
from monitorpanel.state.store import MemoryGlobalState, ViewStateStore

HUB = "my-hub"


# ============================================================================
# DIRECTORY FIXTURES
# ============================================================================


@pytest.fixture
def statics_folder(tmp_path) -> Path:
    """Statics folder with manifest, favicon, CSS and JS chunks.

    File names are created out of alphabetical order so tests can
    check that discovery order is stable.
    """
    root = tmp_path / "DfmStatics"
    css = root / "static" / "css"
    js = root / "static" / "js"
    css.mkdir(parents=True)
    js.mkdir(parents=True)

    (root / "manifest.json").write_text("{}", encoding="utf-8")
    (root / "favicon.png").write_bytes(b"\x89PNG")
    (root / "index.html").write_text("<html></html>", encoding="utf-8")

    (css / "main.5ecd60fb.chunk.css").write_text("body{}", encoding="utf-8")
    (css / "2.4b8a3c1e.chunk.css").write_text("div{}", encoding="utf-8")
    (css / "main.5ecd60fb.chunk.css.map").write_text("{}", encoding="utf-8")

    (js / "main.8a1b2c3d.chunk.js").write_text("", encoding="utf-8")
    (js / "2.77e6e8b1.chunk.js").write_text("", encoding="utf-8")
    (js / "runtime-main.f00dbabe.js").write_text("", encoding="utf-8")
    (js / "2.77e6e8b1.chunk.js.LICENSE.txt").write_text("", encoding="utf-8")

    return root


# ============================================================================
# COLLABORATOR FIXTURES
# ============================================================================


@pytest.fixture
def host() -> MemoryHost:
    """In-memory hosting runtime."""
    return MemoryHost()


@pytest.fixture
def global_state() -> MemoryGlobalState:
    """Empty in-memory global state."""
    return MemoryGlobalState()


@pytest.fixture
def state_store(global_state) -> ViewStateStore:
    return ViewStateStore(global_state, GLOBAL_STATE_NAME)


@pytest.fixture
def manifest(statics_folder) -> AssetManifest:
    return AssetManifest.discover(statics_folder)


@pytest.fixture
def builder(host, manifest) -> PayloadBuilder:
    """Payload builder where the graph feature is available for every identity."""
    return PayloadBuilder(host, manifest, is_graph_available=lambda identity: True)


@pytest.fixture
def teardowns() -> list[str]:
    """Records every teardown callback invocation."""
    return []


@pytest.fixture
def session(host, state_store, builder, teardowns) -> MonitorSession:
    """Session for HUB without a backend."""
    return MonitorSession(
        host,
        HUB,
        state_store,
        builder,
        on_teardown=lambda: teardowns.append(HUB),
    )
