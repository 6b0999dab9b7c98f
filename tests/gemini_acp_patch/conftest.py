"""Shared fixtures and utilities for ACP patch tests."""

import os
from pathlib import Path

import pytest

from gemini_acp_patch.acp_patch_config import AcpPatchConfig
from gemini_acp_patch.acp_patch_constants import ANCHOR_MARKER


GEMINI_JS_SAMPLE = (
    "export async function main() {\n"
    "    const settings = loadSettings(workspaceRoot);\n"
    "    const argv = await parseArguments();\n"
    f"    {ANCHOR_MARKER}\n"
    "    if (!process.env['SANDBOX']) {\n"
    "        await start_sandbox(sandboxConfig, memoryArgs);\n"
    "    }\n"
    "}\n"
)


def _install_gemini_js(package_dir: Path, content: str = GEMINI_JS_SAMPLE) -> Path:
    script = package_dir / "dist" / "src" / "gemini.js"
    script.parent.mkdir(parents=True, exist_ok=True)
    script.write_text(content, encoding="utf-8")
    return script


@pytest.fixture
def gemini_js(tmp_path):
    """Create a gemini.js file containing the anchor."""
    return _install_gemini_js(tmp_path / "gemini-cli")


@pytest.fixture
def layout(tmp_path):
    """Create isolated npm, pnpm, home, and tool directories."""
    dirs = {
        'npm_prefix': tmp_path / "npm",
        'pnpm_home': tmp_path / "pnpm",
        'home_dir': tmp_path / "home",
        'tool_dir': tmp_path / "site-packages" / "gemini_acp_patch",
    }
    for directory in dirs.values():
        directory.mkdir(parents=True)

    return dirs


@pytest.fixture
def config(layout):
    """Create a configuration pointing at the isolated layout."""
    return AcpPatchConfig(
        npm_prefix=str(layout['npm_prefix']),
        pnpm_home=str(layout['pnpm_home']),
        home_dir=str(layout['home_dir']),
        tool_dir=str(layout['tool_dir']),
        node_version="v20.11.0"
    )


@pytest.fixture
def isolated_environment(layout, monkeypatch):
    """Point the process environment at the isolated layout."""
    monkeypatch.setenv("npm_config_prefix", str(layout['npm_prefix']))
    monkeypatch.setenv("PNPM_HOME", str(layout['pnpm_home']))
    monkeypatch.setenv("HOME", str(layout['home_dir']))
    monkeypatch.delenv("GEMINI_ACP_PATCH_LOG_DIR", raising=False)
    monkeypatch.setattr(
        "gemini_acp_patch.acp_patch_config.detect_node_version",
        lambda: None
    )
    return layout


def snapshot_tree(root: Path) -> dict:
    """Map every file under root to its bytes, and every directory to None."""
    tree = {}
    for dirpath, dirnames, filenames in os.walk(root):
        for name in dirnames:
            tree[str(Path(dirpath) / name)] = None

        for name in filenames:
            path = Path(dirpath) / name
            tree[str(path)] = path.read_bytes()

    return tree


@pytest.fixture
def make_install():
    """Factory that creates dist/src/gemini.js under a package directory."""
    return _install_gemini_js


@pytest.fixture
def sample_content():
    """Provide gemini.js content containing the anchor."""
    return GEMINI_JS_SAMPLE


@pytest.fixture
def tree_snapshot():
    """Provide a function snapshotting every file and directory under a root."""
    return snapshot_tree
