"""
Configuration for locating a gemini-cli installation.

Values come from environment variables with platform-specific defaults, and may
be overridden by an optional YAML file.
"""

from dataclasses import dataclass, field
import logging
import os
import shutil
import subprocess
import sys
from typing import List, Mapping

import yaml

from gemini_acp_patch.acp_patch_exceptions import AcpPatchConfigError


logger = logging.getLogger("AcpPatchConfig")


def detect_node_version() -> str | None:
    """
    Get the version string of the Node.js runtime on PATH.

    Returns:
        Version string such as "v20.11.0", or None if node is unavailable
    """
    node = shutil.which("node")
    if node is None:
        return None

    try:
        completed = subprocess.run(
            [node, "--version"],
            capture_output=True,
            text=True,
            timeout=10,
            check=True
        )

    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("Unable to run %s --version: %s", node, e)
        return None

    version = completed.stdout.strip()
    return version or None


def _default_npm_prefix(env: Mapping[str, str], platform: str) -> str:
    if platform == "win32":
        return os.path.join(env.get("APPDATA", ""), "npm")

    return "/usr/local"


def _default_pnpm_home(env: Mapping[str, str], platform: str, home_dir: str) -> str:
    if platform == "darwin":
        return os.path.join(home_dir, "Library", "pnpm")

    if platform == "win32":
        return os.path.join(env.get("LOCALAPPDATA", ""), "pnpm")

    return os.path.join(home_dir, ".local", "share", "pnpm")


def _default_tool_dir() -> str:
    # This package's own directory; its parent plays the role of node_modules
    return os.path.dirname(os.path.abspath(__file__))


@dataclass
class AcpPatchConfig:
    """Directories and versions used to probe for gemini-cli."""

    npm_prefix: str
    pnpm_home: str
    home_dir: str
    tool_dir: str = field(default_factory=_default_tool_dir)
    node_version: str | None = None
    extra_search_paths: List[str] = field(default_factory=list)

    @classmethod
    def from_environment(
        cls,
        env: Mapping[str, str] | None = None,
        platform: str | None = None,
        node_version: str | None = None
    ) -> 'AcpPatchConfig':
        """
        Build a configuration from environment variables.

        Args:
            env: Environment mapping, defaults to os.environ
            platform: Platform name as in sys.platform, defaults to the running one
            node_version: Node.js version string, detected from PATH if not given

        Returns:
            Configuration populated from the environment and platform defaults
        """
        if env is None:
            env = os.environ

        if platform is None:
            platform = sys.platform

        home_dir = env.get("HOME") or os.path.expanduser("~")

        npm_prefix = env.get("npm_config_prefix") or _default_npm_prefix(env, platform)
        pnpm_home = env.get("PNPM_HOME") or _default_pnpm_home(env, platform, home_dir)

        if node_version is None:
            node_version = detect_node_version()

        return cls(
            npm_prefix=npm_prefix,
            pnpm_home=pnpm_home,
            home_dir=home_dir,
            node_version=node_version
        )

    @classmethod
    def load_from_file(
        cls,
        config_path: str,
        env: Mapping[str, str] | None = None,
        platform: str | None = None,
        node_version: str | None = None
    ) -> 'AcpPatchConfig':
        """
        Load configuration from a YAML file layered over the environment.

        Args:
            config_path: Path to the YAML file
            env: Environment mapping, defaults to os.environ
            platform: Platform name as in sys.platform, defaults to the running one
            node_version: Node.js version string, detected from PATH if not given

        Returns:
            Configuration with file values taking precedence

        Raises:
            FileNotFoundError: If the file does not exist
            AcpPatchConfigError: If the file content is malformed
        """
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'r', encoding='utf-8') as f:
            try:
                data = yaml.safe_load(f)

            except yaml.YAMLError as e:
                raise AcpPatchConfigError(
                    f"Invalid YAML in configuration file: {config_path}",
                    {'config_path': config_path, 'reason': str(e)}
                ) from e

        if data is None:
            data = {}

        if not isinstance(data, dict):
            raise AcpPatchConfigError(
                f"Configuration file must contain a mapping: {config_path}",
                {'config_path': config_path, 'found_type': type(data).__name__}
            )

        search_paths = data.get('search_paths', [])
        if not isinstance(search_paths, list):
            raise AcpPatchConfigError(
                "'search_paths' must be a list of directories",
                {'config_path': config_path, 'found_type': type(search_paths).__name__}
            )

        file_node_version = data.get('node_version')
        config = cls.from_environment(
            env,
            platform,
            node_version=str(file_node_version) if file_node_version else node_version
        )

        if data.get('npm_prefix'):
            config.npm_prefix = os.path.expanduser(str(data['npm_prefix']))

        if data.get('pnpm_home'):
            config.pnpm_home = os.path.expanduser(str(data['pnpm_home']))

        config.extra_search_paths = [os.path.expanduser(str(p)) for p in search_paths]

        logger.debug("Loaded configuration from %s: %s", config_path, config)
        return config
