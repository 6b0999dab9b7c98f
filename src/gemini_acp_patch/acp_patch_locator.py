"""Discovery of an installed gemini-cli entry script."""

import logging
import os
from typing import List

from gemini_acp_patch.acp_patch_config import AcpPatchConfig
from gemini_acp_patch.acp_patch_constants import PACKAGE_NAME, PACKAGE_SCOPE, SCRIPT_RELATIVE_PATH


class AcpPatchLocator:
    """Probes well-known installation directories for gemini.js."""

    def __init__(self, config: AcpPatchConfig):
        """
        Initialize the locator.

        Args:
            config: Directories and versions to probe
        """
        self._config = config
        self._logger = logging.getLogger("AcpPatchLocator")

    def candidate_directories(self) -> List[str]:
        """
        Build the ordered list of package directories to probe.

        Returns:
            Package directories, earliest match wins
        """
        config = self._config
        candidates = []

        # npm global
        candidates.append(os.path.join(config.npm_prefix, "lib", "node_modules", PACKAGE_SCOPE, PACKAGE_NAME))

        # pnpm global, with and without the store layout version
        candidates.append(os.path.join(config.pnpm_home, "global", "5", "node_modules", PACKAGE_SCOPE, PACKAGE_NAME))
        candidates.append(os.path.join(config.pnpm_home, "global", "node_modules", PACKAGE_SCOPE, PACKAGE_NAME))

        # Sibling of this package in the same site-packages (node_modules) directory
        candidates.append(os.path.join(config.tool_dir, "..", PACKAGE_SCOPE, PACKAGE_NAME))

        # npm prefix in the user's home
        candidates.append(
            os.path.join(config.home_dir, ".npm-global", "lib", "node_modules", PACKAGE_SCOPE, PACKAGE_NAME)
        )

        if config.node_version:
            candidates.append(os.path.join(
                config.home_dir, ".nvm", "versions", "node", config.node_version,
                "lib", "node_modules", PACKAGE_SCOPE, PACKAGE_NAME
            ))

        candidates.extend(config.extra_search_paths)
        return candidates

    def find(self) -> str | None:
        """
        Find the first candidate directory holding gemini.js.

        Returns:
            Path to gemini.js, or None if no candidate has one
        """
        for directory in self.candidate_directories():
            script_path = os.path.join(directory, *SCRIPT_RELATIVE_PATH)
            if os.path.exists(script_path):
                self._logger.info("Found gemini.js at %s", script_path)
                return script_path

            self._logger.debug("No gemini.js at %s", script_path)

        self._logger.info("No gemini-cli installation found")
        return None

    def resolve(self, explicit_path: str | None = None) -> str | None:
        """
        Resolve the target path, preferring an explicit one.

        An explicit path is returned as given, without checking that it exists.

        Args:
            explicit_path: Path supplied by the caller, if any

        Returns:
            Path to patch, or None if nothing was supplied or found
        """
        if explicit_path:
            return explicit_path

        return self.find()
