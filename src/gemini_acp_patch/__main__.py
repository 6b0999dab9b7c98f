"""
CLI entry point for the Gemini CLI ACP Patch tool.

This allows the tool to be run as:
    python -m gemini_acp_patch [path/to/gemini.js]
"""

import sys
from gemini_acp_patch.cli import main

if __name__ == "__main__":
    sys.exit(main())
