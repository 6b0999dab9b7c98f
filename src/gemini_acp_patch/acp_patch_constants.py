"""Fixed text and path fragments used to locate and patch gemini.js."""

# Code inserted before the sandbox check.  The exact bytes are part of the tool's
# contract: anything detecting the patch must search for PATCH_MARKER.
PATCH_CODE = """
    // [PATCHED] Early exit for ACP mode - must happen before sandbox/relaunch logic
    // to preserve stdin for JSON-RPC communication. ACP mode uses stdin/stdout
    // for the JSON-RPC protocol, so we cannot let readStdin() consume it or
    // let relaunchAppInChildProcess interfere with the streams.
    if (argv.experimentalAcp) {
        const config = await loadCliConfig(settings.merged, sessionId, argv);
        return runZedIntegration(config, settings, argv);
    }
"""

# First occurrence marks the insertion point
ANCHOR_MARKER = "// hop into sandbox if we are outside and sandboxing is enabled"

PATCH_MARKER = "// [PATCHED] Early exit for ACP mode"

# Separates the inserted block from the anchor line
ANCHOR_INDENT = "\n    "

BACKUP_SUFFIX = ".backup"

PACKAGE_SCOPE = "@google"
PACKAGE_NAME = "gemini-cli"
SCRIPT_RELATIVE_PATH = ("dist", "src", "gemini.js")
