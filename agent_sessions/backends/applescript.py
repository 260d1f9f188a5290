"""AppleScript execution helpers.

Focus scripts return the string "found" when they matched something. A zero
exit status alone only means the script ran, not that it matched.
"""

import logging
import subprocess

logger = logging.getLogger(__name__)

FOUND = "found"
NOT_FOUND = "not found"
DEFAULT_TIMEOUT = 5


class UnsafeScriptInput(ValueError):
    """Raised when a value can't be embedded in an AppleScript string literal."""


def quote_applescript(value: str) -> str:
    """Wrap a value in AppleScript double quotes.

    Values are interpolated into script source, so anything that could close
    the literal (quotes, backslashes, control characters) is rejected.

    Raises:
        UnsafeScriptInput: If the value contains such characters.
    """
    if any(ch in value for ch in ('"', "\\")) or any(ord(ch) < 32 or ord(ch) == 127 for ch in value):
        raise UnsafeScriptInput(f"Refusing to embed {value!r} in AppleScript")
    return f'"{value}"'


def run_osascript(script: str, timeout: int = DEFAULT_TIMEOUT) -> tuple[int, str, str]:
    """Run an AppleScript.

    Args:
        script: Script source.
        timeout: Command timeout in seconds.

    Returns:
        Tuple of (return_code, stdout, stderr).
    """
    try:
        result = subprocess.run(
            ["osascript", "-e", script],
            capture_output=True,
            text=True,
            timeout=timeout,
        )
        return (result.returncode, result.stdout or "", result.stderr or "")
    except subprocess.TimeoutExpired:
        return (1, "", "Command timed out")
    except FileNotFoundError:
        return (1, "", "osascript not found")


def run_found_script(script: str, timeout: int = DEFAULT_TIMEOUT) -> bool:
    """Run a focus script and report whether it returned "found"."""
    returncode, stdout, stderr = run_osascript(script, timeout=timeout)
    if returncode != 0:
        logger.debug(f"AppleScript error: {stderr.strip()}")
        return False
    return stdout.strip() == FOUND


def is_app_running(process_name: str, timeout: int = DEFAULT_TIMEOUT) -> bool:
    """Check whether an application process is running, via System Events."""
    try:
        name = quote_applescript(process_name)
    except UnsafeScriptInput:
        return False
    script = f'tell application "System Events" to return (exists process {name})'
    returncode, stdout, _ = run_osascript(script, timeout=timeout)
    return returncode == 0 and stdout.strip() == "true"
