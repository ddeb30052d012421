"""
Clipboard
=========
Copies generated scripts to the system clipboard by piping them into the
first clipboard command found on PATH.
"""
import shutil
import subprocess
from typing import List, Optional

from logging_config import log

# Tried in order; first one found on PATH wins
CLIPBOARD_COMMANDS: List[List[str]] = [
    ["pbcopy"],
    ["wl-copy"],
    ["xclip", "-selection", "clipboard"],
    ["xsel", "--clipboard", "--input"],
    ["clip"],
]

CLIPBOARD_TIMEOUT_SECONDS = 5


class ClipboardError(RuntimeError):
    """Copying to the clipboard failed. Nothing else is affected; retry is safe."""


def find_clipboard_command() -> Optional[List[str]]:
    for command in CLIPBOARD_COMMANDS:
        if shutil.which(command[0]):
            return command
    return None


def copy_to_clipboard(text: str) -> str:
    """
    Copy text to the system clipboard.

    Returns:
        Name of the clipboard command used

    Raises:
        ClipboardError: no clipboard command available, or it failed
    """
    command = find_clipboard_command()
    if command is None:
        raise ClipboardError("No clipboard command available (tried pbcopy, wl-copy, xclip, xsel, clip)")

    try:
        subprocess.run(
            command,
            input=text.encode("utf-8"),
            check=True,
            timeout=CLIPBOARD_TIMEOUT_SECONDS,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
        )
    except subprocess.CalledProcessError as e:
        stderr = (e.stderr or b"").decode("utf-8", errors="replace").strip()
        raise ClipboardError(f"{command[0]} exited with {e.returncode}: {stderr}") from e
    except (OSError, subprocess.TimeoutExpired) as e:
        raise ClipboardError(f"{command[0]} failed: {e}") from e

    log(f"[Clipboard] Copied {len(text)} chars via {command[0]}", level='DEBUG')
    return command[0]
