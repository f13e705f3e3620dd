# Copyright (c) 2024 Platctx Contributors
# MIT License

"""Default interactive shell commands."""

from typing import List

WINDOWS_SHELL_COMMAND_NAME = "cmd.exe"
LINUX_SHELL_COMMAND_NAME = "/bin/sh"

LINUX_COMMAND = (LINUX_SHELL_COMMAND_NAME, "-i", "-l")
WINDOWS_COMMAND = (WINDOWS_SHELL_COMMAND_NAME,)


def default_interactive_shell_command(is_windows: bool) -> str:
    """Get the interactive shell as a single command string."""
    if is_windows:
        return WINDOWS_SHELL_COMMAND_NAME
    return " ".join(LINUX_COMMAND)


def default_interactive_command_elements(is_windows: bool) -> List[str]:
    """Get the interactive shell as an argument list (a fresh copy)."""
    return list(WINDOWS_COMMAND if is_windows else LINUX_COMMAND)
