#!/usr/bin/env python3
"""
Shared logging utilities for run-optee-vm.

Provides timestamped debug logging to file for diagnostic purposes.
"""

import time


def open_debug_file(path):
    """
    Open the debug log for appending.

    Args:
        path: Filesystem path given with --debug-file, or None.

    Returns:
        An open text file handle, or None if debug logging is disabled.
    """
    if not path:
        return None
    return open(path, "a", encoding="utf-8")


def debug_log(debug_file, message):
    """
    Write a timestamped debug message to the debug file if enabled.

    Args:
        debug_file: An open file handle for writing debug messages,
                    or None if debug logging is disabled.
        message: The debug message string to write.

    Returns:
        None
    """
    if debug_file:
        try:
            timestamp = time.time()
            debug_file.write(f"[{timestamp:.6f}] {message}\n")
            debug_file.flush()
        except (ValueError, OSError):
            # Closed file (e.g. after the launcher finished)
            pass
