import subprocess
import sys

from .logging_utils import debug_log


def format_command(args):
    """Renders the QEMU command one argument per line, ready to paste into a shell."""
    formatted_command = f"{args[0]} \\\n"
    formatted_command += " \\\n".join([f"    {subprocess.list2cmdline([arg])}" for arg in args[1:]])
    return formatted_command


def _wait_after_interrupt(process, debug_file):
    """Waits for QEMU to act on the SIGINT the terminal delivered to the whole process group."""
    debug_log(debug_file, f"PROCESS: Interrupted, waiting for pid {process.pid}")
    try:
        return_code = process.wait()
    except KeyboardInterrupt:
        # Second Ctrl-C: stop waiting politely.
        process.kill()
        return_code = process.wait()
    print("\nInterrupted")
    return return_code


def run_qemu(args, config):
    """Executes the QEMU command in the foreground and returns its exit status."""
    debug_file = config.get('debug_handle')

    print("--- Starting QEMU with the following command ---", flush=True)
    print(format_command(args), flush=True)
    print("-" * 50, flush=True)
    debug_log(debug_file, f"COMMAND: {subprocess.list2cmdline(args)}")

    if config.get('dry_run'):
        print("Info: Dry run requested, not starting QEMU.")
        return 0

    try:
        process = subprocess.Popen(args)
    except FileNotFoundError:
        print(f"Error: QEMU executable '{args[0]}' not found.", file=sys.stderr)
        return 1
    except PermissionError:
        print(f"Error: QEMU executable '{args[0]}' is not executable.", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: Cannot run QEMU executable '{args[0]}': {e.strerror}", file=sys.stderr)
        return 1

    debug_log(debug_file, f"PROCESS: Started pid {process.pid}")
    try:
        return_code = process.wait()
    except KeyboardInterrupt:
        return_code = _wait_after_interrupt(process, debug_file)

    debug_log(debug_file, f"PROCESS: Exited with status {return_code}")
    if return_code < 0:
        # Killed by a signal; report it the way a shell would.
        return 128 - return_code
    return return_code
