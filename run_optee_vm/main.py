import argparse
import os
import re
import sys

from . import config as app_config, process
from .logging_utils import debug_log, open_debug_file


def parse_share_dir_argument(share_dir_arg, work_dir):
    """Parse and validate the --share-dir argument, resolving relative paths against work_dir."""
    if ':' not in share_dir_arg:
        print("Error: --share-dir format must be '/host/path:mount_tag'", file=sys.stderr)
        sys.exit(1)
    host_path, mount_tag = share_dir_arg.rsplit(':', 1)
    if not host_path:
        print("Error: --share-dir host path is empty", file=sys.stderr)
        sys.exit(1)
    if not re.match(app_config.MOUNT_TAG_PATTERN, mount_tag):
        print(f"Error: Invalid characters in mount tag '{mount_tag}'. Allowed: {app_config.MOUNT_TAG_ALLOWED_CHARS}", file=sys.stderr)
        sys.exit(1)
    return os.path.abspath(os.path.join(work_dir, host_path)), mount_tag


def resolve_work_dir(config):
    """Returns the absolute path of the OP-TEE tree QEMU is started from."""
    return os.path.abspath(os.path.join(config["base_dir"] or os.getcwd(), config["optee_dir"]))


def build_qemu_args(config, work_dir):
    """Constructs the list of arguments for the QEMU command."""
    machine = config["machine_type"] + (",secure=on" if config["secure"] else "")
    args = [
        config["qemu_executable"], "-nodefaults", "-nographic",
        "-serial", app_config.SERIAL_CONSOLE, "-serial", f"file:{config['serial_log']}",
        "-smp", str(config["smp_cores"]),
        "-machine", machine, "-cpu", config["cpu_model"],
        "-d", config["debug_items"], "-semihosting-config", config["semihosting_config"],
        "-m", config["memory"],
        "-initrd", config["initrd"],
        "-append", config["append"],
        "-kernel", config["kernel"], "-no-acpi",
    ]

    host_path, mount_tag = parse_share_dir_argument(config["share_dir"], work_dir)
    fsdev_id = config["fsdev_id"]
    args.extend([
        "-fsdev", f"local,id={fsdev_id},path={host_path},security_model={config['virtfs_security_model']}",
        "-device", f"{app_config.VIRTFS_DEVICE_MODEL},fsdev={fsdev_id},mount_tag={mount_tag}",
    ])

    network_id = config["network_id"]
    args.extend([
        "-netdev", f"{app_config.NETWORK_MODE},id={network_id}",
        "-device", f"{app_config.NETWORK_DEVICE_MODEL},netdev={network_id}",
    ])

    if config.get("bios"):
        args.extend(["-bios", config["bios"]])

    return args


def create_parser():
    """Builds the command-line parser; defaults come from the config module."""
    parser = argparse.ArgumentParser(description="Boot the OP-TEE qemuv8 test VM (AArch64 with TrustZone).", formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--base-dir", default=None, help="Directory containing the OP-TEE tree. Defaults to the current directory.")
    parser.add_argument("--optee-dir", default=app_config.OPTEE_DIR, help=f"OP-TEE tree QEMU runs from, relative to --base-dir. Default: {app_config.OPTEE_DIR}")
    parser.add_argument("--kernel", default=app_config.KERNEL, help="Kernel image, relative to the OP-TEE tree.")
    parser.add_argument("--initrd", default=app_config.INITRD, help="Compressed initial ramdisk, relative to the OP-TEE tree.")
    parser.add_argument("--append", default=app_config.KERNEL_CMDLINE, help="Kernel command line.")
    parser.add_argument("--bios", default=app_config.BIOS, help="Optional firmware image passed to QEMU's -bios.")
    parser.add_argument("--serial-log", default=app_config.SERIAL_LOG, help=f"File receiving the second UART. Default: {app_config.SERIAL_LOG}")
    parser.add_argument("--share-dir", default=app_config.SHARE_DIR, metavar="/HOST/PATH:MOUNT_TAG", help=f"Host directory exported over 9P. Default: {app_config.SHARE_DIR}")

    parser.add_argument("--machine-type", default=app_config.MACHINE_TYPE, help="QEMU machine type.")
    parser.add_argument("--no-secure", dest="secure", action="store_false", default=app_config.SECURE, help="Do not enable the TrustZone secure world.")
    parser.add_argument("--cpu-model", default=app_config.CPU_MODEL, help="CPU model to emulate.")
    parser.add_argument("--memory", default=app_config.MEMORY, help="RAM for the VM.")
    parser.add_argument("--smp-cores", type=int, default=app_config.SMP_CORES, help="Number of CPU cores.")

    parser.add_argument("--dry-run", action="store_true", help="Print the QEMU command and exit without running it.")
    parser.add_argument("--debug-file", default=None, help="Append timestamped diagnostics to this file.")

    suppressed_args = {
        "qemu_executable": app_config.QEMU_EXECUTABLE, "debug_items": app_config.DEBUG_ITEMS,
        "semihosting_config": app_config.SEMIHOSTING_CONFIG, "fsdev_id": app_config.FSDEV_ID,
        "virtfs_security_model": app_config.VIRTFS_SECURITY_MODEL, "network_id": app_config.NETWORK_ID,
    }
    for arg, default_val in suppressed_args.items():
        cli_arg = f"--{arg.replace('_', '-')}"
        parser.add_argument(cli_arg, default=default_val, help=argparse.SUPPRESS)

    return parser


def launch(config):
    """Changes into the OP-TEE tree, runs QEMU and returns its exit status."""
    debug_file = config.get('debug_handle')
    work_dir = resolve_work_dir(config)
    debug_log(debug_file, f"CONFIG: {sorted((k, v) for k, v in config.items() if k != 'debug_handle')}")
    debug_log(debug_file, f"WORKDIR: {work_dir}")

    args = build_qemu_args(config, work_dir)

    if not config.get('dry_run'):
        try:
            os.chdir(work_dir)
        except OSError as e:
            print(f"Error: Cannot change into OP-TEE directory '{work_dir}': {e.strerror}", file=sys.stderr)
            return 1
        print(f"Info: Working directory is {work_dir}")
        print(f"Info: Secure-world serial output is written to {config['serial_log']}")

    return process.run_qemu(args, config)


def main(argv=None):
    """Parses command-line arguments and launches the VM."""
    parser = create_parser()
    args = parser.parse_args(argv)
    config = vars(args)

    if config["smp_cores"] < 1:
        parser.error("--smp-cores must be at least 1.")

    try:
        debug_file = open_debug_file(config["debug_file"])
    except OSError as e:
        print(f"Error: Cannot open debug file '{config['debug_file']}': {e.strerror}", file=sys.stderr)
        sys.exit(1)

    config['debug_handle'] = debug_file
    try:
        return_code = launch(config)
    finally:
        if debug_file:
            debug_file.close()

    sys.exit(return_code)
