# --- Global Configuration & Executable Paths ---

# The OP-TEE build tree QEMU is started from; kernel and rootfs paths are relative to it.
OPTEE_DIR = "optee-qemuv8-3.4.0"
# The QEMU binary built alongside the OP-TEE tree.
QEMU_EXECUTABLE = "/work/rust-optee-trustzone-sdk/optee-qemuv8-3.4.0/qemu/aarch64-softmmu/qemu-system-aarch64"
# The virtual machine type QEMU will emulate.
MACHINE_TYPE = "virt"
# Whether to expose the TrustZone secure world to the guest; OP-TEE needs it.
SECURE = True
# The CPU model to emulate; cortex-a57 is what the OP-TEE qemuv8 platform targets.
CPU_MODEL = "cortex-a57"
# The amount of RAM (MiB) to allocate to the virtual machine.
MEMORY = "1057"
# The default number of virtual CPU cores for the guest system.
SMP_CORES = 2
# QEMU log items passed to -d; 'unimp' reports unimplemented device accesses.
DEBUG_ITEMS = "unimp"
# Let secure-world code reach host I/O through semihosting.
SEMIHOSTING_CONFIG = "enable=on,target=native"
# Optional firmware image passed to -bios (e.g. out/bin/bl1.bin from the OP-TEE build).
BIOS = None

# --- Boot Images ---

INITRD = "./rootfs.cpio.gz"
KERNEL = "./Image"
KERNEL_CMDLINE = "console=ttyAMA0,38400 keep_bootcon root=/dev/vda2"

# --- Serial Console Configuration ---

# UART0 goes to the controlling terminal, UART1 (secure world) goes to this file.
SERIAL_CONSOLE = "stdio"
SERIAL_LOG = "/tmp/serial.log"

# --- Network Configuration ---

NETWORK_MODE = "user"
NETWORK_ID = "vmnic"
NETWORK_DEVICE_MODEL = "virtio-net-device"

# --- Directory Sharing Configuration ---

# Host directory (relative to the OP-TEE tree) and the 9P tag the guest mounts it by.
SHARE_DIR = "../shared:host"
FSDEV_ID = "fsdev0"
VIRTFS_DEVICE_MODEL = "virtio-9p-device"
VIRTFS_SECURITY_MODEL = "none"
MOUNT_TAG_PATTERN = r'^[a-zA-Z0-9_]+$'
MOUNT_TAG_ALLOWED_CHARS = "letters (a-z, A-Z), numbers (0-9), and underscores (_)"
