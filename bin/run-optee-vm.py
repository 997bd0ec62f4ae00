#!/usr/bin/env python3
"""
Executable entry point for run-optee-vm.

Puts the project root on the Python path so the `run_optee_vm` package can be
imported from a source checkout, then runs `run_optee_vm.main.main`.
"""

import sys
from pathlib import Path

# The script is in `bin/`, so the project root is two levels up.
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from run_optee_vm.main import main

if __name__ == "__main__":
    main()
