# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Run the project's ``codegen`` script through Yarn or NPM."""

from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Final

from .errors import CodegenError, PackageManagerNotFoundError


class PackageManager(StrEnum):
    """JavaScript package managers able to run the codegen script."""

    YARN = "yarn"
    NPM = "npm"


CODEGEN_COMMANDS: Final[dict[PackageManager, tuple[str, ...]]] = {
    PackageManager.YARN: ("yarn", "codegen"),
    PackageManager.NPM: ("npm", "run", "codegen"),
}


@dataclass(frozen=True, slots=True)
class CodegenResult:
    """Command executed for codegen and its captured output."""

    command: tuple[str, ...]
    stdout: str
    stderr: str


def detect_package_manager() -> PackageManager:
    """Return Yarn when installed, otherwise NPM.

    Raises:
        PackageManagerNotFoundError: If neither executable is on ``PATH``.
    """

    for manager in (PackageManager.YARN, PackageManager.NPM):
        if shutil.which(manager.value):
            return manager
    raise PackageManagerNotFoundError()


def run_codegen(root: Path, manager: PackageManager) -> CodegenResult:
    """Execute the codegen script in ``root``.

    Raises:
        CodegenError: If the command cannot start or exits non-zero.
    """

    command = CODEGEN_COMMANDS[manager]
    try:
        completed = subprocess.run(
            list(command),
            cwd=root,
            check=True,
            capture_output=True,
            text=True,
        )
    except subprocess.CalledProcessError as exc:
        output = (exc.stderr or exc.stdout or "").strip()
        detail = f": {output}" if output else ""
        raise CodegenError(f"Failed to run codegen ({' '.join(command)} exited {exc.returncode}){detail}") from exc
    except OSError as exc:
        raise CodegenError(f"Failed to run codegen ({' '.join(command)}): {exc}") from exc
    return CodegenResult(command=command, stdout=completed.stdout, stderr=completed.stderr)


__all__ = [
    "CODEGEN_COMMANDS",
    "CodegenResult",
    "PackageManager",
    "detect_package_manager",
    "run_codegen",
]
