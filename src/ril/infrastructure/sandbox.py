"""
Workspace sandbox.

Writes challenge code (and its tests, if any) into a directory so it can be
run with the user's own toolchain. The core treats it as an opaque
CodeSandbox and never looks at the result.
"""

import logging
from pathlib import Path

from ril.domain.errors import SandboxError

logger = logging.getLogger(__name__)


class WorkspaceSandbox:
    def __init__(self, root: Path, extension: str = "ts"):
        self.root = Path(root)
        self.extension = extension.lstrip(".")

    @property
    def implementation_path(self) -> Path:
        return self.root / f"implementation.{self.extension}"

    @property
    def test_path(self) -> Path:
        return self.root / f"implementation.test.{self.extension}"

    def run(self, code: str, test_code: str | None = None) -> None:
        """
        Raises:
            SandboxError: If the workspace cannot be written.
        """
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            self.implementation_path.write_text(code, encoding="utf-8")
            if test_code:
                self.test_path.write_text(test_code, encoding="utf-8")
            elif self.test_path.exists():
                # Tests from a previously opened challenge would not apply.
                self.test_path.unlink()
        except OSError as e:
            raise SandboxError(f"Could not write sandbox files to {self.root}: {e}") from e
        logger.info(f"Wrote sandbox files to {self.root}")
