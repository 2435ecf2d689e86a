"""Unified settings — CLI flags and env vars in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``KOOPA_*`` prefix
  3. Code defaults

Shell bindings are not settings: they come from the config cascade
(:mod:`koopa.config.cascade`) and from ``-s`` flags.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings


class KoopaSettings(BaseSettings):
    """Settings for a single ``kp`` invocation.

    Stored in ``click.Context.obj`` (through ``AppContext``) at the CLI root.

    Attributes:
        home_dir: Directory whose ``.koopa/`` folder is the lowest-precedence
            config.  Defaults to the user's home.
        work_dir: Directory whose ancestors contribute config and against
            which relative paths are resolved.  Defaults to the CWD.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "KOOPA_",
    }

    # --- Environment ---
    home_dir: Path = Field(default_factory=Path.home)
    work_dir: Path = Field(default_factory=Path.cwd)

    # --- CLI flags ---
    verbose: bool = False
    force: bool = False
    list_mode: bool = False
    ignore_home: bool = False
    ignore_work: bool = False
    json_output: bool = False
    log_json: bool = False

    @classmethod
    def from_cli(cls, **cli_flags: Any) -> KoopaSettings:
        """Construct settings from a CLI invocation.

        Flags left unset (``None`` or ``False``) are dropped so ``KOOPA_*``
        env vars and defaults apply.
        """
        return cls(**{k: v for k, v in cli_flags.items() if v is not None and v is not False})

    def resolve_path(self, path: Path) -> Path:
        """Anchor a relative *path* at :attr:`work_dir`."""
        if path.is_absolute():
            return path
        return self.work_dir / path
