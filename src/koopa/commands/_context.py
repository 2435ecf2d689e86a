"""AppContext — shared state for one ``kp`` invocation.

Created once by the CLI entry point.  Provides lazy cascade discovery and
centralized result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from koopa.domain.shells import ShellMap
from koopa.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from koopa.config.cascade import Cascade
    from koopa.config.settings import KoopaSettings
    from koopa.services.result import ServiceResult


class AppContext:
    """Holds settings, explicit shells, and the (lazily built) cascade.

    The cascade is discovered on first use so ``--help``, ``--version``,
    and usage errors never touch the filesystem.
    """

    def __init__(self, settings: KoopaSettings, explicit: ShellMap | None = None) -> None:
        self.settings = settings
        self.explicit = explicit if explicit is not None else ShellMap()
        self._cascade: Cascade | None = None

        from koopa.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def cascade(self) -> Cascade:
        """The config cascade (discovered lazily on first access)."""
        if self._cascade is None:
            from koopa.config.cascade import Cascade

            self._cascade = Cascade.discover(
                home=None if self.settings.ignore_home else self.settings.home_dir,
                work=None if self.settings.ignore_work else self.settings.work_dir,
                explicit=self.explicit,
            )
        return self._cascade

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
            click.echo(output, err=True)
            raise SystemExit(1)
