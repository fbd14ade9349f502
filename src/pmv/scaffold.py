"""Project scaffolding: validate a name, then instantiate the template."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .config import ScaffoldConfig
from .engine import InstantiationResult, Instantiator

__all__ = ["ProjectScaffolder", "create_project"]

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class ProjectScaffolder:
    """Create a new project from the template described by a :class:`ScaffoldConfig`."""

    instantiator: Instantiator = field(default_factory=Instantiator)

    def create(self, config: ScaffoldConfig) -> InstantiationResult:
        """Instantiate ``config.template`` for ``config.name`` at ``config.destination``."""

        LOGGER.debug("creating %s from %s", config.name, config.template.location)
        return self.instantiator.instantiate(config.template, config.name, config.destination)


def create_project(
    raw_name: str,
    destination: str | Path | None = None,
    *,
    template_dir: str | Path | None = None,
) -> InstantiationResult:
    """Validate ``raw_name`` and create the project in one call.

    The name is validated before any filesystem access, so an invalid name
    never produces output.
    """

    config = ScaffoldConfig.from_name(raw_name, destination=destination, template_dir=template_dir)
    return ProjectScaffolder().create(config)
