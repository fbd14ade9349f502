"""Resolve the inputs of a scaffolding run."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from .naming import ProjectName, validate
from .source import DirectoryTemplateSource, TemplateSource, builtin_template
from .template import TemplateRenderer


@dataclass(slots=True)
class ScaffoldConfig:
    """Everything the engine needs to create one project.

    Attributes
    ----------
    name:
        The validated project name substituted into the template.
    destination:
        Absolute path of the directory that will hold the new project.
    template:
        Where the template tree is read from. Defaults to the bundled
        Rust scripting template.
    """

    name: ProjectName
    destination: Path
    template: TemplateSource

    @classmethod
    def from_name(
        cls,
        raw_name: str,
        *,
        destination: str | Path | None = None,
        template_dir: str | Path | None = None,
        cwd: str | Path | None = None,
    ) -> "ScaffoldConfig":
        """Build a :class:`ScaffoldConfig` from user supplied values.

        Parameters
        ----------
        raw_name:
            The project name as typed by the user. Raises
            :class:`~pmv.errors.ProjectNameError` if it is not acceptable.
        destination:
            Where to create the project. Relative paths are resolved against
            ``cwd``. Defaults to a directory named after the project in ``cwd``.
        template_dir:
            Use a template stored in this directory instead of the built-in one.
        cwd:
            Base directory for relative paths; the process working directory
            when omitted.
        """

        name = validate(raw_name)
        base = Path(cwd).expanduser() if cwd is not None else Path.cwd()

        if destination is None:
            target = base / name
        else:
            target = Path(destination).expanduser()
            if not target.is_absolute():
                target = base / target

        template: TemplateSource
        if template_dir is None:
            template = builtin_template()
        else:
            template_root = Path(template_dir).expanduser()
            template = DirectoryTemplateSource(template_root if template_root.is_absolute() else base / template_root)
        return cls(name=name, destination=target.absolute(), template=template)

    def context(self) -> Mapping[str, str]:
        """Return the value each placeholder token will be replaced with."""

        return dict(TemplateRenderer(self.name).values)
