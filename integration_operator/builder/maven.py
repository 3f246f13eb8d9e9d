"""Maven project generation and invocation."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Sequence

from integration_operator.builder.context import Dependency, Project
from integration_operator.foundation.process import CommandError, run_command
from integration_operator.framework.errors import BuildStepError

logger = logging.getLogger(__name__)

POM_NAMESPACE = "http://maven.apache.org/POM/4.0.0"


def extra_options(local_repository: str | None) -> list[str]:
    if not local_repository:
        return []
    return [f"-Dmaven.repo.local={local_repository}"]


def _text(parent: ET.Element, tag: str, value: str | None) -> None:
    if value:
        ET.SubElement(parent, tag).text = value


def _dependency_element(parent: ET.Element, dep: Dependency) -> None:
    node = ET.SubElement(parent, "dependency")
    _text(node, "groupId", dep.group_id)
    _text(node, "artifactId", dep.artifact_id)
    _text(node, "version", dep.version)
    _text(node, "type", dep.type)
    _text(node, "scope", dep.scope)


def render_pom(project: Project) -> str:
    root = ET.Element("project", {"xmlns": POM_NAMESPACE})
    _text(root, "modelVersion", "4.0.0")
    _text(root, "groupId", project.group_id)
    _text(root, "artifactId", project.artifact_id)
    _text(root, "version", project.version)

    if project.dependency_management:
        managed = ET.SubElement(ET.SubElement(root, "dependencyManagement"), "dependencies")
        for dep in project.dependency_management:
            _dependency_element(managed, dep)

    deps = ET.SubElement(root, "dependencies")
    for dep in project.dependencies:
        _dependency_element(deps, dep)

    if project.plugins:
        plugins = ET.SubElement(ET.SubElement(root, "build"), "plugins")
        for plugin in project.plugins:
            node = ET.SubElement(plugins, "plugin")
            _text(node, "groupId", plugin.group_id)
            _text(node, "artifactId", plugin.artifact_id)
            _text(node, "version", plugin.version)
            if plugin.goals:
                execution = ET.SubElement(ET.SubElement(node, "executions"), "execution")
                goals = ET.SubElement(execution, "goals")
                for goal in plugin.goals:
                    _text(goals, "goal", goal)

    ET.indent(root)
    return ET.tostring(root, encoding="unicode", xml_declaration=True) + "\n"


def create_structure(path: str | Path, project: Project) -> Path:
    """Write `pom.xml` for the project under `path` and return its location."""

    base = Path(path)
    base.mkdir(parents=True, exist_ok=True)
    pom = base / "pom.xml"
    pom.write_text(render_pom(project), encoding="utf-8")
    logger.debug("Wrote %s", pom)
    return pom


class MavenRunner:
    """Runs the external `mvn` executable inside a generated project directory."""

    def __init__(self, executable: str = "mvn", options: Sequence[str] = ()) -> None:
        self.executable = executable
        self.options = list(options)

    def command(self, *options: str) -> list[str]:
        return [self.executable, "--batch-mode", *self.options, *options]

    def run(self, path: str | Path, *options: str) -> None:
        command = self.command(*options)
        logger.info("Running %s in %s", " ".join(command), path)
        try:
            run_command(command, cwd=path)
        except CommandError as exc:
            raise BuildStepError(f"Maven exited with code {exc.returncode} in {path}") from exc
        except FileNotFoundError as exc:
            raise BuildStepError(f"Maven executable not found: {self.executable}") from exc
