from integration_operator.builder.context import (
    BuildContext,
    BuildRequest,
    BuildToolRunner,
    Dependency,
    Plugin,
    Project,
    new_build_context,
)
from integration_operator.builder.maven import MavenRunner, create_structure, extra_options
from integration_operator.builder.quarkus import quarkus_steps
from integration_operator.builder.steps import compute_dependencies, default_steps

__all__ = [
    "BuildContext",
    "BuildRequest",
    "BuildToolRunner",
    "Dependency",
    "MavenRunner",
    "Plugin",
    "Project",
    "compute_dependencies",
    "create_structure",
    "default_steps",
    "extra_options",
    "new_build_context",
    "quarkus_steps",
]
