# JSON snapshot of an installer's projects.
#
# The package manager writes its projects in its own format; a small export
# hook on that side dumps them to this JSON layout so the post-install steps
# can run out of process and the result can be applied back.

import json

from pathlib import Path
from typing import Any, Dict, List

from rnpods.xcode.model import (
    AggregateTarget,
    ConfigurationType,
    Installer,
    PBXNativeTarget,
    PBXProject,
    ProductType,
    XCBuildConfiguration,
)


def _configuration_to_dict(config: XCBuildConfiguration) -> Dict[str, Any]:
    assert config.type is not None
    return {
        "name": config.name,
        "type": config.type.value,
        "buildSettings": config.buildSettings,
    }


def _configuration_from_dict(data: Dict[str, Any]) -> XCBuildConfiguration:
    return XCBuildConfiguration(
        name=data["name"],
        buildSettings=dict(data.get("buildSettings", {})),
        type=ConfigurationType(data["type"]) if "type" in data else None,
    )


def _project_to_dict(project: PBXProject) -> Dict[str, Any]:
    return {
        "name": project.name,
        "path": project.path,
        "buildConfigurations": [
            _configuration_to_dict(c) for c in project.buildConfigurations
        ],
        "targets": [
            {
                "name": target.name,
                "podName": target.podName,
                "productType": target.productType.value,
                "buildConfigurations": [
                    _configuration_to_dict(c) for c in target.buildConfigurations
                ],
            }
            for target in project.targets
        ],
    }


def _project_from_dict(data: Dict[str, Any]) -> PBXProject:
    return PBXProject(
        name=data["name"],
        path=data["path"],
        buildConfigurations=[
            _configuration_from_dict(c) for c in data.get("buildConfigurations", [])
        ],
        targets=[
            PBXNativeTarget(
                name=target["name"],
                podName=target.get("podName"),
                productType=ProductType(target["productType"]),
                buildConfigurations=[
                    _configuration_from_dict(c)
                    for c in target.get("buildConfigurations", [])
                ],
            )
            for target in data.get("targets", [])
        ],
    )


def installer_to_dict(installer: Installer) -> Dict[str, Any]:
    user_projects = installer.user_projects()
    return {
        "podsProject": _project_to_dict(installer.podsProject),
        "userProjects": [_project_to_dict(p) for p in user_projects],
        "aggregateTargets": [
            {
                "name": aggregate.name,
                "userProject": aggregate.userProject.path,
                "xcconfigs": aggregate.xcconfigs,
            }
            for aggregate in installer.aggregateTargets
        ],
    }


def installer_from_dict(data: Dict[str, Any]) -> Installer:
    user_projects: Dict[str, PBXProject] = {}
    for project_data in data.get("userProjects", []):
        project = _project_from_dict(project_data)
        if project.path in user_projects:
            raise ValueError(f"user project {project.path} listed twice")
        user_projects[project.path] = project
    aggregates: List[AggregateTarget] = []
    for aggregate in data.get("aggregateTargets", []):
        path = aggregate["userProject"]
        if path not in user_projects:
            raise ValueError(
                f"aggregate target {aggregate['name']} refers to unknown project {path}"
            )
        aggregates.append(
            AggregateTarget(
                name=aggregate["name"],
                userProject=user_projects[path],
                xcconfigs={k: dict(v) for k, v in aggregate.get("xcconfigs", {}).items()},
            )
        )
    return Installer(
        podsProject=_project_from_dict(data["podsProject"]),
        aggregateTargets=aggregates,
    )


def load_installer(path: Path) -> Installer:
    with open(path, encoding="utf-8") as f:
        return installer_from_dict(json.load(f))


def save_installer(installer: Installer, path: Path) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(installer_to_dict(installer), f, indent=2)
        f.write("\n")
