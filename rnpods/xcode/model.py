# Build project model.
#
# This module defines the subset of an Xcode project (.pbxproj) that the
# post-install step edits: projects, their native targets and the build
# configurations (with their build settings) hanging off both.

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Union

# Build settings are either a single string or a list of strings
SettingValue = Union[str, List[str]]


# Boolean-like values used in build settings
class YesNo(Enum):
    YES = "YES"
    NO = "NO"


class ConfigurationType(Enum):
    DEBUG = "debug"
    RELEASE = "release"

    @staticmethod
    def from_name(name: str) -> "ConfigurationType":
        if name.lower().startswith("debug"):
            return ConfigurationType.DEBUG
        return ConfigurationType.RELEASE


# Product types used in PBXNativeTarget
class ProductType(Enum):
    APPLICATION = "com.apple.product-type.application"
    FRAMEWORK = "com.apple.product-type.framework"
    STATIC_LIBRARY = "com.apple.product-type.library.static"
    DYNAMIC_LIBRARY = "com.apple.product-type.library.dynamic"
    BUNDLE = "com.apple.product-type.bundle"
    UNIT_TEST_BUNDLE = "com.apple.product-type.unit-test.bundle"
    APP_EXTENSION = "com.apple.product-type.app-extension"


@dataclass
class XCBuildConfiguration:
    name: str
    buildSettings: Dict[str, SettingValue] = field(default_factory=dict)
    type: Optional[ConfigurationType] = None

    def __post_init__(self) -> None:
        if self.type is None:
            self.type = ConfigurationType.from_name(self.name)

    @property
    def is_debug(self) -> bool:
        return self.type == ConfigurationType.DEBUG

    @property
    def is_release(self) -> bool:
        return self.type == ConfigurationType.RELEASE


@dataclass
class PBXNativeTarget:
    name: str
    productType: ProductType
    buildConfigurations: List[XCBuildConfiguration] = field(default_factory=list)
    # Name of the pod this target was generated for (resource bundles share it)
    podName: Optional[str] = None

    def __post_init__(self) -> None:
        if self.podName is None:
            self.podName = self.name


@dataclass
class PBXProject:
    name: str
    path: str
    buildConfigurations: List[XCBuildConfiguration] = field(default_factory=list)
    targets: List[PBXNativeTarget] = field(default_factory=list)

    def find_targets(self, pod_name: str) -> Iterator[PBXNativeTarget]:
        for target in self.targets:
            if target.podName == pod_name:
                yield target


# An aggregate target owns the app's (user) project and the xcconfig files
# the package manager writes for it
@dataclass
class AggregateTarget:
    name: str
    userProject: PBXProject
    xcconfigs: Dict[str, Dict[str, str]] = field(default_factory=dict)


@dataclass
class Installer:
    podsProject: PBXProject
    aggregateTargets: List[AggregateTarget] = field(default_factory=list)

    def projects(self) -> List[PBXProject]:
        projects = [self.podsProject]
        for aggregate in self.aggregateTargets:
            if all(aggregate.userProject is not p for p in projects):
                projects.append(aggregate.userProject)
        return projects

    def user_projects(self) -> List[PBXProject]:
        return self.projects()[1:]

    def has_pod(self, pod_name: str) -> bool:
        return any(True for _ in self.podsProject.find_targets(pod_name))
