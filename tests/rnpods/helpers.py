import json

from pathlib import Path
from typing import Optional

from rnpods.config import BuildConfiguration, SemVer, UseFrameworks
from rnpods.xcode.model import (
    AggregateTarget,
    Installer,
    PBXNativeTarget,
    PBXProject,
    ProductType,
    XCBuildConfiguration,
)


def make_config(**overrides) -> BuildConfiguration:
    values = dict(
        new_arch_enabled=False,
        fabric_enabled=False,
        hermes_enabled=True,
        use_frameworks=UseFrameworks.NONE,
        react_native_version=SemVer(0, 74, 0),
        app_path="..",
        config_file_dir="",
        react_native_path="../node_modules/react-native",
        installation_root=Path("."),
    )
    values.update(overrides)
    return BuildConfiguration(**values)


def write_react_native(root: Path, version: Optional[str] = "0.74.0", hermes_tag: str = "") -> Path:
    react_native = root.joinpath("node_modules", "react-native")
    react_native.mkdir(parents=True, exist_ok=True)
    if version is not None:
        react_native.joinpath("package.json").write_text(
            json.dumps({"name": "react-native", "version": version}), encoding="utf-8"
        )
    if hermes_tag:
        sdks = react_native.joinpath("sdks")
        sdks.mkdir(exist_ok=True)
        sdks.joinpath(".hermesversion").write_text(hermes_tag + "\n", encoding="utf-8")
    return react_native


def _configs(**settings):
    return [
        XCBuildConfiguration(name="Debug", buildSettings=dict(settings)),
        XCBuildConfiguration(name="Release", buildSettings=dict(settings)),
    ]


def make_installer() -> Installer:
    pods_project = PBXProject(
        name="Pods",
        path="Pods/Pods.xcodeproj",
        buildConfigurations=_configs(
            LIBRARY_SEARCH_PATHS=[
                "$(TOOLCHAIN_DIR)/usr/lib/swift/$(PLATFORM_NAME)",
                "$(inherited)",
            ]
        ),
        targets=[
            PBXNativeTarget(
                name="React-Core",
                productType=ProductType.STATIC_LIBRARY,
                buildConfigurations=_configs(
                    CLANG_CXX_LANGUAGE_STANDARD="c++20",
                    IPHONEOS_DEPLOYMENT_TARGET="12.0",
                ),
            ),
            PBXNativeTarget(
                name="React-Core-AccessibilityResources",
                podName="React-Core",
                productType=ProductType.BUNDLE,
                buildConfigurations=_configs(),
            ),
            PBXNativeTarget(
                name="React-hermes",
                productType=ProductType.STATIC_LIBRARY,
                buildConfigurations=_configs(IPHONEOS_DEPLOYMENT_TARGET="15.1"),
            ),
            PBXNativeTarget(
                name="React-RCTFabric",
                productType=ProductType.STATIC_LIBRARY,
                buildConfigurations=_configs(),
            ),
            PBXNativeTarget(
                name="glog",
                productType=ProductType.STATIC_LIBRARY,
                buildConfigurations=_configs(),
            ),
        ],
    )
    user_project = PBXProject(
        name="App",
        path="App.xcodeproj",
        buildConfigurations=_configs(),
        targets=[
            PBXNativeTarget(
                name="App",
                productType=ProductType.APPLICATION,
                buildConfigurations=_configs(),
            )
        ],
    )
    return Installer(
        podsProject=pods_project,
        aggregateTargets=[
            AggregateTarget(
                name="Pods-App",
                userProject=user_project,
                xcconfigs={"Debug": {}, "Release": {}},
            )
        ],
    )


class FakePackageManager:
    def __init__(self):
        self.pods = []

    def pod(self, name, **options):
        self.pods.append((name, options))


class UpdatingPackageManager(FakePackageManager):
    def __init__(self):
        super().__init__()
        self.updated = []

    def update_pods(self, names):
        self.updated.extend(names)


class RecordingRunner:
    def __init__(self):
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
