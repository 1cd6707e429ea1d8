from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from rnpods.config import (
    FOLLY_COMPILER_FLAGS,
    FOLLY_VERSION,
    MIN_IOS_VERSION_SUPPORTED,
    UseFrameworks,
)
from rnpods.xcode.utils import (
    add_value_to_setting_if_missing,
    create_header_search_path_for_frameworks,
    safe_init,
)


# The parts of a third-party library's podspec these helpers edit
@dataclass
class PodSpec:
    name: str
    dependencies: Dict[str, List[str]] = field(default_factory=dict)
    compiler_flags: str = ""
    pod_target_xcconfig: Dict[str, str] = field(default_factory=dict)

    def dependency(self, pod_name: str, *requirements: str):
        self.dependencies[pod_name] = list(requirements)


def min_supported_versions() -> Dict[str, str]:
    return {"ios": MIN_IOS_VERSION_SUPPORTED}


def get_folly_config() -> Dict[str, str]:
    return {"version": FOLLY_VERSION, "compiler_flags": FOLLY_COMPILER_FLAGS}


def folly_flags() -> str:
    return FOLLY_COMPILER_FLAGS


def framework_name_for(pod_name: str, framework_name: Optional[str] = None) -> str:
    # frameworks can't have "-" in their name
    return framework_name or pod_name.replace("-", "_")


def add_dependency(
    spec: PodSpec,
    pod_name: str,
    use_frameworks: UseFrameworks,
    subspec: Optional[str] = None,
    additional_framework_paths: Sequence[str] = (),
    framework_name: Optional[str] = None,
    version: Optional[str] = None,
    base_dir: str = "PODS_CONFIGURATION_BUILD_DIR",
    platforms: Sequence[str] = (),
):
    """
    Add a dependency to a spec and, when building frameworks, the header
    search paths needed to reach its headers.
    """
    dependency_name = f"{pod_name}/{subspec}" if subspec else pod_name
    spec.dependency(dependency_name, *([version] if version else []))
    if use_frameworks == UseFrameworks.NONE:
        return
    safe_init(spec.pod_target_xcconfig, "HEADER_SEARCH_PATHS")
    for path in create_header_search_path_for_frameworks(
        base_dir,
        pod_name,
        framework_name_for(pod_name, framework_name),
        additional_framework_paths,
        platforms=platforms,
    ):
        add_value_to_setting_if_missing(spec.pod_target_xcconfig, "HEADER_SEARCH_PATHS", f'"{path}"')


def install_modules_dependencies(
    spec: PodSpec, new_arch_enabled: bool, use_frameworks: UseFrameworks
):
    """Prepare a library's podspec for the new architecture."""
    folly_config = get_folly_config()
    flags = folly_config["compiler_flags"]
    if new_arch_enabled:
        flags = f"{flags} -DRCT_NEW_ARCH_ENABLED=1"
    present = spec.compiler_flags.split()
    for flag in flags.split():
        if flag not in present:
            present.append(flag)
    spec.compiler_flags = " ".join(present)
    xcconfig = spec.pod_target_xcconfig
    safe_init(xcconfig, "HEADER_SEARCH_PATHS")
    for path in (
        '"$(PODS_ROOT)/boost"',
        '"$(PODS_ROOT)/RCT-Folly"',
        '"$(PODS_ROOT)/DoubleConversion"',
        '"$(PODS_ROOT)/fmt/include"',
        '"${PODS_CONFIGURATION_BUILD_DIR}/ReactCodegen/ReactCodegen.framework/Headers"',
    ):
        add_value_to_setting_if_missing(xcconfig, "HEADER_SEARCH_PATHS", path)
    xcconfig["CLANG_CXX_LANGUAGE_STANDARD"] = "c++20"
    if new_arch_enabled:
        safe_init(xcconfig, "OTHER_CPLUSPLUSFLAGS")
        add_value_to_setting_if_missing(xcconfig, "OTHER_CPLUSPLUSFLAGS", "-DRCT_NEW_ARCH_ENABLED=1")
    spec.dependency("React-Core")
    spec.dependency("RCT-Folly", folly_config["version"])
    spec.dependency("glog")
    if new_arch_enabled:
        spec.dependency("ReactCodegen")
        spec.dependency("RCTRequired")
        spec.dependency("RCTTypeSafety")
        spec.dependency("ReactCommon/turbomodule/core")
    for pod_name, paths in (
        ("React-Fabric", ["react/renderer/components/view/platform/cxx"]),
        ("React-graphics", ["react/renderer/graphics/platform/ios"]),
        ("React-NativeModulesApple", []),
        ("React-featureflags", []),
        ("React-debug", []),
        ("React-utils", []),
        ("React-ImageManager", []),
        ("React-rendererdebug", []),
    ):
        add_dependency(spec, pod_name, use_frameworks, additional_framework_paths=paths)
