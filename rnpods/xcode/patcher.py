# Post-install project patcher.
#
# Every step below edits an already generated project in place and must be
# safe to run more than once: values are only added when missing and only
# removed when present. Flags are read from the resolved BuildConfiguration.

import sys

from typing import Optional, Tuple

from rnpods.config import (
    FOLLY_COMPILER_FLAGS,
    MIN_IOS_VERSION_SUPPORTED,
    BuildConfiguration,
    UseFrameworks,
)
from rnpods.xcode.model import Installer, ProductType, YesNo
from rnpods.xcode.utils import (
    add_value_to_setting_if_missing,
    parse_version,
    remove_value_from_setting_if_present,
    safe_init,
)

GCC_PREPROCESSOR_DEFINITIONS = "GCC_PREPROCESSOR_DEFINITIONS"
HEADER_SEARCH_PATHS = "HEADER_SEARCH_PATHS"
LIBRARY_SEARCH_PATHS = "LIBRARY_SEARCH_PATHS"
OTHER_CPLUSPLUSFLAGS = "OTHER_CPLUSPLUSFLAGS"
OTHER_LDFLAGS = "OTHER_LDFLAGS"
DEPLOYMENT_TARGET = "IPHONEOS_DEPLOYMENT_TARGET"

HERMES_PODS = ["React-hermes", "hermes-engine", "React-RuntimeHermes"]
HERMES_DEBUGGER_DEFINITION = "HERMES_ENABLE_DEBUGGER=1"

SWIFT_SDK_LIBRARY_PATH = "$(SDKROOT)/usr/lib/swift"
SWIFT_TOOLCHAIN_LIBRARY_PATH = "$(TOOLCHAIN_DIR)/usr/lib/swift/$(PLATFORM_NAME)"

FRAMEWORK_HEADER_SEARCH_PATHS = [
    "${PODS_CONFIGURATION_BUILD_DIR}/ReactCommon/ReactCommon.framework/Headers",
    "${PODS_CONFIGURATION_BUILD_DIR}/ReactCommon/ReactCommon.framework/Headers/react/nativemodule/core",
    "${PODS_CONFIGURATION_BUILD_DIR}/ReactCommon-Samples/ReactCommon_Samples.framework/Headers",
    "${PODS_CONFIGURATION_BUILD_DIR}/ReactCommon-Samples/ReactCommon_Samples.framework/Headers/platform/ios",
    "${PODS_CONFIGURATION_BUILD_DIR}/React-NativeModulesApple/React_NativeModulesApple.framework/Headers",
    "${PODS_CONFIGURATION_BUILD_DIR}/React-graphics/React_graphics.framework/Headers/react/renderer/graphics/platform/ios",
]

CCACHE_CLANG = "$(REACT_NATIVE_PATH)/scripts/xcode/ccache-clang.sh"
CCACHE_CLANGPP = "$(REACT_NATIVE_PATH)/scripts/xcode/ccache-clang++.sh"
CCACHE_SETTINGS = {
    "CC": CCACHE_CLANG,
    "LD": CCACHE_CLANG,
    "CXX": CCACHE_CLANGPP,
    "LDPLUSPLUS": CCACHE_CLANGPP,
}

LIBCPP_CXX17_FIX = "_LIBCPP_ENABLE_CXX17_REMOVED_UNARY_BINARY_FUNCTION"
XCODE15_LD_CLASSIC = "-Wl -ld_classic"

DYNAMIC_FRAMEWORKS_FLAG = "-DRCT_DYNAMIC_FRAMEWORKS=1"
NEW_ARCH_FLAG = "-DRCT_NEW_ARCH_ENABLED=1"
NDEBUG_DEFINITION = "NDEBUG=1"
NDEBUG_FLAG = "-DNDEBUG"


def turn_off_resource_bundle_react_core(installer: Installer) -> None:
    # Xcode 14 refuses to sign resource bundles without a team
    for target in installer.podsProject.find_targets("React-Core"):
        if target.productType != ProductType.BUNDLE:
            continue
        for config in target.buildConfigurations:
            config.buildSettings["CODE_SIGNING_ALLOWED"] = YesNo.NO.value


def apply_mac_catalyst_patches(installer: Installer) -> None:
    for target in installer.podsProject.targets:
        if target.productType != ProductType.BUNDLE:
            continue
        for config in target.buildConfigurations:
            config.buildSettings["CODE_SIGN_IDENTITY[sdk=macosx*]"] = "-"
    for project in installer.user_projects():
        for target in project.targets:
            for config in target.buildConfigurations:
                config.buildSettings["DEAD_CODE_STRIPPING"] = YesNo.YES.value
                config.buildSettings["PRESERVE_DEAD_CODE_INITS_AND_TERMS"] = YesNo.YES.value
                config.buildSettings[LIBRARY_SEARCH_PATHS] = [
                    "$(SDKROOT)/usr/lib/swift",
                    "$(SDKROOT)/System/iOSSupport/usr/lib/swift",
                    "$(inherited)",
                ]


def set_gcc_preprocessor_definition_for_hermes(installer: Installer) -> None:
    for pod_name in HERMES_PODS:
        for target in installer.podsProject.find_targets(pod_name):
            for config in target.buildConfigurations:
                if not config.is_debug:
                    continue
                safe_init(config.buildSettings, GCC_PREPROCESSOR_DEFINITIONS)
                add_value_to_setting_if_missing(
                    config.buildSettings,
                    GCC_PREPROCESSOR_DEFINITIONS,
                    HERMES_DEBUGGER_DEFINITION,
                )


def _fix_library_search_path(settings) -> None:
    search_paths = settings.get(LIBRARY_SEARCH_PATHS)
    if not search_paths:
        return
    if isinstance(search_paths, str):
        search_paths = search_paths.split()
    # The toolchain copy of the swift libraries is not built for arm64
    search_paths = [
        p
        for p in search_paths
        if p.strip('"') != SWIFT_TOOLCHAIN_LIBRARY_PATH
    ]
    if not any(p.strip('"') == SWIFT_SDK_LIBRARY_PATH for p in search_paths):
        search_paths.insert(0, SWIFT_SDK_LIBRARY_PATH)
    settings[LIBRARY_SEARCH_PATHS] = search_paths


def fix_library_search_paths(installer: Installer) -> None:
    for project in installer.projects():
        for config in project.buildConfigurations:
            _fix_library_search_path(config.buildSettings)
        for target in project.targets:
            for config in target.buildConfigurations:
                _fix_library_search_path(config.buildSettings)


def update_search_paths(installer: Installer, config: BuildConfiguration) -> None:
    if config.use_frameworks == UseFrameworks.NONE:
        return
    for project in installer.projects():
        for build_config in project.buildConfigurations:
            safe_init(build_config.buildSettings, HEADER_SEARCH_PATHS)
            for path in FRAMEWORK_HEADER_SEARCH_PATHS:
                add_value_to_setting_if_missing(
                    build_config.buildSettings, HEADER_SEARCH_PATHS, path
                )


def set_use_hermes_build_setting(installer: Installer, hermes_enabled: bool) -> None:
    print("Setting USE_HERMES build settings")
    value = "true" if hermes_enabled else "false"
    for project in installer.projects():
        for config in project.buildConfigurations:
            config.buildSettings["USE_HERMES"] = value


def set_node_modules_user_settings(installer: Installer, react_native_path: str) -> None:
    print("Setting REACT_NATIVE build settings")
    value = f"${{PODS_ROOT}}/../{react_native_path}"
    for project in installer.projects():
        for config in project.buildConfigurations:
            config.buildSettings["REACT_NATIVE_PATH"] = value


def set_ccache_compiler_and_linker_build_settings(
    installer: Installer, ccache_enabled: bool, ccache_path: Optional[str]
) -> None:
    if ccache_path:
        print(f"[Ccache]: Ccache found at {ccache_path}")
    if ccache_path and ccache_enabled:
        print("[Ccache]: Setting CC, LD, CXX & LDPLUSPLUS build settings")
        for project in installer.projects():
            for config in project.buildConfigurations:
                config.buildSettings.update(CCACHE_SETTINGS)
    elif ccache_path:
        print(
            "[Ccache]: Pass ccache_enabled=True to react_native_post_install or set "
            "USE_CCACHE=1 to increase the speed of subsequent builds"
        )
    elif ccache_enabled:
        print(
            "WARNING: [Ccache]: Install ccache or ensure you neither pass "
            "ccache_enabled=True nor set USE_CCACHE=1",
            file=sys.stderr,
        )
    else:
        for project in installer.projects():
            for config in project.buildConfigurations:
                for key, wrapper in CCACHE_SETTINGS.items():
                    if config.buildSettings.get(key) == wrapper:
                        del config.buildSettings[key]


def apply_xcode_15_patch(
    installer: Installer, xcode_version: Optional[Tuple[int, ...]]
) -> None:
    # Xcode 15.0 ships a linker that breaks weak linking, 15.1 fixed it
    using_xcode_15_0 = bool(xcode_version) and tuple(xcode_version[:2]) == (15, 0)
    for project in installer.projects():
        for config in project.buildConfigurations:
            settings = config.buildSettings
            safe_init(settings, GCC_PREPROCESSOR_DEFINITIONS)
            add_value_to_setting_if_missing(
                settings, GCC_PREPROCESSOR_DEFINITIONS, LIBCPP_CXX17_FIX
            )
            safe_init(settings, OTHER_LDFLAGS)
            if using_xcode_15_0:
                add_value_to_setting_if_missing(settings, OTHER_LDFLAGS, XCODE15_LD_CLASSIC)
            else:
                remove_value_from_setting_if_present(settings, OTHER_LDFLAGS, XCODE15_LD_CLASSIC)


def update_os_deployment_target(installer: Installer) -> None:
    minimum = parse_version(MIN_IOS_VERSION_SUPPORTED)
    for target in installer.podsProject.targets:
        for config in target.buildConfigurations:
            current = config.buildSettings.get(DEPLOYMENT_TARGET)
            if not isinstance(current, str) or parse_version(current) < minimum:
                config.buildSettings[DEPLOYMENT_TARGET] = MIN_IOS_VERSION_SUPPORTED


def set_dynamic_frameworks_flags(installer: Installer, config: BuildConfiguration) -> None:
    if config.use_frameworks != UseFrameworks.DYNAMIC:
        return
    print(f"Setting {DYNAMIC_FRAMEWORKS_FLAG} to React-RCTFabric")
    for target in installer.podsProject.find_targets("React-RCTFabric"):
        for build_config in target.buildConfigurations:
            safe_init(build_config.buildSettings, OTHER_CPLUSPLUSFLAGS)
            add_value_to_setting_if_missing(
                build_config.buildSettings, OTHER_CPLUSPLUSFLAGS, DYNAMIC_FRAMEWORKS_FLAG
            )


def add_ndebug_flag_to_pods_in_release(installer: Installer) -> None:
    for target in installer.podsProject.targets:
        for config in target.buildConfigurations:
            if not config.is_release:
                continue
            safe_init(config.buildSettings, GCC_PREPROCESSOR_DEFINITIONS)
            add_value_to_setting_if_missing(
                config.buildSettings, GCC_PREPROCESSOR_DEFINITIONS, NDEBUG_DEFINITION
            )


def set_clang_cxx_language_standard_if_needed(installer: Installer) -> None:
    language_standard = None
    for target in installer.podsProject.find_targets("React-Core"):
        for config in target.buildConfigurations:
            value = config.buildSettings.get("CLANG_CXX_LANGUAGE_STANDARD")
            if isinstance(value, str) and value:
                language_standard = value
                break
        if language_standard:
            break
    if language_standard is None:
        return
    for project in installer.user_projects():
        print(f"Setting CLANG_CXX_LANGUAGE_STANDARD to {language_standard} on {project.path}")
        for config in project.buildConfigurations:
            config.buildSettings["CLANG_CXX_LANGUAGE_STANDARD"] = language_standard


def modify_flags_for_new_architecture(installer: Installer, new_arch_enabled: bool) -> None:
    if not new_arch_enabled:
        return
    new_arch_flags = [NEW_ARCH_FLAG, *FOLLY_COMPILER_FLAGS.split()]
    for aggregate in installer.aggregateTargets:
        for config_name, xcconfig in aggregate.xcconfigs.items():
            safe_init(xcconfig, OTHER_CPLUSPLUSFLAGS)
            for flag in new_arch_flags:
                add_value_to_setting_if_missing(xcconfig, OTHER_CPLUSPLUSFLAGS, flag)
            if config_name.lower().startswith("release"):
                add_value_to_setting_if_missing(xcconfig, OTHER_CPLUSPLUSFLAGS, NDEBUG_FLAG)
    for target in installer.podsProject.targets:
        if not target.podName.startswith("React"):
            continue
        for config in target.buildConfigurations:
            safe_init(config.buildSettings, OTHER_CPLUSPLUSFLAGS)
            for flag in new_arch_flags:
                add_value_to_setting_if_missing(config.buildSettings, OTHER_CPLUSPLUSFLAGS, flag)
            if config.is_release:
                add_value_to_setting_if_missing(
                    config.buildSettings, OTHER_CPLUSPLUSFLAGS, NDEBUG_FLAG
                )


def react_native_post_install(
    installer: Installer,
    config: BuildConfiguration,
    mac_catalyst_enabled: bool = False,
    xcode_version: Optional[Tuple[int, ...]] = None,
    ccache_path: Optional[str] = None,
) -> None:
    turn_off_resource_bundle_react_core(installer)
    if mac_catalyst_enabled:
        apply_mac_catalyst_patches(installer)
    # Hermes definitions follow the resolved flag, never a recomputed one
    if config.hermes_enabled:
        set_gcc_preprocessor_definition_for_hermes(installer)
    fix_library_search_paths(installer)
    update_search_paths(installer, config)
    set_use_hermes_build_setting(installer, config.hermes_enabled)
    set_node_modules_user_settings(installer, config.react_native_path)
    set_ccache_compiler_and_linker_build_settings(
        installer, config.ccache_enabled, ccache_path
    )
    apply_xcode_15_patch(installer, xcode_version)
    update_os_deployment_target(installer)
    set_dynamic_frameworks_flags(installer, config)
    add_ndebug_flag_to_pods_in_release(installer)
    set_clang_cxx_language_standard_if_needed(installer)
    modify_flags_for_new_architecture(installer, config.new_arch_enabled)
