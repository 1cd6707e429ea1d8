import copy
import unittest

from rnpods.config import UseFrameworks
from rnpods.details.podspec import (
    PodSpec,
    add_dependency,
    framework_name_for,
    install_modules_dependencies,
)
from rnpods.xcode.utils import (
    add_value_to_setting_if_missing,
    create_header_search_path_for_frameworks,
    remove_value_from_setting_if_present,
    safe_init,
)


class TestSettingHelpers(unittest.TestCase):
    def test_safe_init(self) -> None:
        settings = {}
        safe_init(settings, "OTHER_LDFLAGS")
        self.assertEqual(settings["OTHER_LDFLAGS"], "$(inherited)")
        settings["OTHER_LDFLAGS"] = "-ObjC"
        safe_init(settings, "OTHER_LDFLAGS")
        self.assertEqual(settings["OTHER_LDFLAGS"], "-ObjC")

    def test_add_value_is_whole_word(self) -> None:
        settings = {"FLAGS": "-DFOO=10"}
        add_value_to_setting_if_missing(settings, "FLAGS", "-DFOO=1")
        add_value_to_setting_if_missing(settings, "FLAGS", "-DFOO=1")
        self.assertEqual(settings["FLAGS"], "-DFOO=10 -DFOO=1")

    def test_list_values(self) -> None:
        settings = {"PATHS": ["$(inherited)"]}
        add_value_to_setting_if_missing(settings, "PATHS", "a")
        add_value_to_setting_if_missing(settings, "PATHS", "a")
        self.assertEqual(settings["PATHS"], ["$(inherited)", "a"])
        remove_value_from_setting_if_present(settings, "PATHS", "a")
        self.assertEqual(settings["PATHS"], ["$(inherited)"])

    def test_remove_value(self) -> None:
        settings = {"OTHER_LDFLAGS": "$(inherited) -Wl -ld_classic -ObjC"}
        remove_value_from_setting_if_present(settings, "OTHER_LDFLAGS", "-Wl -ld_classic")
        self.assertEqual(settings["OTHER_LDFLAGS"], "$(inherited) -ObjC")

    def test_framework_header_search_paths(self) -> None:
        self.assertEqual(
            create_header_search_path_for_frameworks(
                "PODS_CONFIGURATION_BUILD_DIR", "React-graphics", "React_graphics", ["platform/ios"]
            ),
            [
                "${PODS_CONFIGURATION_BUILD_DIR}/React-graphics/React_graphics.framework/Headers",
                "${PODS_CONFIGURATION_BUILD_DIR}/React-graphics/React_graphics.framework/Headers/platform/ios",
            ],
        )
        self.assertEqual(
            create_header_search_path_for_frameworks(
                "PODS_CONFIGURATION_BUILD_DIR",
                "React-RCTFabric",
                "RCTFabric",
                include_base_path=True,
                platforms=["iOS", "macOS"],
            ),
            [
                "${PODS_CONFIGURATION_BUILD_DIR}/React-RCTFabric-iOS/RCTFabric.framework/Headers",
                "${PODS_CONFIGURATION_BUILD_DIR}/React-RCTFabric-macOS/RCTFabric.framework/Headers",
            ],
        )


class TestPodspecHelpers(unittest.TestCase):
    def test_framework_name(self) -> None:
        self.assertEqual(framework_name_for("React-Fabric"), "React_Fabric")
        self.assertEqual(framework_name_for("React-RCTFabric", "RCTFabric"), "RCTFabric")

    def test_add_dependency_without_frameworks(self) -> None:
        spec = PodSpec(name="my-module")
        add_dependency(spec, "React-Fabric", UseFrameworks.NONE, subspec="core", version="1.0")
        self.assertEqual(spec.dependencies, {"React-Fabric/core": ["1.0"]})
        self.assertEqual(spec.pod_target_xcconfig, {})

    def test_add_dependency_with_frameworks(self) -> None:
        spec = PodSpec(name="my-module")
        add_dependency(spec, "React-Fabric", UseFrameworks.STATIC)
        self.assertIn(
            '"${PODS_CONFIGURATION_BUILD_DIR}/React-Fabric/React_Fabric.framework/Headers"',
            spec.pod_target_xcconfig["HEADER_SEARCH_PATHS"],
        )

    def test_install_modules_dependencies_new_arch(self) -> None:
        spec = PodSpec(name="my-module")
        install_modules_dependencies(spec, True, UseFrameworks.NONE)
        self.assertIn("-DRCT_NEW_ARCH_ENABLED=1", spec.compiler_flags)
        self.assertIn("-DFOLLY_NO_CONFIG", spec.compiler_flags)
        self.assertEqual(spec.dependencies["RCT-Folly"], ["2024.01.01.00"])
        self.assertIn("ReactCodegen", spec.dependencies)
        self.assertEqual(spec.pod_target_xcconfig["CLANG_CXX_LANGUAGE_STANDARD"], "c++20")

    def test_install_modules_dependencies_legacy(self) -> None:
        spec = PodSpec(name="my-module")
        install_modules_dependencies(spec, False, UseFrameworks.NONE)
        self.assertNotIn("-DRCT_NEW_ARCH_ENABLED=1", spec.compiler_flags)
        self.assertNotIn("ReactCodegen", spec.dependencies)
        self.assertIn("React-Core", spec.dependencies)

    def test_install_modules_dependencies_twice(self) -> None:
        spec = PodSpec(name="my-module")
        install_modules_dependencies(spec, True, UseFrameworks.DYNAMIC)
        once = copy.deepcopy(spec)
        install_modules_dependencies(spec, True, UseFrameworks.DYNAMIC)
        self.assertEqual(spec, once)

    def test_install_modules_dependencies_legacy_then_new_arch(self) -> None:
        spec = PodSpec(name="my-module", compiler_flags="-DMY_MODULE=1")
        install_modules_dependencies(spec, False, UseFrameworks.NONE)
        install_modules_dependencies(spec, True, UseFrameworks.NONE)
        flags = spec.compiler_flags.split()
        self.assertEqual(flags.count("-DFOLLY_NO_CONFIG"), 1)
        self.assertEqual(flags.count("-DRCT_NEW_ARCH_ENABLED=1"), 1)
        self.assertEqual(flags[0], "-DMY_MODULE=1")


if __name__ == "__main__":
    unittest.main()
