import tempfile
import unittest

from pathlib import Path

from rnpods.xcode.model import ConfigurationType
from rnpods.xcode.snapshot import (
    installer_from_dict,
    installer_to_dict,
    load_installer,
    save_installer,
)

from tests.rnpods.helpers import make_installer


class TestSnapshot(unittest.TestCase):
    def test_save_and_load(self) -> None:
        installer = make_installer()
        with tempfile.TemporaryDirectory() as td:
            path = Path(td, "installer.json")
            save_installer(installer, path)
            loaded = load_installer(path)
        self.assertEqual(loaded, installer)
        # aggregate targets share the loaded user project
        self.assertIs(loaded.aggregateTargets[0].userProject, loaded.user_projects()[0])
        bundle = loaded.podsProject.targets[1]
        self.assertEqual(bundle.podName, "React-Core")

    def test_configuration_type_defaults_from_name(self) -> None:
        data = installer_to_dict(make_installer())
        for config in data["podsProject"]["buildConfigurations"]:
            del config["type"]
        data["podsProject"]["buildConfigurations"][0]["name"] = "Debug-Staging"
        loaded = installer_from_dict(data)
        types = [c.type for c in loaded.podsProject.buildConfigurations]
        self.assertEqual(types, [ConfigurationType.DEBUG, ConfigurationType.RELEASE])

    def test_unknown_user_project(self) -> None:
        data = installer_to_dict(make_installer())
        data["aggregateTargets"][0]["userProject"] = "Other.xcodeproj"
        with self.assertRaises(ValueError):
            installer_from_dict(data)

    def test_duplicate_user_project(self) -> None:
        data = installer_to_dict(make_installer())
        data["userProjects"].append(data["userProjects"][0])
        with self.assertRaises(ValueError):
            installer_from_dict(data)


if __name__ == "__main__":
    unittest.main()
