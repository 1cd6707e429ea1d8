import io
import json
import tempfile
import unittest

from contextlib import redirect_stderr
from pathlib import Path

from rnpods.config import SemVer, UNKNOWN_VERSION
from rnpods.details.version import compute_new_arch_enabled, detect_react_native_version


class TestDetectReactNativeVersion(unittest.TestCase):
    def test_reads_version_from_package_json(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            Path(td, "package.json").write_text(json.dumps({"version": "0.74.3"}))
            self.assertEqual(detect_react_native_version(Path(td)), SemVer(0, 74, 3))

    def test_keeps_prerelease(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            Path(td, "package.json").write_text(json.dumps({"version": "0.75.0-rc.1"}))
            version = detect_react_native_version(Path(td))
            self.assertEqual(version.prerelease, "rc.1")
            self.assertEqual(str(version), "0.75.0-rc.1")

    def test_missing_package_json_is_unknown(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            with redirect_stderr(io.StringIO()) as err:
                version = detect_react_native_version(Path(td))
        self.assertTrue(version.is_unknown)
        self.assertIn("package.json", err.getvalue())

    def test_unparseable_version_is_unknown(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            Path(td, "package.json").write_text(json.dumps({"version": "latest"}))
            with redirect_stderr(io.StringIO()):
                self.assertEqual(detect_react_native_version(Path(td)), UNKNOWN_VERSION)

    def test_invalid_json_is_unknown(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            Path(td, "package.json").write_text("{not json")
            with redirect_stderr(io.StringIO()):
                self.assertTrue(detect_react_native_version(Path(td)).is_unknown)


class TestComputeNewArchEnabled(unittest.TestCase):
    def test_zero_major_keeps_request(self) -> None:
        self.assertFalse(compute_new_arch_enabled(False, SemVer(0, 74, 0)))
        self.assertTrue(compute_new_arch_enabled(True, SemVer(0, 74, 0)))

    def test_stable_major_forces_new_arch(self) -> None:
        self.assertTrue(compute_new_arch_enabled(False, SemVer(1, 0, 0)))

    def test_main_branch_keeps_request(self) -> None:
        self.assertFalse(compute_new_arch_enabled(False, SemVer(1000, 0, 0)))

    def test_prealpha_follows_environment(self) -> None:
        nightly = SemVer(0, 0, 0, "prealpha-2024")
        self.assertTrue(compute_new_arch_enabled(False, nightly, env_value=True))
        self.assertFalse(compute_new_arch_enabled(True, nightly, env_value=None))

    def test_unknown_version_keeps_request(self) -> None:
        self.assertTrue(compute_new_arch_enabled(True, UNKNOWN_VERSION))
        self.assertFalse(compute_new_arch_enabled(False, UNKNOWN_VERSION))


if __name__ == "__main__":
    unittest.main()
