import json
import sys

from pathlib import Path
from typing import Optional

from rnpods.config import SemVer, UNKNOWN_VERSION


def detect_react_native_version(react_native_path: Path) -> SemVer:
    package_json_file = Path(react_native_path).joinpath("package.json")
    if not package_json_file.is_file():
        print(
            f"WARNING: couldn't find the React Native package.json at {package_json_file}",
            file=sys.stderr,
        )
        return UNKNOWN_VERSION
    try:
        with open(package_json_file, encoding="utf-8") as f:
            package = json.load(f)
    except (OSError, ValueError) as e:
        print(f"WARNING: unable to read {package_json_file}: {e}", file=sys.stderr)
        return UNKNOWN_VERSION
    version = package.get("version") if isinstance(package, dict) else None
    parsed = SemVer.parse(version) if isinstance(version, str) else None
    if parsed is None:
        print(
            f"WARNING: unrecognised React Native version {version!r} in {package_json_file}",
            file=sys.stderr,
        )
        return UNKNOWN_VERSION
    return parsed


def compute_new_arch_enabled(
    requested: bool, version: SemVer, env_value: Optional[bool] = None
) -> bool:
    if version.is_unknown:
        return requested
    # Nightlies follow whatever the environment asked for
    if "prealpha" in version.prerelease:
        return bool(env_value)
    # 1.x and later always run the new architecture, 1000.x is main
    if 0 < version.major < 1000:
        return True
    return requested
