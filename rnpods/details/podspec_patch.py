import json
import re
import sys

from pathlib import Path
from typing import List, Optional

from rnpods.config import FOLLY_VERSION, BuildConfiguration

LOCAL_PODSPECS_DIR = Path("Pods", "Local Podspecs")

_PODSPEC_VERSION = re.compile(r"""\.version\s*=\s*(?:['"]([^'"]+)['"]|([A-Za-z_]\w*))""")

# Podspecs whose version comes from a helper rather than a literal
_COMPUTED_VERSIONS = {"RCT-Folly": FOLLY_VERSION}


def read_podspec_version(podspec: Path) -> Optional[str]:
    source = podspec.read_text(encoding="utf-8")
    match = _PODSPEC_VERSION.search(source)
    if not match:
        return _COMPUTED_VERSIONS.get(podspec.stem)
    literal, variable = match.groups()
    if literal is not None:
        return literal
    # spec.version = some_version, with some_version = '1.2.3' earlier on
    assignment = re.search(
        rf"""^\s*{re.escape(variable)}\s*=\s*['"]([^'"]+)['"]""", source, re.MULTILINE
    )
    if assignment:
        return assignment.group(1)
    return _COMPUTED_VERSIONS.get(podspec.stem)


# Vendored podspecs are cached by the package manager as JSON next to the
# Pods project; when react-native bumps one, the cache keeps the old version
# until the pod is explicitly updated.
def pods_to_update(config: BuildConfiguration) -> List[str]:
    podspec_dir = config.react_native_dir.joinpath("third-party-podspecs")
    cache_dir = config.installation_root.joinpath(LOCAL_PODSPECS_DIR)
    if not podspec_dir.is_dir():
        return []
    outdated = []
    for podspec in sorted(podspec_dir.glob("*.podspec")):
        cached = cache_dir.joinpath(f"{podspec.stem}.podspec.json")
        if not cached.is_file():
            continue
        with open(cached, encoding="utf-8") as f:
            cached_version = json.load(f).get("version")
        version = read_podspec_version(podspec)
        if version is None:
            print(
                f"WARNING: unable to read the version of {podspec}, not checking it for updates",
                file=sys.stderr,
            )
            continue
        if version != cached_version:
            outdated.append(podspec.stem)
    return outdated


def request_pod_updates(package_manager, pod_names: List[str]) -> bool:
    """
    Ask the package manager to refresh outdated local pods.

    Only package managers exposing an ``update_pods`` hook can do this during
    the installation; for the others the operator gets the command to run.
    """
    if not pod_names:
        return True
    update_pods = getattr(package_manager, "update_pods", None)
    if callable(update_pods):
        update_pods(pod_names)
        return True
    print(
        f"WARNING: Automatically updating {', '.join(pod_names)} has failed, please run "
        f"`pod update {' '.join(pod_names)} --no-repo-update` manually to fix the issue.",
        file=sys.stderr,
    )
    return False
