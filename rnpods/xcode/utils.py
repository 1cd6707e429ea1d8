import re
import shutil
import subprocess

from typing import List, MutableMapping, Optional, Sequence, Tuple

from rnpods.xcode.model import SettingValue

INHERITED = "$(inherited)"

BuildSettings = MutableMapping[str, SettingValue]


def safe_init(settings: BuildSettings, key: str) -> None:
    if not settings.get(key):
        settings[key] = INHERITED


def _contains(current: str, value: str) -> bool:
    return f" {value} " in f" {current} "


def add_value_to_setting_if_missing(settings: BuildSettings, key: str, value: str) -> None:
    current = settings.get(key)
    if isinstance(current, list):
        if value not in current:
            current.append(value)
    elif not current:
        settings[key] = value
    elif not _contains(current, value):
        settings[key] = f"{current} {value}"


def remove_value_from_setting_if_present(settings: BuildSettings, key: str, value: str) -> None:
    current = settings.get(key)
    if isinstance(current, list):
        settings[key] = [v for v in current if v != value]
    elif current and _contains(current, value):
        settings[key] = " ".join(f" {current} ".replace(f" {value} ", " ").split())


def parse_version(text: str) -> Tuple[int, ...]:
    parts = []
    for part in text.strip().split("."):
        if not part.isdigit():
            break
        parts.append(int(part))
    return tuple(parts)


def detect_xcode_version() -> Optional[Tuple[int, ...]]:
    """
    Ask xcodebuild for the selected Xcode version.

    Returns:
        The version as a tuple of ints, or None when xcodebuild is unavailable.
    """
    if not shutil.which("xcodebuild"):
        return None
    result = subprocess.run(
        ["xcodebuild", "-version"], capture_output=True, text=True, check=False
    )
    if result.returncode != 0:
        return None
    match = re.search(r"Xcode\s+([\d.]+)", result.stdout)
    return parse_version(match.group(1)) if match else None


def create_header_search_path_for_frameworks(
    base_folder: str,
    pod_name: str,
    framework_name: str,
    additional_paths: Sequence[str] = (),
    include_base_path: bool = True,
    platforms: Sequence[str] = (),
) -> List[str]:
    # Multi-platform pods are split into one framework per platform
    if len(platforms) > 1:
        pod_dirs = [f"{pod_name}-{platform}" for platform in platforms]
    else:
        pod_dirs = [pod_name]
    search_paths = []
    for pod_dir in pod_dirs:
        base_path = f"${{{base_folder}}}/{pod_dir}/{framework_name}.framework/Headers"
        if include_base_path:
            search_paths.append(base_path)
        search_paths.extend(f"{base_path}/{path}" for path in additional_paths)
    return search_paths
