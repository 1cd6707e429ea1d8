import re
import sys

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_REACT_NATIVE_PATH = "../node_modules/react-native"
CODEGEN_OUTPUT_DIR = "build/generated/ios"
CODEGEN_COMPONENT_DIR = "react/renderer/components"
CODEGEN_MODULE_DIR = "."
MIN_IOS_VERSION_SUPPORTED = "13.4"

FOLLY_VERSION = "2024.01.01.00"
FOLLY_COMPILER_FLAGS = (
    "-DFOLLY_NO_CONFIG -DFOLLY_MOBILE=1 -DFOLLY_USE_LIBCPP=1 "
    "-DFOLLY_CFG_NO_COROUTINES=1 -DFOLLY_HAVE_CLOCK_GETTIME=1 "
    "-Wno-comma -Wno-shorten-64-to-32"
)


class ConfigurationError(ValueError):
    pass


# <major>.<minor>.<patch>[-<prerelease>[.-]k]
_VERSION_REGEX = re.compile(r"^(\d+)\.(\d+)\.(\d+)(?:-(\w+(?:[-.]\d+)?))?$")


@dataclass(frozen=True)
class SemVer:
    major: int
    minor: int
    patch: int
    prerelease: str = ""

    @staticmethod
    def parse(text: str) -> Optional["SemVer"]:
        match = _VERSION_REGEX.match(text.strip())
        if not match:
            return None
        major, minor, patch, prerelease = match.groups()
        return SemVer(int(major), int(minor), int(patch), prerelease or "")

    @property
    def is_unknown(self) -> bool:
        return self == UNKNOWN_VERSION

    def __str__(self) -> str:
        if self.is_unknown:
            return "unknown"
        base = f"{self.major}.{self.minor}.{self.patch}"
        return f"{base}-{self.prerelease}" if self.prerelease else base


UNKNOWN_VERSION = SemVer(-1, -1, -1)


class UseFrameworks(Enum):
    NONE = "none"
    STATIC = "static"
    DYNAMIC = "dynamic"

    @staticmethod
    def parse(value: Optional[str]) -> "UseFrameworks":
        if value is None or not value.strip():
            return UseFrameworks.NONE
        try:
            linkage = UseFrameworks(value.strip().lower())
        except ValueError:
            raise ConfigurationError(
                f"USE_FRAMEWORKS must be 'static' or 'dynamic', got '{value}'"
            ) from None
        if linkage == UseFrameworks.NONE:
            raise ConfigurationError(
                "USE_FRAMEWORKS must be 'static' or 'dynamic', unset it to disable frameworks"
            )
        return linkage


def parse_flag(name: str, value: Optional[str]) -> Optional[bool]:
    """Interpret a 0/1 environment flag, None when unset or unrecognised."""
    if value is None or value == "":
        return None
    if value == "1":
        return True
    if value == "0":
        return False
    print(
        f"WARNING: ignoring {name}='{value}', expected '0' or '1'",
        file=sys.stderr,
    )
    return None


# Snapshot of the environment variables the installation reacts to.
@dataclass(frozen=True)
class EnvironmentOverrides:
    use_hermes: Optional[str] = None
    new_arch_enabled: Optional[str] = None
    fabric_enabled: Optional[str] = None
    disable_codegen: Optional[str] = None
    use_ccache: Optional[str] = None
    use_frameworks: Optional[str] = None

    ENV_KEYS = {
        "use_hermes": "USE_HERMES",
        "new_arch_enabled": "RCT_NEW_ARCH_ENABLED",
        "fabric_enabled": "RCT_FABRIC_ENABLED",
        "disable_codegen": "DISABLE_CODEGEN",
        "use_ccache": "USE_CCACHE",
        "use_frameworks": "USE_FRAMEWORKS",
    }

    @classmethod
    def from_environ(cls, environ: Mapping[str, str]) -> "EnvironmentOverrides":
        return cls(**{attr: environ.get(key) for attr, key in cls.ENV_KEYS.items()})

    def flag(self, attr: str) -> Optional[bool]:
        return parse_flag(self.ENV_KEYS[attr], getattr(self, attr))


# Explicit parameters of use_react_native, None means "use the default chain"
@dataclass(frozen=True)
class ExplicitFlags:
    new_arch_enabled: Optional[bool] = None
    fabric_enabled: bool = False
    hermes_enabled: Optional[bool] = None
    react_native_path: str = DEFAULT_REACT_NATIVE_PATH
    app_path: str = ".."
    config_file_dir: str = ""


@dataclass(frozen=True)
class BuildConfiguration:
    new_arch_enabled: bool
    fabric_enabled: bool
    hermes_enabled: bool
    use_frameworks: UseFrameworks
    react_native_version: SemVer
    app_path: str
    config_file_dir: str
    react_native_path: str = DEFAULT_REACT_NATIVE_PATH
    installation_root: Path = field(default_factory=Path)
    codegen_disabled: bool = False
    ccache_enabled: bool = False

    def __post_init__(self):
        if self.new_arch_enabled and not self.fabric_enabled:
            raise ConfigurationError("the new architecture requires fabric")

    @property
    def react_native_dir(self) -> Path:
        return self.installation_root.joinpath(self.react_native_path)

    @property
    def codegen_output_dir(self) -> Path:
        return self.installation_root.joinpath(CODEGEN_OUTPUT_DIR)

    def as_dict(self) -> dict:
        return {
            "new_arch_enabled": self.new_arch_enabled,
            "fabric_enabled": self.fabric_enabled,
            "hermes_enabled": self.hermes_enabled,
            "use_frameworks": self.use_frameworks.value,
            "react_native_version": str(self.react_native_version),
            "app_path": self.app_path,
            "config_file_dir": self.config_file_dir,
            "react_native_path": self.react_native_path,
            "installation_root": self.installation_root.as_posix(),
            "codegen_disabled": self.codegen_disabled,
            "ccache_enabled": self.ccache_enabled,
        }
