import os
import sys

from pathlib import Path
from typing import MutableMapping, Optional

from rnpods.config import (
    DEFAULT_REACT_NATIVE_PATH,
    UNKNOWN_VERSION,
    BuildConfiguration,
    EnvironmentOverrides,
    ExplicitFlags,
    SemVer,
    UseFrameworks,
)
from rnpods.details.version import compute_new_arch_enabled

# Set by publish() so readers can tell a resolved decision from shell overrides
PUBLISHED_MARKER = "RNPODS_RESOLVED"


# Resolve the explicit Podfile parameters, the detected framework version and
# the environment overrides into one configuration. Pure, touches no globals.
#
# Reconciliation rules:
#   * explicit parameters win over environment defaults
#   * the new architecture always implies fabric, an explicit fabric_enabled=False
#     is silently overridden rather than rejected
def resolve(
    explicit: ExplicitFlags,
    detected_version: SemVer,
    overrides: EnvironmentOverrides,
    installation_root: Path = Path("."),
    ccache_enabled: Optional[bool] = None,
) -> BuildConfiguration:
    env_new_arch = overrides.flag("new_arch_enabled")
    if explicit.new_arch_enabled is None:
        requested_new_arch = bool(env_new_arch)
    else:
        requested_new_arch = explicit.new_arch_enabled
    new_arch_enabled = compute_new_arch_enabled(
        requested_new_arch, detected_version, env_new_arch
    )
    fabric_enabled = explicit.fabric_enabled or new_arch_enabled
    if explicit.hermes_enabled is None:
        hermes_enabled = overrides.flag("use_hermes") is not False
    else:
        hermes_enabled = explicit.hermes_enabled
    if ccache_enabled is None:
        ccache_enabled = bool(overrides.flag("use_ccache"))
    return BuildConfiguration(
        new_arch_enabled=new_arch_enabled,
        fabric_enabled=fabric_enabled,
        hermes_enabled=hermes_enabled,
        use_frameworks=UseFrameworks.parse(overrides.use_frameworks),
        react_native_version=detected_version,
        app_path=explicit.app_path,
        config_file_dir=explicit.config_file_dir,
        react_native_path=explicit.react_native_path,
        installation_root=Path(installation_root),
        codegen_disabled=bool(overrides.flag("disable_codegen")),
        ccache_enabled=ccache_enabled,
    )


def publish(
    config: BuildConfiguration, environ: Optional[MutableMapping[str, str]] = None
) -> None:
    """
    Write the resolved decision back into the environment.

    Podspecs of third-party libraries and steps started in another process
    (post-install from the command line) read these instead of recomputing
    the flags with their own defaults.
    """
    if environ is None:
        environ = os.environ
    environ["APP_PATH"] = config.app_path
    environ["REACT_NATIVE_PATH"] = config.react_native_path
    environ["RCT_NEW_ARCH_ENABLED"] = "1" if config.new_arch_enabled else "0"
    environ["RCT_FABRIC_ENABLED"] = "1" if config.fabric_enabled else "0"
    environ["USE_HERMES"] = "1" if config.hermes_enabled else "0"
    environ[PUBLISHED_MARKER] = "1"


def published_configuration(
    environ: MutableMapping[str, str],
    installation_root: Path = Path("."),
    detected_version: Optional[SemVer] = None,
) -> BuildConfiguration:
    """
    Rebuild the configuration written by publish().

    Unlike resolve(), a missing USE_HERMES reads as Hermes disabled: only
    the published "1" enables it.
    """
    overrides = EnvironmentOverrides.from_environ(environ)
    if environ.get(PUBLISHED_MARKER) != "1":
        print(
            "WARNING: no published React Native flags found, was use_react_native run?",
            file=sys.stderr,
        )
    new_arch_enabled = bool(overrides.flag("new_arch_enabled"))
    return BuildConfiguration(
        new_arch_enabled=new_arch_enabled,
        fabric_enabled=new_arch_enabled or bool(overrides.flag("fabric_enabled")),
        hermes_enabled=bool(overrides.flag("use_hermes")),
        use_frameworks=UseFrameworks.parse(overrides.use_frameworks),
        react_native_version=detected_version or UNKNOWN_VERSION,
        app_path=environ.get("APP_PATH", ".."),
        config_file_dir="",
        react_native_path=environ.get("REACT_NATIVE_PATH", DEFAULT_REACT_NATIVE_PATH),
        installation_root=Path(installation_root),
        codegen_disabled=bool(overrides.flag("disable_codegen")),
        ccache_enabled=bool(overrides.flag("use_ccache")),
    )
