import json
import os
import sys

from pathlib import Path
from typing import Mapping, Optional

from rnpods.config import BuildConfiguration, EnvironmentOverrides, ExplicitFlags
from rnpods.details.context import PodfileContext
from rnpods.details.resolver import resolve
from rnpods.details.version import detect_react_native_version

# use_react_native option name -> ExplicitFlags field
_OPTION_FIELDS = {
    "path": "react_native_path",
    "fabric_enabled": "fabric_enabled",
    "new_arch_enabled": "new_arch_enabled",
    "hermes_enabled": "hermes_enabled",
    "app_path": "app_path",
    "config_file_dir": "config_file_dir",
}


def explicit_flags(podfile: PodfileContext) -> ExplicitFlags:
    options = dict(podfile.react_native_options or {})
    if options.pop("production", False):
        print(
            "WARNING: production is deprecated and ignored, remove it from use_react_native",
            file=sys.stderr,
        )
    unknown = set(options) - set(_OPTION_FIELDS)
    if unknown:
        raise ValueError(f"unknown use_react_native options {sorted(unknown)}")
    return ExplicitFlags(**{_OPTION_FIELDS[k]: v for k, v in options.items()})


def resolve_podfile(
    podfile: PodfileContext, environ: Optional[Mapping[str, str]] = None
) -> BuildConfiguration:
    explicit = explicit_flags(podfile)
    version = detect_react_native_version(
        podfile.root.joinpath(explicit.react_native_path)
    )
    return resolve(
        explicit,
        version,
        EnvironmentOverrides.from_environ(os.environ if environ is None else environ),
        installation_root=podfile.root,
    )


def resolve_main(podfile: PodfileContext, command_args: list[str]):
    assert not command_args
    config = resolve_podfile(podfile)
    print(json.dumps(config.as_dict(), indent=2))
