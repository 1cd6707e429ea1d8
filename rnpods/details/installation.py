import os
import platform
import shutil
import subprocess
import sys
import time

from dataclasses import replace
from pathlib import Path
from typing import List, MutableMapping, Optional

from rnpods.config import (
    DEFAULT_REACT_NATIVE_PATH,
    BuildConfiguration,
    EnvironmentOverrides,
    ExplicitFlags,
)
from rnpods.details.codegen import CodegenRunner, CodegenTrigger
from rnpods.details.declarations import DependencyDeclaration, declare_react_native
from rnpods.details.podspec_patch import pods_to_update, request_pod_updates
from rnpods.details.resolver import publish, resolve
from rnpods.details.version import detect_react_native_version
from rnpods.xcode.model import Installer
from rnpods.xcode.patcher import react_native_post_install
from rnpods.xcode.utils import detect_xcode_version

XCODE_ENV_FILE = ".xcode.env"
XCODE_ENV_CONTENT = """\
# This `.xcode.env` file is versioned and is used to source the environment
# used when running script phases inside Xcode.
# To customize your local environment, you can create an `.xcode.env.local`
# file that is not versioned.

# NODE_BINARY variable contains the PATH to the node executable.
export NODE_BINARY=$(command -v node)
"""


def running_under_rosetta() -> bool:
    if sys.platform != "darwin" or platform.machine() != "x86_64":
        return False
    result = subprocess.run(
        ["sysctl", "-in", "sysctl.proc_translated"],
        capture_output=True,
        text=True,
        check=False,
    )
    return result.stdout.strip() == "1"


# One `pod install`. Holds the state that must only change once per run
# (codegen, cleanup) and hands the resolved configuration to every step.
class InstallationRun:
    def __init__(
        self,
        package_manager,
        installation_root: Path = Path("."),
        environ: Optional[MutableMapping[str, str]] = None,
        codegen_runner: Optional[CodegenRunner] = None,
    ):
        self.package_manager = package_manager
        self.installation_root = Path(installation_root)
        self.environ = os.environ if environ is None else environ
        self.codegen = CodegenTrigger(codegen_runner)
        self.config: Optional[BuildConfiguration] = None
        self.declarations: List[DependencyDeclaration] = []
        self.start_time = time.monotonic()

    def prepare_react_native_project(self):
        xcode_env = self.installation_root.joinpath(XCODE_ENV_FILE)
        if not xcode_env.exists():
            xcode_env.write_text(XCODE_ENV_CONTENT, encoding="utf-8")

    def use_react_native(
        self,
        path: str = DEFAULT_REACT_NATIVE_PATH,
        fabric_enabled: bool = False,
        new_arch_enabled: Optional[bool] = None,
        production: bool = False,
        hermes_enabled: Optional[bool] = None,
        app_path: str = "..",
        config_file_dir: str = "",
    ) -> BuildConfiguration:
        if production:
            print(
                "WARNING: production is deprecated and ignored, remove it from use_react_native",
                file=sys.stderr,
            )
        explicit = ExplicitFlags(
            new_arch_enabled=new_arch_enabled,
            fabric_enabled=fabric_enabled,
            hermes_enabled=hermes_enabled,
            react_native_path=path,
            app_path=app_path,
            config_file_dir=config_file_dir,
        )
        version = detect_react_native_version(self.installation_root.joinpath(path))
        config = resolve(
            explicit,
            version,
            EnvironmentOverrides.from_environ(self.environ),
            installation_root=self.installation_root,
        )
        publish(config, self.environ)
        self.config = config
        if running_under_rosetta():
            print(
                "WARNING: Do not use \"pod install\" from inside Rosetta2 (x86_64 emulation on arm64).",
                file=sys.stderr,
            )
        self.codegen.clean_up_build_folder(config)
        self.codegen.build_codegen(config)
        self.declarations = declare_react_native(config, lambda: self.codegen(config))
        for declaration in self.declarations:
            self.package_manager.pod(declaration.name, **declaration.keyword_arguments())
        request_pod_updates(self.package_manager, pods_to_update(config))
        return config

    def react_native_post_install(
        self,
        installer: Installer,
        mac_catalyst_enabled: bool = False,
        ccache_enabled: Optional[bool] = None,
    ):
        if self.config is None:
            raise RuntimeError("use_react_native must run before react_native_post_install")
        config = self.config
        if ccache_enabled is not None and ccache_enabled != config.ccache_enabled:
            config = replace(config, ccache_enabled=ccache_enabled)
        react_native_post_install(
            installer,
            config,
            mac_catalyst_enabled=mac_catalyst_enabled,
            xcode_version=detect_xcode_version(),
            ccache_path=shutil.which("ccache"),
        )
        print(f"Pod install took {int(time.monotonic() - self.start_time)} [s] to run")
