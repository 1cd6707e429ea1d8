import shutil
import subprocess

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from rnpods.config import (
    CODEGEN_OUTPUT_DIR,
    FOLLY_VERSION,
    BuildConfiguration,
    ConfigurationError,
)


@dataclass(frozen=True)
class CodegenRequest:
    app_path: str
    config_file_dir: str
    new_arch_enabled: bool
    fabric_enabled: bool
    hermes_enabled: bool
    output_dir: str
    package_json_file: str
    react_native_version: str
    folly_version: str
    react_native_path: str
    installation_root: str

    @staticmethod
    def from_configuration(config: BuildConfiguration) -> "CodegenRequest":
        return CodegenRequest(
            app_path=config.app_path,
            config_file_dir=config.config_file_dir,
            new_arch_enabled=config.new_arch_enabled,
            fabric_enabled=config.fabric_enabled,
            hermes_enabled=config.hermes_enabled,
            output_dir=CODEGEN_OUTPUT_DIR,
            package_json_file=config.react_native_dir.joinpath("package.json").as_posix(),
            react_native_version=str(config.react_native_version),
            folly_version=FOLLY_VERSION,
            react_native_path=config.react_native_path,
            installation_root=config.installation_root.as_posix(),
        )


CodegenRunner = Callable[[CodegenRequest], None]


class NodeCodegenRunner:
    """Runs the generator script shipped with react-native."""

    def __init__(self, node: str = "node"):
        self.node = node

    def command(self, request: CodegenRequest) -> list:
        script = Path(request.react_native_path).joinpath(
            "scripts", "generate-codegen-artifacts.js"
        )
        return [
            self.node,
            script.as_posix(),
            "-p",
            request.app_path,
            "-o",
            # the generator appends build/generated/ios itself
            request.installation_root,
            "-t",
            "ios",
        ]

    def __call__(self, request: CodegenRequest) -> None:
        subprocess.check_call(self.command(request), cwd=request.installation_root)


class CodegenTrigger:
    def __init__(self, runner: Optional[CodegenRunner] = None):
        self.runner = runner or NodeCodegenRunner()
        self.codegen_done = False
        self.cleanup_done = False

    # Remove the previous run's output, at most once per installation
    def clean_up_build_folder(self, config: BuildConfiguration):
        if self.cleanup_done:
            return
        self.cleanup_done = True
        codegen_path = config.codegen_output_dir
        if not codegen_path.is_dir():
            return
        for child in codegen_path.iterdir():
            if child.is_dir() and not child.is_symlink():
                shutil.rmtree(child)
            else:
                child.unlink()
        provider = config.react_native_dir.joinpath(
            "React", "Fabric", "RCTThirdPartyFabricComponentsProvider"
        )
        for suffix in (".h", ".mm"):
            provider.with_suffix(suffix).unlink(missing_ok=True)
        if any(codegen_path.iterdir()):
            raise RuntimeError(f"folder {codegen_path} is not empty after cleanup")

    # A monorepo checkout ships the generator unbuilt
    def build_codegen(self, config: BuildConfiguration):
        codegen_repo = config.react_native_dir.joinpath("..", "react-native-codegen")
        if not codegen_repo.is_dir() or codegen_repo.joinpath("lib").is_dir():
            return
        print(f"[Codegen] building {codegen_repo.as_posix()}")
        subprocess.check_call([codegen_repo.joinpath("scripts", "oss", "build.sh").as_posix()])

    def __call__(self, config: BuildConfiguration) -> bool:
        if config.codegen_disabled:
            print("[Codegen] Skipping, codegen is disabled")
            return False
        if self.codegen_done:
            print("[Codegen] Skipping, codegen already ran for this installation")
            return False
        if not config.app_path:
            raise ConfigurationError(
                "[Codegen] app_path is required to run codegen, pass it to use_react_native"
            )
        print("[Codegen] Generating artifacts")
        self.runner(CodegenRequest.from_configuration(config))
        self.codegen_done = True
        return True
