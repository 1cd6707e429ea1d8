from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from rnpods.config import CODEGEN_OUTPUT_DIR, BuildConfiguration, ConfigurationError

HERMES_ENGINE = "hermes-engine"
JSC_ENGINE = "React-jsc"
JS_ENGINES = (HERMES_ENGINE, JSC_ENGINE)

# (name, path relative to react-native, modular headers)
CORE_PODS: List[Tuple[str, str, bool]] = [
    ("FBLazyVector", "Libraries/FBLazyVector", False),
    ("RCTRequired", "Libraries/Required", False),
    ("RCTTypeSafety", "Libraries/TypeSafety", True),
    ("React", "", False),
    ("React-Core", "", False),
    ("React-CoreModules", "React/CoreModules", False),
    ("React-RCTAppDelegate", "Libraries/AppDelegate", False),
    ("React-RCTActionSheet", "Libraries/ActionSheetIOS", False),
    ("React-RCTAnimation", "Libraries/NativeAnimation", False),
    ("React-RCTBlob", "Libraries/Blob", False),
    ("React-RCTImage", "Libraries/Image", False),
    ("React-RCTLinking", "Libraries/LinkingIOS", False),
    ("React-RCTNetwork", "Libraries/Network", False),
    ("React-RCTSettings", "Libraries/Settings", False),
    ("React-RCTText", "Libraries/Text", False),
    ("React-RCTVibration", "Libraries/Vibration", False),
    ("React-Core/RCTWebSocket", "", False),
    ("React-rncore", "ReactCommon", False),
    ("React-cxxreact", "ReactCommon/cxxreact", False),
    ("React-debug", "ReactCommon/react/debug", False),
    ("React-utils", "ReactCommon/react/utils", False),
    ("React-featureflags", "ReactCommon/react/featureflags", False),
    ("React-featureflagsnativemodule", "ReactCommon/react/nativemodule/featureflags", False),
    ("React-Mapbuffer", "ReactCommon", False),
    ("React-jserrorhandler", "ReactCommon/jserrorhandler", False),
    ("React-nativeconfig", "ReactCommon", False),
    ("RCTDeprecation", "ReactApple/Libraries/RCTFoundation/RCTDeprecation", False),
]

RUNTIME_PODS: List[Tuple[str, str, bool]] = [
    ("React-jsiexecutor", "ReactCommon/jsiexecutor", False),
    ("React-jsinspector", "ReactCommon/jsinspector-modern", False),
    ("React-callinvoker", "ReactCommon/callinvoker", False),
    ("React-runtimeexecutor", "ReactCommon/runtimeexecutor", False),
    ("React-runtimescheduler", "ReactCommon/react/renderer/runtimescheduler", False),
    ("React-rendererdebug", "ReactCommon/react/renderer/debug", False),
    ("React-perflogger", "ReactCommon/reactperflogger", False),
    ("React-logger", "ReactCommon/logger", False),
    ("ReactCommon/turbomodule/core", "ReactCommon", True),
    ("React-NativeModulesApple", "ReactCommon/react/nativemodule/core/platform/ios", True),
    ("Yoga", "ReactCommon/yoga", True),
]

# (name, modular headers), podspecs live in third-party-podspecs/<name>.podspec
THIRD_PARTY_PODSPECS: List[Tuple[str, bool]] = [
    ("DoubleConversion", False),
    ("glog", False),
    ("boost", False),
    ("fmt", False),
    ("RCT-Folly", True),
]

FABRIC_PODS: List[Tuple[str, str, bool]] = [
    ("React-Fabric", "ReactCommon", False),
    ("React-FabricImage", "ReactCommon", False),
    ("React-graphics", "ReactCommon/react/renderer/graphics", False),
    ("React-RCTFabric", "React", True),
    ("React-ImageManager", "ReactCommon/react/renderer/imagemanager/platform/ios", False),
]


@dataclass(frozen=True)
class DependencyDeclaration:
    name: str
    path: Optional[str] = None
    podspec: Optional[str] = None
    options: Tuple[Tuple[str, object], ...] = ()

    def __post_init__(self):
        if (self.path is None) == (self.podspec is None):
            raise ConfigurationError(
                f"declaration {self.name} needs exactly one of path or podspec"
            )

    def source(self) -> dict:
        if self.path is not None:
            return {"path": self.path}
        return {"podspec": self.podspec}

    def keyword_arguments(self) -> dict:
        return {**self.source(), **dict(self.options)}


def format_declaration(declaration: DependencyDeclaration) -> str:
    """Render a declaration as a Podfile line."""

    def ruby(value) -> str:
        if isinstance(value, bool):
            return "true" if value else "false"
        return "'" + str(value).replace("'", "\\'") + "'"

    parts = [f"pod {ruby(declaration.name)}"]
    parts += [
        f":{key} => {ruby(value)}"
        for key, value in declaration.keyword_arguments().items()
    ]
    return ", ".join(parts)


class Declarations:
    def __init__(self, react_native_path: str):
        self.prefix = react_native_path.rstrip("/")
        self.items: List[DependencyDeclaration] = []

    def _resolve(self, relative: str) -> str:
        return f"{self.prefix}/{relative}" if relative else f"{self.prefix}/"

    def add(self, declaration: DependencyDeclaration):
        for existing in self.items:
            if existing.name != declaration.name:
                continue
            if existing == declaration:
                return
            raise ConfigurationError(
                f"pod {declaration.name} declared twice with different sources or options"
            )
        self.items.append(declaration)

    def pod(self, name: str, relative_path: str, modular_headers: bool = False, **options):
        if modular_headers:
            options["modular_headers"] = True
        self.add(
            DependencyDeclaration(
                name=name,
                path=self._resolve(relative_path),
                options=tuple(options.items()),
            )
        )

    def podspec(self, name: str, relative_path: str, modular_headers: bool = False, **options):
        if modular_headers:
            options["modular_headers"] = True
        self.add(
            DependencyDeclaration(
                name=name,
                podspec=self._resolve(relative_path),
                options=tuple(options.items()),
            )
        )


def read_hermes_tag(config: BuildConfiguration) -> str:
    # The tag only makes the package manager refresh hermes-engine when the
    # framework version changes
    hermes_tag_file = config.react_native_dir.joinpath("sdks", ".hermesversion")
    if hermes_tag_file.is_file():
        return hermes_tag_file.read_text(encoding="utf-8").strip()
    return ""


def setup_hermes(decls: Declarations, config: BuildConfiguration):
    decls.pod("React-jsi", "ReactCommon/jsi")
    decls.podspec(
        HERMES_ENGINE,
        "sdks/hermes-engine/hermes-engine.podspec",
        tag=read_hermes_tag(config),
    )
    decls.pod("React-hermes", "ReactCommon/hermes")


def setup_jsc(decls: Declarations, config: BuildConfiguration):
    decls.pod("React-jsi", "ReactCommon/jsi")
    decls.pod(JSC_ENGINE, "ReactCommon/jsc")
    if config.fabric_enabled:
        decls.pod(f"{JSC_ENGINE}/Fabric", "ReactCommon/jsc")


def setup_fabric(decls: Declarations, config: BuildConfiguration):
    for name, path, modular_headers in FABRIC_PODS:
        decls.pod(name, path, modular_headers)


def setup_bridgeless(decls: Declarations, config: BuildConfiguration):
    decls.pod("React-jsitracing", "ReactCommon/hermes/executor/")
    decls.pod("React-runtimeexecutor", "ReactCommon/runtimeexecutor")
    decls.pod("React-RuntimeCore", "ReactCommon/react/runtime")
    decls.pod("React-RuntimeApple", "ReactCommon/react/runtime/platform/ios")
    if config.hermes_enabled:
        decls.pod("React-RuntimeHermes", "ReactCommon/react/runtime")


def validate_js_engine(declarations: List[DependencyDeclaration]):
    engines = [d.name for d in declarations if d.name in JS_ENGINES]
    if len(engines) != 1:
        raise ConfigurationError(
            f"expected exactly one JS engine among {JS_ENGINES}, got {engines}"
        )


def declare_react_native(
    config: BuildConfiguration, run_codegen: Callable[[], None] = lambda: None
) -> List[DependencyDeclaration]:
    decls = Declarations(config.react_native_path)
    # Pods included in all projects
    for name, path, modular_headers in CORE_PODS:
        decls.pod(name, path, modular_headers)
    if config.hermes_enabled:
        setup_hermes(decls, config)
    else:
        setup_jsc(decls, config)
    for name, path, modular_headers in RUNTIME_PODS:
        decls.pod(name, path, modular_headers)
    for name, modular_headers in THIRD_PARTY_PODSPECS:
        decls.podspec(name, f"third-party-podspecs/{name}.podspec", modular_headers)
    # Codegen needs the final flag set and its package is declared right after
    run_codegen()
    decls.add(
        DependencyDeclaration(
            name="ReactCodegen",
            path=CODEGEN_OUTPUT_DIR,
            options=(("modular_headers", True),),
        )
    )
    # Fabric is always installed, the bridge adapter it ships is needed even
    # with the legacy renderer
    setup_fabric(decls, config)
    setup_bridgeless(decls, config)
    validate_js_engine(decls.items)
    return list(decls.items)


def podspec_path(config: BuildConfiguration, name: str) -> Path:
    return config.react_native_dir.joinpath("third-party-podspecs", f"{name}.podspec")
