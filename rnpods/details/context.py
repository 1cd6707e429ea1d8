from importlib.machinery import SourceFileLoader
from importlib.util import module_from_spec, spec_from_loader
from pathlib import Path
from typing import Any, Dict, Optional


class PodfileContext:
    FILENAME = "Podfile.rnpods"
    MODULENAME = "podfile"

    def __init__(self, root: Path):
        self.root = Path(root)
        self.react_native_options: Optional[Dict[str, Any]] = None
        self.post_install_options: Optional[Dict[str, Any]] = None

    def use_react_native(self, **options):
        if self.react_native_options is not None:
            raise RuntimeError("use_react_native has already been configured")
        self.react_native_options = options

    def react_native_post_install(self, **options):
        if self.post_install_options is not None:
            raise RuntimeError("react_native_post_install has already been configured")
        self.post_install_options = options


def load_podfile(root: Path) -> PodfileContext:
    """
    Load the optional Podfile.rnpods at root.

    The file is plain Python run with a CTX global, e.g.:

        CTX.use_react_native(hermes_enabled=False, app_path="..")
        CTX.react_native_post_install(mac_catalyst_enabled=True)
    """
    ctx = PodfileContext(root)
    module_path = ctx.root.joinpath(ctx.FILENAME)
    if not module_path.is_file():
        return ctx
    module_name = ".".join(["rnpods", "workspace", ctx.MODULENAME])
    spec = spec_from_loader(module_name, SourceFileLoader(module_name, str(module_path)))
    if not spec or not spec.loader:
        raise RuntimeError(f"failed to load module spec {module_path}")
    podfile_module = module_from_spec(spec)
    setattr(podfile_module, "CTX", ctx)
    spec.loader.exec_module(podfile_module)
    return ctx
