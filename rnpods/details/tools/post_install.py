import os
import shutil

from argparse import ArgumentParser
from dataclasses import replace
from pathlib import Path

from rnpods.details.context import PodfileContext
from rnpods.details.resolver import PUBLISHED_MARKER, published_configuration
from rnpods.details.tools.resolve import resolve_podfile
from rnpods.xcode.patcher import react_native_post_install
from rnpods.xcode.snapshot import load_installer, save_installer
from rnpods.xcode.utils import detect_xcode_version

_POST_INSTALL_OPTIONS = {"react_native_path", "mac_catalyst_enabled", "ccache_enabled"}


def post_install_main(podfile: PodfileContext, command_args: list[str]):
    parser = ArgumentParser(prog="rnpods post-install")
    parser.add_argument("--project", type=str, required=True, help="Installer snapshot (JSON)")
    parser.add_argument("--output", type=str, help="Where to write the patched snapshot")
    args = parser.parse_args(command_args)
    options = dict(podfile.post_install_options or {})
    unknown = set(options) - _POST_INSTALL_OPTIONS
    if unknown:
        raise ValueError(f"unknown react_native_post_install options {sorted(unknown)}")
    # Explicit Podfile parameters always win; without them reuse a decision
    # published by use_react_native, never bare shell overrides
    if podfile.react_native_options is None and os.environ.get(PUBLISHED_MARKER) == "1":
        config = published_configuration(os.environ, installation_root=podfile.root)
    else:
        config = resolve_podfile(podfile)
    if "react_native_path" in options:
        config = replace(config, react_native_path=options["react_native_path"])
    if "ccache_enabled" in options:
        config = replace(config, ccache_enabled=bool(options["ccache_enabled"]))
    installer = load_installer(Path(args.project))
    react_native_post_install(
        installer,
        config,
        mac_catalyst_enabled=bool(options.get("mac_catalyst_enabled", False)),
        xcode_version=detect_xcode_version(),
        ccache_path=shutil.which("ccache"),
    )
    save_installer(installer, Path(args.output or args.project))
