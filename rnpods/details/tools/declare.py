from argparse import ArgumentParser

from rnpods.details.codegen import CodegenTrigger
from rnpods.details.context import PodfileContext
from rnpods.details.declarations import declare_react_native, format_declaration
from rnpods.details.tools.resolve import resolve_podfile


def declare_main(podfile: PodfileContext, command_args: list[str]):
    parser = ArgumentParser(prog="rnpods declare")
    parser.add_argument(
        "--skip-codegen",
        action="store_true",
        help="Only list the declarations, do not run the code generator",
    )
    args = parser.parse_args(command_args)
    config = resolve_podfile(podfile)
    if args.skip_codegen:
        declarations = declare_react_native(config)
    else:
        codegen = CodegenTrigger()
        declarations = declare_react_native(config, lambda: codegen(config))
    for declaration in declarations:
        print(format_declaration(declaration))
