from rnpods.details.codegen import CodegenTrigger
from rnpods.details.context import PodfileContext
from rnpods.details.tools.resolve import resolve_podfile


def codegen_main(podfile: PodfileContext, command_args: list[str]):
    assert not command_args
    config = resolve_podfile(podfile)
    codegen = CodegenTrigger()
    codegen.clean_up_build_folder(config)
    codegen.build_codegen(config)
    codegen(config)
