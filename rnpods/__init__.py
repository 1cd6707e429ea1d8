from rnpods.config import (
    BuildConfiguration,
    ConfigurationError,
    EnvironmentOverrides,
    ExplicitFlags,
    SemVer,
    UseFrameworks,
)
from rnpods.details.declarations import DependencyDeclaration
from rnpods.details.installation import InstallationRun
