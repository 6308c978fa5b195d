"""
Build environment detection — requirements, per-platform detectors,
remediation, and the once-per-process check.

    from zephir_installer.core.environment import EnvironmentCheck

    check = EnvironmentCheck(reporter, runner)
    if not check.check_once():
        ...  # do not compile
"""

from zephir_installer.core.environment.detectors import (  # noqa: F401
    Platform,
    PlatformDetector,
    env_lookup,
)
from zephir_installer.core.environment.factory import (  # noqa: F401
    classify,
    create_detector,
)
from zephir_installer.core.environment.orchestrator import (  # noqa: F401
    EnvironmentCheck,
    EnvironmentReport,
    RequirementStatus,
)
from zephir_installer.core.environment.requirement import Requirement  # noqa: F401
