"""
Suppliers for the running app and OS versions.
"""

import platform
import re
from importlib import metadata

from .version import Version

_NUMERIC_PREFIX = re.compile(r"\d+(?:\.\d+)*")


def current_app_version(distribution: str) -> Version:
    """
    Version of an installed distribution, e.g. current_app_version("myapp").

    Raises:
        importlib.metadata.PackageNotFoundError: If it is not installed
    """
    return Version(metadata.version(distribution))


def _numeric_prefix(value: str) -> str:
    match = _NUMERIC_PREFIX.match(value.strip())
    return match.group(0) if match else "0"


def current_os_version() -> Version:
    """
    Version of the host operating system.

    The marketing version is the numeric release ("14.2.1" on macOS,
    "10.0.22631" on Windows, "6.8.0" for a Linux kernel "6.8.0-45-generic");
    the build string carries the platform's build/version text.
    """
    system = platform.system()
    if system == "Darwin":
        release = platform.mac_ver()[0] or platform.release()
        build = platform.release()
    elif system == "Windows":
        release = platform.version()
        build = platform.release()
    else:
        release = platform.release()
        build = platform.version()
    return Version(_numeric_prefix(release), build_string=build)
