"""
Version utility functions for BloodChain.

This module provides functions for building version strings from the VERSION tuple.
"""

# PEP 440 pre-release suffixes
_PRE_RELEASE_TAGS = {"alpha": "a", "beta": "b", "rc": "rc"}


def get_version(version: tuple[int, int, int, str, int]) -> str:
    """
    Return a PEP 440-compliant version number from a version tuple.

    Args:
        version: Version tuple (major, minor, micro, releaselevel, serial)

    Returns:
        PEP 440-compliant version string
    """
    major, minor, micro, releaselevel, serial = version

    version_str = f"{major}.{minor}"
    if micro is not None:
        version_str += f".{micro}"

    if releaselevel != "final":
        if releaselevel == "dev":
            version_str += ".dev"
        else:
            version_str += _PRE_RELEASE_TAGS.get(releaselevel, releaselevel)
        if serial > 0:
            version_str += str(serial)

    return version_str

