"""
BloodChain Server
=================

Backend for a blood-donation tracking platform: donor registration, donation
logging, NFT certificates, reward points and donation analytics.
"""

VERSION = (0, 1, 0, "dev", 1)

from bloodchain.units.version import get_version


__version__ = get_version(VERSION)

__all__ = ["VERSION", "__version__"]
