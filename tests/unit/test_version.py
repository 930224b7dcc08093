"""
Test version string helpers for BloodChain.
"""

import unittest

from bloodchain import VERSION, __version__
from bloodchain.units.version import get_version


class TestVersion(unittest.TestCase):
    """Test version helper functions."""

    def test_get_version(self):
        """Test get_version function."""
        self.assertEqual(get_version((1, 0, 0, "final", 0)), "1.0.0")
        self.assertEqual(get_version((2, 1, 3, "alpha", 0)), "2.1.3a")
        self.assertEqual(get_version((3, 2, 0, "beta", 1)), "3.2.0b1")
        self.assertEqual(get_version((4, 0, 0, "rc", 2)), "4.0.0rc2")
        self.assertEqual(get_version((5, 0, 0, "dev", 0)), "5.0.0.dev")
        self.assertEqual(get_version((5, 0, 0, "dev", 3)), "5.0.0.dev3")

    def test_package_version(self):
        self.assertEqual(__version__, get_version(VERSION))
        self.assertEqual(__version__, "0.1.0.dev1")


if __name__ == "__main__":
    unittest.main()
