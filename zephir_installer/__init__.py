"""
zephir-installer — compile Zephir extensions after Composer installs.
"""

__version__ = "0.1.0"
