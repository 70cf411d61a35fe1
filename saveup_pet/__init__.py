"""SaveUp pet reward engine"""

__version__ = "1.0.0"
