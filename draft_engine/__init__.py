"""Fantasy football draft recommendation and tiering engine"""

__version__ = '0.3.0'
