"""
session_rotation

Émission de JWT de session et rotation à usage unique des jetons de
renouvellement.
"""

__version__ = "0.1.0"
