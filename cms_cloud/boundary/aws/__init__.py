"""
AWS boundary modules.

Exports: S3FileStorage, SESMailer, CognitoBridge
"""

from .cognito_bridge import CognitoBridge
from .s3_storage import S3FileStorage
from .ses_mailer import SESMailer

__all__ = ["CognitoBridge", "S3FileStorage", "SESMailer"]
