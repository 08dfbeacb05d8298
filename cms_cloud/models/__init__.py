"""
Data models for mail and identity payloads.
"""

from cms_cloud.models.identity import AuthResult, RemoteUser, UserInfo
from cms_cloud.models.message import MailAddress, Message

__all__ = ["AuthResult", "MailAddress", "Message", "RemoteUser", "UserInfo"]
