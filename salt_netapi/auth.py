"""External authentication (eauth) backends understood by salt-api."""

from __future__ import annotations

from enum import Enum


class AuthModule(str, Enum):
    AUTO = "auto"
    DJANGO = "django"
    FILE = "file"
    KEYSTONE = "keystone"
    LDAP = "ldap"
    MYSQL = "mysql"
    PAM = "pam"
    PKI = "pki"
    REST = "rest"
    SHAREDSECRET = "sharedsecret"
    YUBICO = "yubico"
