"""
nameledger.services — the operations clients call.

    RegistrarService   register / renew / transfer / availability / lookups
    SubdomainService   sub-record create / list / get / deactivate
    AdminConsole       TLDs, base fee, multipliers, fee withdrawal
"""

from .admin import AdminConsole
from .registrar import RegistrarService
from .subdomain import SubdomainService

__all__ = ["AdminConsole", "RegistrarService", "SubdomainService"]
