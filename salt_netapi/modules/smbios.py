"""
Bindings for ``salt.modules.smbios``: DMI/SMBIOS hardware inventory.

The factories only build call descriptors; pass the result to
``call_sync``/``call_async`` with a :class:`~salt_netapi.client.SaltClient`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, List, Optional

from ..calls import LocalCall


class RecordType(IntEnum):
    """DMI record types; the value is the code sent as ``rec_type``."""

    BIOS = 0
    SYSTEM = 1
    BASEBOARD = 2
    CHASSIS = 3
    PROCESSOR = 4
    MEMORY_CONTROLLER = 5
    MEMORY_MODULE = 6
    CACHE = 7
    PORT_CONNECTOR = 8
    SYSTEM_SLOTS = 9
    ON_BOARD_DEVICES = 10
    OEM_STRINGS = 11
    SYSTEM_CONFIGURATION_OPTIONS = 12
    BIOS_LANGUAGE = 13
    GROUP_ASSOCIATIONS = 14
    SYSTEM_EVENT_LOG = 15
    PHYSICAL_MEMORY_ARRAY = 16
    MEMORY_DEVICE = 17
    BIT32_MEMORY_ERROR = 18
    MEMORY_ARRAY_MAPPED_ADDRESS = 19
    MEMORY_DEVICE_MAPPED_ADDRESS = 20
    BUILTIN_POINTING_DEVICE = 21
    PORTABLE_BATTERY = 22
    SYSTEM_RESET = 23
    HARDWARE_SECURITY = 24
    SYSTEM_POWER_CONTROLS = 25
    VOLTAGE_PROBE = 26
    COOLING_DEVICE = 27
    TEMPERATURE_PROBE = 28
    ELECTRICAL_CURRENT_PROBE = 29
    OUTOFBAND_REMOTE_ACCESS = 30
    BOOT_INTEGRITY_SERVICES = 31
    SYSTEM_BOOT = 32
    BIT64_MEMORY_ERROR = 33
    MANAGEMENT_DEVICE = 34
    MANAGEMENT_DEVICE_COMPONENT = 35
    MANAGEMENT_DEVICE_THRESHOLD_DATA = 36
    MEMORY_CHANNEL = 37
    IPMI_DEVICE = 38
    POWER_SUPPLY = 39
    ADDITIONAL_INFORMATION = 40
    ONBOARD_DEVICES_EXTENDED_INFORMATION = 41
    MANAGEMENT_CONTROLLER_HOST_INTERFACE = 42


@dataclass(frozen=True)
class Record:
    """One DMI record as returned by ``smbios.records``."""

    data: Dict[str, Any] = field(default_factory=dict)
    description: str = ""
    handle: str = ""
    type: int = 0

    @property
    def record_type(self) -> Optional[RecordType]:
        try:
            return RecordType(self.type)
        except ValueError:
            return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "handle": self.handle,
            "type": self.type,
            "description": self.description,
            "data": self.data,
        }


def records(rec_type: Optional[RecordType] = None) -> LocalCall[List[Record]]:
    """
    smbios.records

    :param rec_type: only return records of this type, or ``None`` for all records
    """
    kwargs: Dict[str, Any] = {}
    if rec_type is not None:
        kwargs["rec_type"] = int(RecordType(rec_type))
    kwargs["clean"] = False
    return LocalCall("smbios.records", kwargs=kwargs, result_type=List[Record])


def get(string: str, clean: bool = True) -> LocalCall[Optional[str]]:
    """smbios.get, e.g. ``get("system-serial-number")``."""
    return LocalCall("smbios.get", kwargs={"string": string, "clean": clean}, result_type=Optional[str])
