"""
Interface filters.

A filter string from the user can mean three things:

- "device/interface" -> exactly that interface
- "device"           -> every interface of a device
- "name"             -> every interface whose name contains `name`

The string is resolved once against the interface catalog, so the rest of
the code works with an explicit filter value. Matching is case-insensitive.
"""

from typing import List, Sequence, Union

from pydantic import BaseModel, ConfigDict

from trafficstats.schemas import InterfaceRef


class FilterNotFoundError(LookupError):
    """Raised when a filter matches nothing in the catalog."""

    def __init__(self, text: str, catalog: Sequence[InterfaceRef]):
        self.text = text
        self.devices = sorted({i.device_name for i in catalog})
        self.interfaces = sorted({i.interface_name for i in catalog})
        super().__init__(f"Filter '{text}' not found.")


class AmbiguousFilterError(LookupError):
    """Raised when a single interface is needed but several match."""

    def __init__(self, text: str, matches: Sequence[InterfaceRef]):
        self.text = text
        self.matches = list(matches)
        super().__init__(f"Multiple interfaces match '{text}'")


class NoFilter(BaseModel):
    model_config = ConfigDict(frozen=True)

    def matches(self, item: InterfaceRef) -> bool:
        return True


class ExactFilter(BaseModel):
    model_config = ConfigDict(frozen=True)

    device: str
    interface: str

    def matches(self, item: InterfaceRef) -> bool:
        return (
            item.device_name.lower() == self.device.lower()
            and item.interface_name.lower() == self.interface.lower()
        )


class DeviceFilter(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str

    def matches(self, item: InterfaceRef) -> bool:
        return item.device_name.lower() == self.name.lower()


class InterfaceFilter(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str

    def matches(self, item: InterfaceRef) -> bool:
        return self.name.lower() in item.interface_name.lower()


Filter = Union[NoFilter, ExactFilter, DeviceFilter, InterfaceFilter]


def parse_filter(text, catalog: Sequence[InterfaceRef]) -> Filter:
    """
    Resolve a filter string against the catalog.

    A bare word is a device filter when some device has that name, and an
    interface-name substring filter otherwise.
    """
    if not text:
        return NoFilter()
    if "/" in text:
        device, interface = text.split("/", 1)
        return ExactFilter(device=device, interface=interface)
    if any(item.device_name.lower() == text.lower() for item in catalog):
        return DeviceFilter(name=text)
    return InterfaceFilter(name=text)


def apply_filter(flt: Filter, catalog: Sequence[InterfaceRef]) -> List[InterfaceRef]:
    return [item for item in catalog if flt.matches(item)]


def select_interfaces(text, catalog: Sequence[InterfaceRef]) -> List[InterfaceRef]:
    """
    Parse and apply a filter; raise FilterNotFoundError when a non-empty
    filter matches nothing.
    """
    matches = apply_filter(parse_filter(text, catalog), catalog)
    if text and not matches:
        raise FilterNotFoundError(text, catalog)
    return matches


def pick_one(matches: Sequence[InterfaceRef], text) -> InterfaceRef:
    """
    Narrow matches to a single interface. An exact (case-insensitive) name
    match wins over substring matches.
    """
    if len(matches) == 1:
        return matches[0]
    if text:
        for item in matches:
            if item.interface_name.lower() == text.lower():
                return item
    raise AmbiguousFilterError(text or "", matches)
