"""Reading and writing the static network settings of the device."""

from __future__ import annotations

import logging
import re
import subprocess
import time
from dataclasses import dataclass
from typing import Optional, Sequence, Union

log = logging.getLogger(__name__)

INTERFACES_FILE = "/etc/network/interfaces"
RESOLV_CONF = "/etc/resolv.conf"
TARGET_IFACE = "eth0"

_CONFIG_TEMPLATE = (
    "auto lo\n"
    "iface lo inet loopback\n"
    "\n"
    "auto {iface}\n"
    "iface {iface} inet static\n"
    "\taddress {ip}\n"
    "\tnetmask {netmask}\n"
    "\tgateway {gateway}\n"
    "\n"
)

_NUM = r"\s*([+-]?\d+)"
_QUAD = _NUM + r"\." + _NUM + r"\." + _NUM + r"\." + _NUM
_IFACE_RE = re.compile(r"iface\s*(\S+)")
_ADDRESS_RE = re.compile(r"\s*address" + _QUAD)
_NETMASK_RE = re.compile(r"\s*netmask" + _QUAD)
_GATEWAY_RE = re.compile(r"\s*gateway" + _QUAD)

Address = Union[str, Sequence[int]]


@dataclass
class InterfaceAddress:
    """Static addresses found for one interface; missing ones are None."""

    ip: Optional[str] = None
    netmask: Optional[str] = None
    gateway: Optional[str] = None


def _quad(match: re.Match) -> str:
    return ".".join(str(int(part)) for part in match.groups())


def ip_get_ip(name: str, path: str = INTERFACES_FILE) -> InterfaceAddress:
    """Read the address, netmask and gateway of interface *name*.

    Raises LookupError if none of them is configured for it.
    """
    with open(path, encoding="utf-8", errors="replace") as source:
        text = source.read()
    found = InterfaceAddress()
    iface = ""
    for line in text.splitlines():
        match = _IFACE_RE.match(line)
        if match:
            iface = match.group(1)
        if name != iface:
            continue
        if m := _ADDRESS_RE.match(line):
            found.ip = _quad(m)
        if m := _NETMASK_RE.match(line):
            found.netmask = _quad(m)
        if m := _GATEWAY_RE.match(line):
            found.gateway = _quad(m)
    if found == InterfaceAddress():
        raise LookupError(f"no static address for interface {name!r}")
    return found


def _octets(address: Address) -> str:
    parts = address.split(".") if isinstance(address, str) else list(address)
    if len(parts) != 4:
        raise ValueError(f"an address needs 4 octets: {address!r}")
    values = [int(part) for part in parts]
    if any(not 0 <= value <= 255 for value in values):
        raise ValueError(f"octet out of range: {address!r}")
    return ".".join(map(str, values))


def render_config(ip: Address, netmask: Address, gateway: Address, iface: str = TARGET_IFACE) -> str:
    """Return an interfaces file with a static setup for *iface*."""
    return _CONFIG_TEMPLATE.format(
        iface=iface, ip=_octets(ip), netmask=_octets(netmask), gateway=_octets(gateway)
    )


def _run(command: list[str]) -> None:
    try:
        subprocess.run(command, check=False)
    except OSError as err:
        log.warning("%s: %s", command[0], err)


def write_config(
    ip: Address,
    netmask: Address,
    gateway: Address,
    path: str = INTERFACES_FILE,
    apply: bool = True,
) -> None:
    """Write the static configuration and, if *apply*, restart networking."""
    config = render_config(ip, netmask, gateway)
    with open(path, "w", encoding="utf-8", newline="\n") as target:
        target.write(config)
    if apply:
        _run(["ifconfig", TARGET_IFACE, "down"])
        time.sleep(1)
        _run(["/etc/init.d/networking", "restart"])


def update_resolvconf(dns: str, path: str = RESOLV_CONF) -> None:
    """Make *dns* the only name server."""
    with open(path, "w", encoding="utf-8", newline="\n") as target:
        target.write(f"nameserver {dns}\n")