"""Host introspection for the systeminfo provider - no external calls."""

import os
import platform
import socket
import time
from pathlib import Path


def _uptime() -> float | None:
    """Seconds since boot, where the platform exposes it."""
    proc_uptime = Path("/proc/uptime")
    if proc_uptime.exists():
        return float(proc_uptime.read_text().split()[0])
    if hasattr(time, "CLOCK_BOOTTIME"):
        return time.clock_gettime(time.CLOCK_BOOTTIME)
    return None


def _memory() -> dict[str, int | None]:
    """Total and free memory in bytes (None when unavailable)."""
    try:
        page_size = os.sysconf("SC_PAGE_SIZE")
        total = os.sysconf("SC_PHYS_PAGES") * page_size
        free = os.sysconf("SC_AVPHYS_PAGES") * page_size
    except (AttributeError, ValueError, OSError):
        return {"totalMemory": None, "freeMemory": None}
    return {"totalMemory": total, "freeMemory": free}


def _load_average() -> list[float]:
    try:
        return list(os.getloadavg())
    except (AttributeError, OSError):
        return []


def server_info() -> dict:
    """Snapshot of the host this server runs on."""
    return {
        "hostname": socket.gethostname(),
        "platform": platform.system().lower(),
        "release": platform.release(),
        "arch": platform.machine(),
        "python": platform.python_version(),
        "uptime": _uptime(),
        **_memory(),
        "cpuCount": os.cpu_count(),
        "processor": platform.processor() or None,
        "loadAvg": _load_average(),
    }
