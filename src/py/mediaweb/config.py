import os
from os import getenv
from typing import NamedTuple

# Requests starting with this segment are raw downloads
DOWNLOAD_PREFIX: str = "/_download"

# Listen on all interfaces, the way a home media server is expected to be
HOST_PORT: str = getenv("MEDIAWEB_HOST_PORT", "0.0.0.0:80")  # nosec: B104

DIR: str = getenv("MEDIAWEB_DIR") or os.getcwd()

LOG_REQUESTS: bool = getenv("MEDIAWEB_LOG_REQUESTS", "1") == "1"

DEBUG: bool = getenv("MEDIAWEB_DEBUG", "0") == "1"


class HostPort(NamedTuple):
	host: str
	port: int

	def __str__(self) -> str:
		return f"{self.host}:{self.port}"


def parseHostPort(text: str) -> HostPort:
	"""Parses a `HOST:PORT` listen address, an empty host means all
	interfaces. The server listens on IPv4 only, IPv6 hosts are rejected."""
	host, sep, port = text.strip().rpartition(":")
	if not sep:
		raise ValueError(f"Expected HOST:PORT, got: {text!r}")
	if ":" in host or host.startswith("["):
		raise ValueError(f"IPv6 addresses are not supported: {text!r}")
	try:
		value: int = int(port)
	except ValueError as e:
		raise ValueError(f"Invalid port in {text!r}: {port!r}") from e
	if not 0 <= value <= 65535:
		raise ValueError(f"Port out of range in {text!r}: {value}")
	return HostPort(host or "0.0.0.0", value)  # nosec: B104


# EOF
