import os
import sys
from abc import ABC, abstractmethod
from typing import Callable, ClassVar

from extra.utils.shell import ShellCommandError, shell

# --
# # Daemon
#
# Registers the server as a background service of the host's service manager.
# The command line is the only user of these controllers, the server itself
# does not know whether it runs in the foreground.


class DaemonError(RuntimeError):
	"""An action on the background service could not be performed."""


class ServiceController(ABC):
	"""Manages the lifecycle of a background service. Each action returns
	a status message, or raises a `DaemonError`."""

	def __init__(self, name: str, description: str) -> None:
		self.name: str = name
		self.description: str = description

	@abstractmethod
	def install(self, *args: str) -> str: ...

	@abstractmethod
	def remove(self) -> str: ...

	@abstractmethod
	def start(self) -> str: ...

	@abstractmethod
	def stop(self) -> str: ...

	@abstractmethod
	def status(self) -> str: ...


class SystemdController(ServiceController):
	"""Manages the service as a systemd unit, the `runner` executes the
	`systemctl` commands."""

	UNIT: ClassVar[str] = """\
[Unit]
Description={description}
Requires=network.target
After=network-online.target

[Service]
Type=simple
ExecStart={command}
Restart=on-failure
RestartSec=5

[Install]
WantedBy=multi-user.target
"""

	def __init__(
		self,
		name: str = "mediaweb",
		description: str = "Web server for media files.",
		*,
		unitDir: str = "/etc/systemd/system",
		executable: str = sys.executable,
		runner: Callable[[list[str]], bytes] = shell,
	) -> None:
		super().__init__(name, description)
		self.unitDir: str = unitDir
		self.executable: str = executable
		self.runner: Callable[[list[str]], bytes] = runner

	@property
	def unit(self) -> str:
		return f"{self.name}.service"

	@property
	def unitPath(self) -> str:
		return os.path.join(self.unitDir, self.unit)

	@property
	def isInstalled(self) -> bool:
		return os.path.exists(self.unitPath)

	def command(self, *args: str) -> str:
		"""Returns the `ExecStart` line, quoting arguments the way systemd
		expects them."""
		parts: list[str] = [self.executable, "-m", "mediaweb", *args]
		return " ".join(
			f'"{_}"' if (not _ or any(c.isspace() for c in _)) else _ for _ in parts
		)

	def systemctl(self, *args: str) -> bytes:
		try:
			return self.runner(["systemctl", *args])
		except ShellCommandError as e:
			raise DaemonError(str(e)) from e

	def install(self, *args: str) -> str:
		if self.isInstalled:
			raise DaemonError(f"Service {self.name} is already installed")
		try:
			with open(self.unitPath, "w") as f:
				f.write(
					self.UNIT.format(
						description=self.description, command=self.command(*args)
					)
				)
		except OSError as e:
			raise DaemonError(
				f"Could not write {self.unitPath}: {e.strerror or e}"
			) from e
		self.systemctl("daemon-reload")
		self.systemctl("enable", self.unit)
		return f"Service {self.name} installed"

	def remove(self) -> str:
		if not self.isInstalled:
			raise DaemonError(f"Service {self.name} is not installed")
		self.systemctl("disable", self.unit)
		try:
			os.unlink(self.unitPath)
		except OSError as e:
			raise DaemonError(
				f"Could not remove {self.unitPath}: {e.strerror or e}"
			) from e
		self.systemctl("daemon-reload")
		return f"Service {self.name} removed"

	def start(self) -> str:
		if not self.isInstalled:
			raise DaemonError(f"Service {self.name} is not installed")
		self.systemctl("start", self.unit)
		return f"Service {self.name} started"

	def stop(self) -> str:
		if not self.isInstalled:
			raise DaemonError(f"Service {self.name} is not installed")
		self.systemctl("stop", self.unit)
		return f"Service {self.name} stopped"

	def status(self) -> str:
		if not self.isInstalled:
			raise DaemonError(f"Service {self.name} is not installed")
		try:
			# `is-active` exits with a non-zero status when the unit is not
			# running, the state is still printed out.
			state: str = self.runner(["systemctl", "is-active", self.unit]).decode(
				"utf8"
			)
		except ShellCommandError as e:
			if e.status == 127:
				raise DaemonError(str(e)) from e
			return f"Service {self.name} is stopped"
		return f"Service {self.name} is {state.strip() or 'running'}"


# EOF
