import argparse
import os
import sys

from extra import run
from extra.utils.logging import LogLevel, LogOrigin, error, info, setLevel

from . import config
from .app import MediaApplication
from .daemon import DaemonError, ServiceController, SystemdController
from .services.media import MediaService

ACTIONS: list[str] = ["install", "remove", "start", "stop", "status"]


def hostPort(text: str) -> config.HostPort:
	try:
		return config.parseHostPort(text)
	except ValueError as e:
		raise argparse.ArgumentTypeError(str(e)) from e


def main(args: list[str], controller: ServiceController | None = None) -> int:
	parser = argparse.ArgumentParser(
		prog="mediaweb",
		description="Web server for media files",
		formatter_class=argparse.ArgumentDefaultsHelpFormatter,
	)
	parser.add_argument(
		"-d",
		"--dir",
		action="store",
		dest="dir",
		help="Directory to serve",
		default=config.DIR,
	)
	parser.add_argument(
		"-H",
		"--host_port",
		action="store",
		dest="hostPort",
		type=hostPort,
		help="Address to listen on, as HOST:PORT",
		default=config.HOST_PORT,
	)
	parser.add_argument(
		"-a",
		"--action",
		action="store",
		dest="action",
		choices=ACTIONS,
		help="Manages the background service instead of running the server",
	)
	# Unknown actions and malformed addresses exit with the usage, status 2
	options = parser.parse_args(args=args)
	root: str = os.path.abspath(options.dir)

	LogOrigin.set("mediaweb")
	if not options.action:
		if config.DEBUG:
			setLevel(LogLevel.Debug)
		info("Serving media files", Root=root)
		run(
			MediaApplication(),
			MediaService(root),
			host=options.hostPort.host,
			port=options.hostPort.port,
			logRequests=config.LOG_REQUESTS,
		)
		return 0

	service: ServiceController = controller or SystemdController()
	actions = {
		"install": lambda: service.install(
			"--dir", root, "--host_port", str(options.hostPort)
		),
		"remove": service.remove,
		"start": service.start,
		"stop": service.stop,
		"status": service.status,
	}
	try:
		status: str = actions[options.action]()
	except DaemonError as e:
		error(str(e), options.action, Service=service.name)
		return 1
	print(status)
	return 0


def cli() -> None:
	sys.exit(main(sys.argv[1:]))


if __name__ == "__main__":
	cli()

# EOF
