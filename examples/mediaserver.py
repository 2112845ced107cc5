"""
Media Server Example

This demonstrates serving a media directory next to a custom service.
Features shown:
- The MediaService, with listings, a player page and downloads
- A service mounted along with it, with a route of higher priority
- Extra logging for nicer output

Usage:
    python mediaserver.py [DIRECTORY]

Test with:
    http://localhost:8000/            # Browse the directory
    http://localhost:8000/_health     # Custom route
    http://localhost:8000/?format=json
"""

import sys

from extra.utils.logging import info

from mediaweb import (
	HTTPRequest,
	HTTPResponse,
	MediaApplication,
	MediaService,
	Service,
	on,
	run,
)


class Health(Service):
	"""Answers health checks, the route takes precedence over the media
	service's catch-all one."""

	@on(priority=5, GET_HEAD="/_health")
	def health(self, request: HTTPRequest) -> HTTPResponse:
		return request.returns({"status": "ok"})


if __name__ == "__main__":
	root = sys.argv[1] if len(sys.argv) > 1 else "."
	info("Starting media server", Root=root)
	run(MediaApplication(), MediaService(root), Health(), port=8000)

# EOF
