import asyncio
import os
import stat
from typing import Callable

from extra.decorators import on, post
from extra.http.model import HTTPRequest, HTTPRequestError, HTTPResponse
from extra.model import Service
from extra.routing import Route

from ..config import DOWNLOAD_PREFIX
from ..errors import NotFound, Unreadable
from ..pages import listEntries, renderListing, renderMediaPage
from ..paths import decode, printable, relative, resolve
from ..sniffing import ContentKind, classify

HANDLER_HEADER: str = "X-Mediaweb-Handler"
TYPE_HEADER: str = "X-Mediaweb-Type"

# Used when the content of a downloaded file is not recognized
DEFAULT_CONTENT_TYPE: str = "application/octet-stream"

# Any path, new lines included, matched up to its very end
Route.AddPattern("media", r"(?s:.*)")


def tagHandler(request: HTTPRequest, response: HTTPResponse, name: str) -> HTTPResponse:
	"""Tells which handler produced the response."""
	return response.setHeader(HANDLER_HEADER, name)


# Decorator that tags every response of a handler, errors included
def handled(name: str) -> Callable[[Callable], Callable]:
	return lambda function: post(tagHandler)(function, name)


def openStat(path: str) -> os.stat_result:
	"""Returns the status of `path`, once it is known to be readable. The
	file is opened without blocking, so that pipes can't stall the call."""
	fd: int = os.open(path, os.O_RDONLY | os.O_NONBLOCK)
	try:
		return os.fstat(fd)
	finally:
		os.close(fd)


class MediaService(Service):
	"""Serves the media files of the `root` directory: directories are
	rendered as listings, files as a video player page, and the raw bytes
	are available under the download prefix.

	Handlers run their filesystem work in a thread, so that a slow disk or
	a large directory never holds the other requests."""

	def __init__(self, root: str | None = None, *, followLinks: bool = True):
		super().__init__()
		self.root: str = os.path.abspath(root or ".")
		self.followLinks: bool = followLinks

	def resolvePath(self, path: str) -> str:
		return resolve(self.root, path, followLinks=self.followLinks)

	@handled("download")
	@on(priority=10, GET_HEAD=(DOWNLOAD_PREFIX, DOWNLOAD_PREFIX + "/{path:media}"))
	async def download(self, request: HTTPRequest, path: str = "") -> HTTPResponse:
		return await asyncio.to_thread(self.sendFile, request)

	@on(GET_HEAD=("/", "/{path:media}"))
	async def route(self, request: HTTPRequest, path: str = "") -> HTTPResponse:
		return await asyncio.to_thread(self.respond, request, decode(path))

	def sendFile(self, request: HTTPRequest) -> HTTPResponse:
		local_path: str = self.resolvePath(
			relative(decode(request.path), DOWNLOAD_PREFIX)
		)
		try:
			mode: int = openStat(local_path).st_mode
		except OSError as e:
			raise Unreadable(
				f"Could not open {printable(local_path)}: {e.strerror or e}"
			) from e
		if not stat.S_ISREG(mode):
			raise Unreadable(f"Could not open {printable(local_path)}: not a file")
		kind: ContentKind = classify(local_path)
		try:
			return request.respondFile(
				local_path,
				contentType=kind.mime or DEFAULT_CONTENT_TYPE,
				headers={"Accept-Ranges": "none"},
			)
		except OSError as e:
			raise Unreadable(
				f"Could not open {printable(local_path)}: {e.strerror or e}"
			) from e

	def respond(self, request: HTTPRequest, path: str) -> HTTPResponse:
		local_path: str = self.resolvePath(path)
		try:
			mode: int = openStat(local_path).st_mode
		except (FileNotFoundError, PermissionError, NotADirectoryError) as e:
			raise NotFound(
				f"Could not access {printable(path or '/')}: {e.strerror or e}"
			) from e
		except OSError as e:
			raise Unreadable(
				f"Could not access {printable(path or '/')}: {e.strerror or e}"
			) from e
		if stat.S_ISDIR(mode):
			return self.dispatch("dir", self.renderDir, request, path, local_path)
		elif stat.S_ISREG(mode):
			return self.dispatch("file", self.renderFile, request, path, local_path)
		else:
			raise NotFound(f"Could not access {printable(path)}: not a file")

	def dispatch(
		self,
		name: str,
		renderer: Callable[[HTTPRequest, str, str], HTTPResponse],
		request: HTTPRequest,
		path: str,
		localPath: str,
	) -> HTTPResponse:
		"""Runs the given renderer, turning its errors into responses, and
		tags the response with the handler `name`."""
		try:
			response: HTTPResponse = renderer(request, path, localPath)
		except HTTPRequestError as error:
			response = request.fail(
				error.message,
				status=error.status or 500,
				contentType=error.contentType or "text/plain",
			)
		return tagHandler(request, response, name)

	def renderDir(self, request: HTTPRequest, path: str, localPath: str) -> HTTPResponse:
		entries = listEntries(
			localPath,
			path,
			root=os.path.realpath(self.root) if self.followLinks else None,
		)
		match request.param("format", "html"):
			case "json":
				return request.returns(entries)
			case _:
				return request.respondHTML(renderListing(localPath, entries, path))

	def renderFile(self, request: HTTPRequest, path: str, localPath: str) -> HTTPResponse:
		kind: ContentKind = classify(localPath)
		return request.respondHTML(renderMediaPage(localPath, path, kind)).setHeader(
			TYPE_HEADER, kind.describe()
		)


# EOF
