import asyncio
from pathlib import Path

import pytest
from extra.http.model import HTTPBodyWriter, HTTPHeaders, HTTPRequest, HTTPResponse
from extra.model import Application, mount
from extra.routing import awaited

from mediaweb.app import MediaApplication
from mediaweb.services.media import MediaService

# Leading bytes of real files, padded to look like the start of a file
MP4: bytes = b"\x00\x00\x00\x18ftypmp42\x00\x00\x00\x00mp42isom" + b"\x00" * 64
WEBM: bytes = (
	b"\x1a\x45\xdf\xa3\x9f\x42\x86\x81\x01\x42\xf7\x81\x01\x42\xf2\x81\x04"
	b"\x42\xf3\x81\x08\x42\x82\x84webm\x42\x87\x81\x02\x42\x85\x81\x02"
) + b"\x00" * 64
PNG: bytes = (
	b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01"
	b"\x08\x06\x00\x00\x00\x1f\x15\xc4\x89"
) + b"\x00" * 64
TEXT: bytes = b"Just some notes\n"


@pytest.fixture
def media(tmp_path: Path) -> Path:
	"""A served root with videos, an image, text and subdirectories:

	>    media/
	>      movies/clip.mp4
	>      movies/trailer.webm
	>      movies/my clip.mp4
	>      empty/
	>      cover.png
	>      notes.txt
	>      disguised.txt   (MP4 bytes)
	>      fake.mp4        (text bytes)
	"""
	root = tmp_path / "media"
	(root / "movies").mkdir(parents=True)
	(root / "empty").mkdir()
	(root / "movies" / "clip.mp4").write_bytes(MP4)
	(root / "movies" / "trailer.webm").write_bytes(WEBM)
	(root / "movies" / "my clip.mp4").write_bytes(MP4)
	(root / "cover.png").write_bytes(PNG)
	(root / "notes.txt").write_bytes(TEXT)
	(root / "disguised.txt").write_bytes(MP4)
	(root / "fake.mp4").write_bytes(TEXT)
	return root


@pytest.fixture
def outside(tmp_path: Path) -> Path:
	"""A directory next to the served root, that must never be reachable."""
	path = tmp_path / "secret"
	path.mkdir()
	(path / "passwords.txt").write_bytes(b"hunter2\n")
	(path / "movie.mp4").write_bytes(MP4)
	return path


@pytest.fixture
def app(media: Path) -> Application:
	return serve(media)


def serve(root: Path, *, followLinks: bool = True) -> Application:
	return mount(MediaApplication(), MediaService(str(root), followLinks=followLinks))


class BufferWriter(HTTPBodyWriter):
	"""Collects what would be sent to the client."""

	def __init__(self, failAfter: int | None = None) -> None:
		super().__init__(None)
		self.data: bytearray = bytearray()
		self.writes: int = 0
		self.failAfter: int | None = failAfter

	async def _writeBytes(self, chunk, more: bool = False) -> bool:
		if self.failAfter is not None and self.writes >= self.failAfter:
			raise BrokenPipeError("Client went away")
		self.writes += 1
		if chunk:
			self.data += chunk
		return True


def request(
	path: str, method: str = "GET", query: dict[str, str] | None = None
) -> HTTPRequest:
	"""Creates a request as the parser would, `path` being percent encoded."""
	return HTTPRequest(method, path, query or {}, HTTPHeaders({}))


def fetch(
	app: Application,
	path: str,
	method: str = "GET",
	query: dict[str, str] | None = None,
) -> HTTPResponse:
	"""Processes a request in-process, without going through a socket."""
	return asyncio.run(awaited(app.process(request(path, method, query))))


def content(response: HTTPResponse) -> bytes:
	"""Returns the body of the response, as it would be written out."""
	writer = BufferWriter()
	asyncio.run(writer.write(response.body))
	return bytes(writer.data)


# EOF
