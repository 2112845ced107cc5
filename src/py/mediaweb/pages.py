import os
import posixpath
from typing import Iterable, NamedTuple

from extra.utils.htmpl import H, Node, html

from .config import DOWNLOAD_PREFIX
from .errors import RenderFailure, Unreadable
from .paths import contains, encode, printable
from .sniffing import UNKNOWN, ContentKind, classify

# --
# # Pages
#
# The directory listing and the media player pages. Both are built from
# fresh nodes on each request, only the stylesheet and the markup factory
# are shared.

PAGE_CSS: str = """
:root {
	font-family: sans-serif;
	line-height: 1.35em;
	padding: 20px;
	background: #F0F0F0;
}
body {
	font-size: xx-large;
}
ul {
	padding: 0px 20px;
}
li {
	margin: 0.5em 0em;
}
.type {
	font-size: medium;
	color: #808080;
	margin-left: 0.75em;
}
"""

VIDEOJS_VERSION: str = "8.10.0"
VIDEOJS_CSS: str = f"https://vjs.zencdn.net/{VIDEOJS_VERSION}/video-js.css"
VIDEOJS_SCRIPT: str = f"https://vjs.zencdn.net/{VIDEOJS_VERSION}/video.min.js"

DIRECTORY: str = "directory"


class DirEntry(NamedTuple):
	"""An entry of a directory listing. Only navigable entries have a link,
	which is relative to the path the listing was requested from."""

	name: str
	navigable: bool
	type: str
	href: str | None = None


def link(requestPath: str, name: str = "") -> str:
	"""Returns the (URL encoded) link to `name` within the directory
	requested at `requestPath`."""
	path: str = posixpath.join("/", requestPath.lstrip("/"))
	return encode(posixpath.join(path, name) if name else path)


def listEntries(
	dirPath: str, requestPath: str, *, root: str | None = None
) -> list[DirEntry]:
	"""Lists the children of `dirPath`, classifying files to know which
	are videos. Subdirectories and videos are navigable. Any error aborts
	the whole listing.

	When a canonical `root` is given, symbolic links leading outside of it
	are listed as unknown and never followed. Only regular files are
	opened, anything else (pipes, sockets, devices, dangling links) is
	listed as unknown."""
	entries: list[DirEntry] = []
	try:
		with os.scandir(dirPath) as children:
			for child in children:
				name: str = printable(child.name)
				if (
					root is not None
					and child.is_symlink()
					and not contains(root, os.path.realpath(child.path))
				):
					entries.append(DirEntry(name, False, UNKNOWN.extension))
				elif child.is_dir():
					entries.append(
						DirEntry(name, True, DIRECTORY, link(requestPath, child.name))
					)
				elif child.is_file():
					kind: ContentKind = classify(child.path)
					entries.append(
						DirEntry(
							name,
							kind.isVideo,
							kind.extension,
							link(requestPath, child.name) if kind.isVideo else None,
						)
					)
				else:
					entries.append(DirEntry(name, False, UNKNOWN.extension))
	except OSError as e:
		raise Unreadable(
			f"Could not list {printable(dirPath)}: {e.strerror or e}"
		) from e
	return sorted(entries, key=lambda _: _.name)


def render(node: Node) -> str:
	try:
		return "".join(html(node, doctype="html"))
	except (KeyError, TypeError, ValueError) as e:
		raise RenderFailure(f"Could not render page: {e}") from e


def renderListing(dirPath: str, entries: Iterable[DirEntry], requestPath: str) -> str:
	"""Renders the listing of the directory at `dirPath`, titled with that
	path, with one list item per entry."""
	items: list[Node] = []
	for entry in entries:
		label: str = f"{entry.name}/" if entry.type == DIRECTORY else entry.name
		items.append(
			H.li(
				H.a(label, href=entry.href) if entry.navigable and entry.href else label,
				H.span(entry.type, _="type"),
			)
		)
	current: str = posixpath.join("/", requestPath.lstrip("/"))
	parent: str = posixpath.dirname(current.rstrip("/")) or "/"
	return render(
		H.html(
			H.head(
				H.meta(charset="utf-8"),
				H.meta(
					name="viewport",
					content="width=device-width, initial-scale=1.0",
				),
				H.title(printable(dirPath)),
				H.style(PAGE_CSS),
			),
			H.body(
				H.p(H.a("..", href=encode(parent))) if current != "/" else [],
				H.ul(*items),
			),
		)
	)


def renderMediaPage(
	filePath: str, requestPath: str, kind: ContentKind | None = None
) -> str:
	"""Renders a player for the file at `filePath`, streaming from the
	download path. The page is rendered whatever the kind of the file, the
	`type` of the source is left empty when it is not known."""
	kind = classify(filePath) if kind is None else kind
	return render(
		H.html(
			H.head(
				H.meta(charset="utf-8"),
				H.title(printable(posixpath.basename(filePath))),
				H.link(href=VIDEOJS_CSS, rel="stylesheet"),
			),
			H.body(
				H.video(
					H.source(
						src=DOWNLOAD_PREFIX + link(requestPath),
						type=kind.mime,
					),
					H.p(
						"To view this video please enable JavaScript, and consider upgrading to a web browser that supports HTML5 video",
						_="vjs-no-js",
					),
					id="media-player",
					_="video-js",
					controls=None,
					preload="auto",
					width="640",
					height="264",
					**{"data-setup": "{}"},
				),
				H.script(src=VIDEOJS_SCRIPT),
			),
		)
	)


# EOF
