from typing import NamedTuple

import filetype

from .errors import ClassificationError

# Number of leading bytes inspected, enough for all the signatures `filetype`
# knows about.
SNIFF_SIZE: int = 8192


class ContentKind(NamedTuple):
	"""The content type of a file, as detected from its leading bytes."""

	type: str
	subtype: str
	mime: str
	extension: str

	@staticmethod
	def FromMIME(mime: str, extension: str) -> "ContentKind":
		category, _, subtype = mime.partition("/")
		return ContentKind(category, subtype, mime, extension)

	@property
	def category(self) -> str:
		return self.type

	@property
	def isVideo(self) -> bool:
		return self.type == "video"

	@property
	def isKnown(self) -> bool:
		return bool(self.mime)

	def describe(self) -> str:
		"""Returns the full classification, as used for diagnostics."""
		return f"type={self.type} subtype={self.subtype} mime={self.mime} extension={self.extension}"


# No known signature matched
UNKNOWN: ContentKind = ContentKind("", "", "", "unknown")


def sniff(data: bytes) -> ContentKind:
	"""Classifies the given leading bytes of a file."""
	if not data:
		return UNKNOWN
	kind = filetype.guess(data[:SNIFF_SIZE])
	return ContentKind.FromMIME(kind.mime, kind.extension) if kind else UNKNOWN


def classify(path: str) -> ContentKind:
	"""Classifies the file at `path` by its content, the name of the file
	is never looked at. Raises `ClassificationError` when the file can't
	be read."""
	try:
		with open(path, "rb") as f:
			head: bytes = f.read(SNIFF_SIZE)
	except OSError as e:
		raise ClassificationError(
			f"Could not read {path}: {e.strerror or e}"
		) from e
	return sniff(head)


# EOF
