import os
from urllib.parse import quote, unquote

from .errors import OutsideRoot

# --
# # Path confinement
#
# Request paths are untrusted. They are joined with the served root and
# normalized lexically first, which rejects `..` escapes without touching
# the filesystem. The canonical (symlink free) path is then checked against
# the canonical root, so that a link inside the root can't expose what is
# outside of it.
#
# File names are bytes on POSIX. Names that are not valid UTF-8 are kept as
# surrogate escapes (see `os.fsdecode`) so that they can be encoded back to
# the exact same bytes in links and decoded from requests.


def decode(path: str) -> str:
	"""Decodes a percent encoded request path, the way `encode` encodes it."""
	return unquote(path, errors="surrogateescape")


def encode(path: str) -> str:
	"""Percent encodes the bytes of the given path."""
	return quote(os.fsencode(path))


def printable(path: str) -> str:
	"""Returns `path` as valid text, undecodable bytes being replaced."""
	return os.fsencode(path).decode("utf8", errors="replace")


def contains(root: str, path: str) -> bool:
	"""Tells if `path` is `root` or one of its descendants, comparing whole
	path segments (`/srv/media2` is not inside `/srv/media`)."""
	if path == root:
		return True
	prefix: str = root if root.endswith(os.sep) else root + os.sep
	return path.startswith(prefix)


def resolve(root: str, requestPath: str, *, followLinks: bool = True) -> str:
	"""Returns the absolute, normalized location of `requestPath` within
	`root`, raising `OutsideRoot` when it escapes it. With `followLinks`,
	symbolic links are resolved and their target must be within the root
	as well."""
	if "\x00" in requestPath:
		raise OutsideRoot(requestPath, "invalid path")
	base: str = os.path.abspath(root)
	path: str = os.path.normpath(os.path.join(base, requestPath.lstrip("/" + os.sep)))
	if not contains(base, path):
		raise OutsideRoot(requestPath)
	if followLinks:
		real_root: str = os.path.realpath(base)
		if not contains(real_root, os.path.realpath(path)):
			raise OutsideRoot(requestPath)
	return path


def relative(path: str, prefix: str) -> str:
	"""Strips `prefix` from `path`, returning the remaining path, `/` when
	nothing remains. The prefix must match whole segments."""
	if path == prefix:
		return "/"
	elif path.startswith(prefix.rstrip("/") + "/"):
		return path[len(prefix.rstrip("/")) :]
	else:
		raise OutsideRoot(path, f"path is not under {prefix}")


# EOF
