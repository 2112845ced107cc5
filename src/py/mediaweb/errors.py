from typing import ClassVar

from extra.http.model import HTTPRequestError

# --
# # Errors
#
# Each error knows the HTTP status it maps to. They are raised where the
# problem is detected and turned into a plain text response by the handler
# that receives them.


class MediaError(HTTPRequestError):
	STATUS: ClassVar[int] = 500

	def __init__(self, message: str) -> None:
		super().__init__(message, status=self.STATUS, contentType="text/plain")


class OutsideRoot(MediaError):
	"""The requested path escapes the served root."""

	STATUS = 400

	def __init__(self, path: str, message: str = "outside allowed path") -> None:
		super().__init__(message)
		self.path: str = path


class NotFound(MediaError):
	"""The requested path does not exist or can't be accessed."""

	STATUS = 400


class Unreadable(MediaError):
	STATUS = 500


class ClassificationError(MediaError):
	"""The file bytes could not be read to detect its content type."""

	STATUS = 500


class RenderFailure(MediaError):
	STATUS = 500


# EOF
