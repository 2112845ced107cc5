from inspect import iscoroutine
from typing import Any, Coroutine, Union

from extra.http.model import HTTPBodyBlob, HTTPRequest, HTTPResponse
from extra.model import Application
from extra.utils.logging import exception

# --
# # Application
#
# The toolkit's application, with the request level behaviour of the media
# server on top: HEAD requests are answered with the head of the GET
# response, methods that no route accepts get a 405 listing the ones that
# do, and any unexpected error a plain text 500.


class MediaApplication(Application):
	def process(
		self, request: HTTPRequest
	) -> Union[HTTPResponse, Coroutine[Any, HTTPResponse, Any]]:
		try:
			res = super().process(request)
		except Exception as e:
			return self.onException(request, e)
		if iscoroutine(res):
			return self.complete(request, res)
		else:
			return self.onResponse(request, res)

	async def complete(
		self, request: HTTPRequest, response: Coroutine[Any, HTTPResponse, Any]
	) -> HTTPResponse:
		try:
			res: HTTPResponse = await response
		except Exception as e:
			return self.onException(request, e)
		return self.onResponse(request, res)

	def onResponse(self, request: HTTPRequest, response: HTTPResponse) -> HTTPResponse:
		if request.method == "HEAD" and response.body is not None:
			# An empty blob keeps the status and the headers, `Content-Length`
			# included, as they are.
			response.body = HTTPBodyBlob()
		return response

	def onException(self, request: HTTPRequest, error: Exception) -> HTTPResponse:
		exception(error, f"{request.method} {request.path}")
		return request.fail("Internal server error")

	def allows(self, path: str) -> list[str]:
		"""Returns the methods that have a route matching `path`."""
		return sorted(
			method
			for method in self.dispatcher.routes
			if self.dispatcher.match(method, path)[0]
		)

	def onRouteNotFound(self, request: HTTPRequest) -> HTTPResponse:
		methods: list[str] = self.allows(request.path or "/")
		if methods:
			return request.error(405, headers={"Allow": ", ".join(methods)})
		else:
			return request.notFound()


# EOF
