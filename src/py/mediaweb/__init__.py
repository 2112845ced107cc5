from extra import HTTPRequest, HTTPResponse, Service, on, post, run  # NOQA: F401
from extra.http.model import HTTPRequestError  # NOQA: F401
from .app import MediaApplication  # NOQA: F401
from .paths import resolve  # NOQA: F401
from .sniffing import ContentKind, classify  # NOQA: F401
from .services.media import MediaService  # NOQA: F401


# EOF
