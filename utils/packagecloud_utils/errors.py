"""Errors raised by the packagecloud helper. All of them are `SystemError`s."""


class PackagecloudError(SystemError):
    pass


class MissingTokenError(PackagecloudError):
    pass


class UnknownDistributionError(PackagecloudError):
    def __init__(self, distro, version):
        super().__init__(f"unknown distribution: {distro}/{version}")
        self.distro = distro
        self.version = version


class TransportError(PackagecloudError):
    pass


class HTTPStatusError(PackagecloudError):
    """
    Base class for errors coming from a response status.

    :param status_code: `Int` status code returned by the server.
    :param body: `String` response body, kept verbatim for diagnostics.
    """

    def __init__(self, message, status_code, body):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class SourceFetchError(PackagecloudError):
    def __init__(self, message, status_code=None, body=None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ValidationError(HTTPStatusError):
    def __init__(self, body):
        super().__init__(f"unprocessable entity: {body}", 422, body)


class PackageNotFoundError(HTTPStatusError):
    def __init__(self, url, body=""):
        super().__init__(f"not found: {url}", 404, body)
        self.url = url


class UnexpectedStatusError(HTTPStatusError):
    def __init__(self, status_code, reason, body):
        super().__init__(f"resp: {status_code} {reason}, {body!r}", status_code, body)
