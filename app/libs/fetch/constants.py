from enum import StrEnum


class Method(StrEnum):
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    CONNECT = "CONNECT"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"
    PATCH = "PATCH"


class ContentType(StrEnum):
    BINARY = "application/octet-stream"
    FORM_DATA = "multipart/form-data"
    JSON = "application/json"
    JSON_LD = "application/ld+json"
    TEXT = "text/plain"
    URL_ENCODED = "application/x-www-form-urlencoded"
    XML = "application/xml"
    XML_PUBLIC = "text/xml"


class ResponseType(StrEnum):
    BASIC = "basic"  # same-origin / local resource
    CORS = "cors"  # remote resource
    ERROR = "error"  # no usable headers were obtained


REDIRECT_STATUSES = (301, 302, 303, 307, 308)

NETWORK_ERROR_TEXT = "network error"
TIMED_OUT_REASON = "Request timed out"
NO_HEADERS_REASON = "Headers not sent by remote server"
UNKNOWN_ERROR_REASON = "Unknown network error"
