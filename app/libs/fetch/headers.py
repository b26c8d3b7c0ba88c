import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

STATUS_LINE_RE = re.compile(r"HTTP/[0-9.]+\s+([0-9]+)(?:[ \t]+([^\r\n]*))?", re.IGNORECASE)


@dataclass(frozen=True)
class ParsedHeaders:
    headers: dict[str, str] = field(default_factory=dict)
    status: int = 0
    first_line: str = ""
    last_status_line: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status <= 299

    @property
    def redirected(self) -> bool:
        # Positional diff only, intermediate hops are not checked for 3xx
        return bool(self.last_status_line) and self.last_status_line != self.first_line

    def get(self, name: str, default: str | None = None) -> str | None:
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return default


def split_header(line: str) -> tuple[str, str] | None:
    """Split ``"Name: value"`` on the first colon, ``None`` for bare values."""
    name, sep, value = line.partition(":")
    if not sep:
        return None
    return name.strip(), value.strip()


def match_status_line(line: str) -> tuple[int, str] | None:
    match = STATUS_LINE_RE.search(line)
    if match is None:
        return None
    return int(match.group(1)), (match.group(2) or "").strip()


def render_header_lines(headers: Mapping[str | int, str] | None) -> list[str]:
    if not headers:
        return []
    return [value if isinstance(name, int) else f"{name}: {value}" for name, value in headers.items()]


class HeaderParser:
    """Turns the raw status/header block of a transport into ``ParsedHeaders``.

    The block is every line the transport saw, in order, across all redirect
    hops: ``HTTP/1.1 302 Found``, ``Location: /next``, ``HTTP/1.1 200 OK``...
    Header names are trimmed and later duplicates overwrite earlier ones, so
    the map reflects the final hop for names it shares with earlier hops.
    """

    @staticmethod
    def parse(raw_lines: Iterable[str]) -> ParsedHeaders:
        lines = list(raw_lines)
        headers: dict[str, str] = {}
        status = 0
        last_status_line = ""

        for line in lines:
            pair = split_header(line)
            if pair is not None:
                headers[pair[0]] = pair[1]
                continue
            matched = match_status_line(line)
            if matched is not None:
                status = matched[0]
                last_status_line = line

        return ParsedHeaders(
            headers=headers,
            status=status,
            first_line=lines[0] if lines else "",
            last_status_line=last_status_line,
        )
