"""Modelo RF2: tipos de release, linhas e catálogo de content files (`content_file`)."""

from .release import CRLF, TAB, Partition, ReleaseType, Row, parse_line, serialize_row  # noqa: F401
