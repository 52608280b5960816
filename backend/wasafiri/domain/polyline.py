from __future__ import annotations

import math
from typing import Iterable

from wasafiri.domain.geometry import GeoPoint


_PRECISION = 5
_FACTOR = 10**_PRECISION
_CHUNK_BITS = 5
_CHUNK_MASK = 0x1F
_CONTINUATION = 0x20
_ASCII_OFFSET = 63


def decode(encoded: str) -> list[GeoPoint]:
    """
    Decode an encoded polyline into points in traversal order.

    Each coordinate is stored as the zig-zag encoded difference from the
    previous one, scaled by 1e5 and split into 5-bit chunks offset into
    printable ASCII. Decoded values are rounded back to 5 decimal places.

    Raises:
        ValueError: if the string contains characters outside the alphabet
            or ends in the middle of a coordinate pair.
    """
    points: list[GeoPoint] = []
    index = 0
    latitude = 0
    longitude = 0
    length = len(encoded)

    while index < length:
        delta_lat, index = _read_value(encoded, index)
        if index >= length:
            raise ValueError("Polyline ends after a latitude without a longitude")
        delta_lng, index = _read_value(encoded, index)
        latitude += delta_lat
        longitude += delta_lng
        points.append(
            GeoPoint(
                round(latitude / _FACTOR, _PRECISION),
                round(longitude / _FACTOR, _PRECISION),
            )
        )

    return points


def encode(points: Iterable[GeoPoint | tuple[float, float]]) -> str:
    """Encode points with the same algorithm :func:`decode` reverses."""

    chunks: list[str] = []
    previous_lat = 0
    previous_lng = 0
    for point in points:
        if isinstance(point, GeoPoint):
            lat, lng = point.latitude, point.longitude
        else:
            lat, lng = point
        scaled_lat = _round_half_away(lat * _FACTOR)
        scaled_lng = _round_half_away(lng * _FACTOR)
        chunks.append(_write_value(scaled_lat - previous_lat))
        chunks.append(_write_value(scaled_lng - previous_lng))
        previous_lat, previous_lng = scaled_lat, scaled_lng
    return "".join(chunks)


def _read_value(encoded: str, index: int) -> tuple[int, int]:
    result = 0
    shift = 0
    while True:
        if index >= len(encoded):
            raise ValueError("Polyline is truncated")
        chunk = ord(encoded[index]) - _ASCII_OFFSET
        index += 1
        if not 0 <= chunk < 2 * _CONTINUATION:
            raise ValueError(
                f"Invalid polyline character {encoded[index - 1]!r} at {index - 1}"
            )
        result |= (chunk & _CHUNK_MASK) << shift
        shift += _CHUNK_BITS
        if chunk < _CONTINUATION:
            break
    value = ~(result >> 1) if result & 1 else result >> 1
    return value, index


def _write_value(value: int) -> str:
    value = ~(value << 1) if value < 0 else value << 1
    out: list[str] = []
    while value >= _CONTINUATION:
        out.append(chr((_CONTINUATION | (value & _CHUNK_MASK)) + _ASCII_OFFSET))
        value >>= _CHUNK_BITS
    out.append(chr(value + _ASCII_OFFSET))
    return "".join(out)


def _round_half_away(value: float) -> int:
    # Python's round() is banker's rounding; the format rounds half away from zero.
    return int(math.copysign(math.floor(abs(value) + 0.5), value))
