"""
Mapping codec implementations for cache persistence, dood!

A codec turns the whole store mapping into bytes and back. The persistence
layer relies on the codec to tell apart two failure kinds:
- CorruptedStorageError: bytes aren't a valid stream of this format
- SchemaMismatchError: bytes decode, but not into Dict[CacheKey, value]

Available Codecs:
    - PickleMappingCodec: supports arbitrary picklable values (default)
    - JsonMappingCodec: human-readable, for JSON-serializable identifiers and values
"""

import json
import pickle
from typing import Any, Dict

from .exceptions import CacheStorageError, CorruptedStorageError, SchemaMismatchError
from .key import CacheKey
from .types import MappingCodec


def _checkMapping(obj: Any) -> Dict[CacheKey, Any]:
    if not isinstance(obj, dict):
        raise SchemaMismatchError(f"Expected mapping of cache keys, got {type(obj).__name__}")
    for key in obj:
        if not isinstance(key, CacheKey):
            raise SchemaMismatchError(f"Expected CacheKey keys, got {type(key).__name__}")
    return obj


class PickleMappingCodec(MappingCodec):
    """
    Pickle-based codec, supports any picklable identifier and value.

    Only load files written by the application itself: unpickling runs
    arbitrary code from the file.
    """

    __slots__ = ("protocol",)

    def __init__(self, protocol: int = pickle.HIGHEST_PROTOCOL):
        self.protocol = protocol

    def encode(self, mapping: Dict[CacheKey, Any]) -> bytes:
        try:
            return pickle.dumps(mapping, protocol=self.protocol)
        except Exception as e:
            raise CacheStorageError(f"Failed to pickle cache mapping: {e}", originalError=e)

    def decode(self, data: bytes) -> Dict[CacheKey, Any]:
        try:
            obj = pickle.loads(data)
        except (ImportError, AttributeError) as e:
            # Stream is fine but refers to classes that no longer exist
            raise SchemaMismatchError(f"Cache file refers to unknown types: {e}", originalError=e)
        except Exception as e:
            raise CorruptedStorageError(f"Cache file is not a valid pickle stream: {e}", originalError=e)

        return _checkMapping(obj)


def _rejectUnserializable(obj: Any) -> Any:
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def _hashable(value: Any) -> Any:
    # JSON has no tuples, identifiers written as tuples come back as lists
    if isinstance(value, list):
        return tuple(_hashable(item) for item in value)
    return value


class JsonMappingCodec(MappingCodec):
    """
    JSON codec storing entries as `[identifier, creationTimeMillis, value]` triples.

    Identifiers and values must be JSON-serializable. List identifiers are
    restored as tuples so they stay hashable, dood!

    Example file content:
        {"version":1,"entries":[["token",1700000000000,"abc"]]}
    """

    VERSION = 1

    def encode(self, mapping: Dict[CacheKey, Any]) -> bytes:
        payload = {
            "version": self.VERSION,
            "entries": [[key.identifier, key.creationTimeMillis, value] for key, value in mapping.items()],
        }
        try:
            return json.dumps(
                payload, ensure_ascii=False, separators=(",", ":"), default=_rejectUnserializable
            ).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise CacheStorageError(f"Failed to encode cache mapping as JSON: {e}", originalError=e)

    def decode(self, data: bytes) -> Dict[CacheKey, Any]:
        try:
            payload = json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise CorruptedStorageError(f"Cache file is not valid JSON: {e}", originalError=e)

        if not isinstance(payload, dict) or payload.get("version") != self.VERSION:
            raise SchemaMismatchError(f"Unsupported cache file layout, expected version {self.VERSION}")

        entries = payload.get("entries")
        if not isinstance(entries, list):
            raise SchemaMismatchError("Cache file has no entries list")

        result: Dict[CacheKey, Any] = {}
        for entry in entries:
            if not isinstance(entry, list) or len(entry) != 3 or not isinstance(entry[1], int):
                raise SchemaMismatchError(f"Malformed cache entry: {entry!r}")
            identifier, creationTimeMillis, value = entry
            try:
                result[CacheKey(_hashable(identifier), creationTimeMillis)] = value
            except TypeError as e:
                raise SchemaMismatchError(f"Unhashable cache identifier: {identifier!r}", originalError=e)

        return result
