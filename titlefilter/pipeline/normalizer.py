"""Stage 1 – Script-variant normalisation.

Turns a string into its three lowercased forms: the original, the
Traditional (variant A) rendering and the Simplified (variant B) rendering.
Conversion is delegated to a ``ScriptConverter``:

* **Production** – ``OpenCCConverter`` wrapping ``opencc-python-reimplemented``
  with the ``VARIANT_A_CONFIG`` / ``VARIANT_B_CONFIG`` dictionaries.
* **Tests** – any object with ``to_variant_a`` / ``to_variant_b``.

The OpenCC dictionaries are loaded once per process, on first use.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Iterator, Protocol

from titlefilter.config import settings

_log = logging.getLogger("titlefilter.normalizer")


class ConversionError(RuntimeError):
    """Raised when the script converter fails on an input string."""


class ScriptConverter(Protocol):
    def to_variant_a(self, text: str) -> str: ...

    def to_variant_b(self, text: str) -> str: ...


class IdentityConverter:
    """Converter that leaves text untouched."""

    def to_variant_a(self, text: str) -> str:
        return text

    def to_variant_b(self, text: str) -> str:
        return text


class OpenCCConverter:
    """Simplified ⇄ Traditional conversion backed by OpenCC dictionaries."""

    def __init__(
        self,
        variant_a_config: str | None = None,
        variant_b_config: str | None = None,
    ) -> None:
        self.variant_a_config = variant_a_config or settings.variant_a_config
        self.variant_b_config = variant_b_config or settings.variant_b_config
        self._to_a: Any | None = None
        self._to_b: Any | None = None
        self._lock = threading.Lock()

    def load(self) -> None:
        """Build both OpenCC instances.  No-op once loaded."""
        if self._to_a is not None and self._to_b is not None:
            return
        with self._lock:
            if self._to_a is not None and self._to_b is not None:
                return
            from opencc import OpenCC  # dictionary load is slow – deferred

            to_a = OpenCC(self.variant_a_config)
            to_b = OpenCC(self.variant_b_config)
            self._to_a, self._to_b = to_a, to_b
            _log.info(
                "Loaded OpenCC converters (%s, %s)",
                self.variant_a_config, self.variant_b_config,
            )

    def is_loaded(self) -> bool:
        return self._to_a is not None and self._to_b is not None

    def to_variant_a(self, text: str) -> str:
        self.load()
        return self._convert(self._to_a, text)

    def to_variant_b(self, text: str) -> str:
        self.load()
        return self._convert(self._to_b, text)

    @staticmethod
    def _convert(converter: Any, text: str) -> str:
        try:
            return converter.convert(text)
        except Exception as exc:
            raise ConversionError(f"Script conversion failed for {text!r}") from exc


# ── Process-wide default converter ─────────────────────────────────────────

_default_converter: OpenCCConverter | None = None
_default_lock = threading.Lock()


def get_default_converter() -> OpenCCConverter:
    """Return the shared ``OpenCCConverter``, creating it on first call."""
    global _default_converter
    if _default_converter is None:
        with _default_lock:
            if _default_converter is None:
                _default_converter = OpenCCConverter()
    return _default_converter


def load_model() -> None:
    """Eagerly load the shared converter's dictionaries (startup hook)."""
    get_default_converter().load()


def is_loaded() -> bool:
    return _default_converter is not None and _default_converter.is_loaded()


# ── Variant sets ───────────────────────────────────────────────────────────

@dataclass(frozen=True)
class VariantSet:
    """The lowercased original, variant-A and variant-B forms of a string."""

    original: str
    variant_a: str
    variant_b: str

    def __iter__(self) -> Iterator[str]:
        return iter((self.original, self.variant_a, self.variant_b))

    def contains(self, needle: str) -> bool:
        """Return ``True`` if *needle* is a substring of any form."""
        return any(needle in form for form in self)


class VariantNormalizer:
    """Produce ``VariantSet``s through an injected ``ScriptConverter``."""

    def __init__(self, converter: ScriptConverter | None = None) -> None:
        self.converter = converter if converter is not None else get_default_converter()

    def normalize(self, text: str) -> VariantSet:
        return VariantSet(
            original=text.lower(),
            variant_a=self.converter.to_variant_a(text).lower(),
            variant_b=self.converter.to_variant_b(text).lower(),
        )
