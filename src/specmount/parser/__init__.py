"""OpenAPI document loading -- read, parse, and resolve ``$ref`` pointers.

Sub-modules:

* :mod:`~specmount.parser.loader` -- I/O layer (file, URL) plus JSON/YAML
  format detection.
* :mod:`~specmount.parser.resolver` -- Recursive ``$ref`` resolution with
  external-document support and circular-reference detection.
* :mod:`~specmount.parser.dereferencer` -- The :class:`Dereferencer`
  strategy interface and its default implementation.
* :mod:`~specmount.parser.spec_loader` -- :class:`SpecLoader`, which turns
  the caller's ``apiDoc`` argument into a dereferenced document.
"""

from specmount.parser.dereferencer import Dereferencer, RefDereferencer
from specmount.parser.loader import load_spec
from specmount.parser.resolver import resolve_refs
from specmount.parser.spec_loader import SpecLoader

__all__ = ["Dereferencer", "RefDereferencer", "SpecLoader", "load_spec", "resolve_refs"]
