""" The rdfprefix module expands and compacts prefixed names. """
from . import prefixes
from .prefixes import (
    PrefixRegistry, RdfPrefixError, UnresolvedPrefixError,
    UnresolvedNameError, InvalidLocalNameError, rdfprefix)

__all__ = [
    'prefixes', 'PrefixRegistry', 'RdfPrefixError', 'UnresolvedPrefixError',
    'UnresolvedNameError', 'InvalidLocalNameError', 'rdfprefix']
