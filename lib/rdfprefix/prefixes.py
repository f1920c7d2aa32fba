"""
Prefix registry for expanding and compacting prefixed names

Manages prefix to namespace IRI mappings (plus an optional default
vocabulary) and converts between prefixed names such as `schema:name`
and absolute identifiers such as `http://schema.org/name`. Mappings may be
given as JSON-LD contexts.

.. module:: prefixes
  :synopsis: Prefix registry for expanding and compacting prefixed names
"""

import json
import logging
import re
import sys
import traceback
import urllib.parse as urllib_parse

from rdfprefix.__about__ import (__copyright__, __license__, __version__)

__all__ = [
    '__copyright__', '__license__', '__version__',
    'expand', 'compact', 'is_prefixed_name', 'load_context', 'rdfprefix',
    'set_document_loader', 'get_document_loader', 'parse_link_header',
    'requests_document_loader',
    'PrefixRegistry', 'RdfPrefixError', 'UnresolvedPrefixError',
    'UnresolvedNameError', 'InvalidLocalNameError'
]

log = logging.getLogger(__name__)

# JSON-LD keywords with special meaning in a context
VOCAB = '@vocab'
ID = '@id'
CONTEXT = '@context'

# keys starting with this marker are reserved
KEYWORD_MARKER = '@'

# JSON-LD link header rel
LINK_HEADER_REL = 'http://www.w3.org/ns/json-ld#context'

# Restraints
MAX_CONTEXT_URLS = 10

# token ':' token, neither token holding ':', '/', '"' or "'"
_PREFIXED_NAME = re.compile(r'[^:/"\']*:[^:/"\']+')

# chars that stop a vocabulary term from expanding back
_RESERVED_LOCAL_CHARS = re.compile(r'[:/]')

# <target> followed by its ;-separated parameters
_LINK = re.compile(r'<([^>]*)>((?:\s*;\s*[^;,=]+=(?:"[^"]*"|[^;,]*))*)')
_LINK_PARAM = re.compile(r';\s*([^;,=\s]+)\s*=\s*(?:"([^"]*)"|([^;,\s]*))')


def rdfprefix(init=None, **kwargs):
    """
    Creates a new prefix registry.

    :param [init]: a prefix mapping, a JSON-LD context or a list of them.
    :param [on_key_dropped(key)]: called for every ignored context key.

    :return: the PrefixRegistry.
    """
    return PrefixRegistry(init, **kwargs)


def expand(name, ctx=None, tolerant=False):
    """
    Expands a prefixed name against the given context.

    :param name: the name to expand.
    :param [ctx]: the prefix mapping or context to expand with.
    :param [tolerant]: True to return unresolvable names unchanged.

    :return: the expanded IRI.
    """
    return PrefixRegistry(ctx).expand(name, tolerant)


def compact(iri, ctx=None):
    """
    Compacts an IRI against the given context.

    :param iri: the IRI to compact.
    :param [ctx]: the prefix mapping or context to compact with.

    :return: the compacted name.
    """
    return PrefixRegistry(ctx).compact(iri)


def is_prefixed_name(name):
    """
    Returns True if the given name has the shape `prefix:local`.

    The prefix may be empty, the local part may not. Neither part may
    contain ':', '/', '"' or "'", so absolute IRIs such as
    `http://schema.org/name` are never prefixed names.

    :param name: the name to check.

    :return: True if the name is a prefixed name, False if not.
    """
    return _is_string(name) and _PREFIXED_NAME.fullmatch(name) is not None


def load_context(ctx, options=None):
    """
    Resolves a JSON-LD @context value into a list of local contexts.

    Context URLs are dereferenced with the document loader and replaced
    by the @context of the retrieved document, recursively.

    :param ctx: a local context, a context URL or a list of them.
    :param [options]: the options to use:
      [documentLoader(url)] the document loader
        (default: _default_document_loader).

    :return: the list of local contexts, in order.
    """
    options = options or {}
    load_document = options.get('documentLoader', _default_document_loader)
    return _retrieve_contexts(ctx, load_document, [], None)


def set_document_loader(load_document):
    """
    Sets the default document loader used to retrieve remote contexts.

    :param load_document(url): the document loader to use.
    """
    global _default_document_loader
    _default_document_loader = load_document


def get_document_loader():
    """
    Gets the default document loader.

    :return: the default document loader.
    """
    return _default_document_loader


def parse_link_header(header):
    """
    Parses a Link header into a dict of rel to the links with that rel.

        parse_link_header(
            '</ctx.jsonld>; rel="alternate"; type="application/ld+json"')
        # -> {'alternate': [{'target': '/ctx.jsonld', 'rel': 'alternate',
        #                    'type': 'application/ld+json'}]}

    :param header: the Link header value.

    :return: the links, as lists of dicts of their parameters plus 'target'.
    """
    rval = {}
    for target, params in _LINK.findall(header):
        link = {'target': target}
        for key, quoted, bare in _LINK_PARAM.findall(params):
            link[key.lower()] = quoted or bare
        rval.setdefault(link.get('rel', ''), []).append(link)
    return rval


def dummy_document_loader(**kwargs):
    """
    Create a dummy document loader that will raise an exception on use.

    :param **kwargs: extra keyword args

    :return: the loader function.
    """

    def loader(url, options=None):
        raise RdfPrefixError(
            'No default document loader configured; install requests to '
            'load remote contexts.',
            'rdfprefix.LoadDocumentError', {'url': url},
            code='no default document loader')

    return loader


def requests_document_loader(**kwargs):
    import rdfprefix.documentloader.requests

    return rdfprefix.documentloader.requests.requests_document_loader(
        **kwargs)


class PrefixRegistry(object):
    """
    A PrefixRegistry holds prefix to namespace IRI mappings and a default
    vocabulary, and expands and compacts names with them.

    Calling the registry is a shortcut for the registration operations:

        prefixes = PrefixRegistry({'schema': 'http://schema.org/'})
        prefixes({'owl': 'http://www.w3.org/2002/07/owl#'})
        prefixes('rdfs', 'http://www.w3.org/2000/01/rdf-schema#')
        schema = prefixes('schema')
        schema('name')  # -> 'http://schema.org/name'
    """

    def __init__(self, init=None, on_key_dropped=None):
        """
        Initializes a new PrefixRegistry.

        :param [init]: a prefix mapping, a JSON-LD context or a list of them,
          applied in order.
        :param [on_key_dropped(key)]: called with every context key that is
          ignored during registration (default: log it).
        """
        self.prefixes = {}
        self.vocabulary = None
        self.on_key_dropped = on_key_dropped
        if init is not None:
            self.add_many(init)

    def __call__(self, prefix, iri=None):
        """
        Registers prefixes or creates a prefix helper, depending on the
        arguments.

        :param prefix: a prefix mapping or list of mappings to register, or
          a single prefix.
        :param [iri]: the IRI to register for a single prefix.

        :return: the registry when registering, otherwise a helper function
          as returned by make_helper().
        """
        if _is_object(prefix) or _is_array(prefix):
            return self.add_many(prefix)
        if iri is not None:
            self.add(prefix, iri)
            return self
        return self.make_helper(prefix)

    def add_many(self, contexts):
        """
        Registers every entry of one or more prefix mappings.

        :param contexts: a prefix mapping or a list of them; later mappings
          override earlier ones for the same prefix.

        :return: this registry.
        """
        if not _is_array(contexts):
            contexts = [contexts]

        for ctx in contexts:
            if not _is_object(ctx):
                raise RdfPrefixError(
                    'Invalid prefix mapping; a prefix mapping must be an '
                    'object.', 'rdfprefix.SyntaxError', {'context': ctx},
                    code='invalid local context')
            for prefix, iri in ctx.items():
                self.add(prefix, iri)

        return self

    def add(self, prefix, iri, tolerant=False):
        """
        Registers a prefix.

        `@vocab` sets the default vocabulary. Other keywords, non-string
        prefixes, prefixes containing ':' and values without an IRI (such as
        `{'@container': '@set'}`) are dropped.

        The IRI is expanded with the current mappings before it is stored,
        so a prefix it refers to must already be registered.

        :param prefix: the prefix.
        :param iri: the namespace IRI, a prefixed name or an object with an
          `@id` entry.
        :param [tolerant]: True to store unresolvable prefixed names as-is
          instead of failing.

        :return: this registry, or None if the entry was dropped.
        """
        if not _is_string(prefix):
            self._drop_key(prefix)
            return None

        if prefix.startswith(KEYWORD_MARKER):
            if prefix == VOCAB and _is_string(iri):
                self.vocabulary = self.expand(iri)
                log.debug('default vocabulary set to %r', self.vocabulary)
            else:
                self._drop_key(prefix)
            return None

        if ':' in prefix:
            self._drop_key(prefix)
            return None

        if _is_object(iri) and _is_string(iri.get(ID)):
            iri = iri[ID]
        if not _is_string(iri):
            self._drop_key(prefix)
            return None

        self.prefixes[prefix] = self.expand(iri, tolerant)
        return self

    def load(self, ctx, options=None):
        """
        Registers the prefixes of a JSON-LD context, dereferencing context
        URLs with the document loader.

        :param ctx: a local context, a context URL or a list of them.
        :param [options]: the options to use (see load_context()).

        :return: this registry.
        """
        return self.add_many(load_context(ctx, options))

    def is_prefixed_name(self, name):
        """
        Returns True if the given name has the shape `prefix:local`.

        :param name: the name to check.

        :return: True if the name is a prefixed name, False if not.
        """
        return is_prefixed_name(name)

    def expand(self, name, tolerant=False):
        """
        Expands the given name to an IRI.

            expand('schema:name')  # -> 'http://schema.org/name'
            expand('schema')  # -> 'http://schema.org/'
            expand('name')  # -> vocabulary + 'name'
            expand('http://schema.org/name')  # -> unchanged

        :param name: a prefixed name, a prefix, a term or an absolute IRI.
        :param [tolerant]: True to return the name unchanged instead of
          raising when it cannot be resolved.

        :return: the expanded IRI.
        """
        if not _is_string(name):
            raise RdfPrefixError(
                'Invalid name; a name to expand must be a string.',
                'rdfprefix.SyntaxError', {'name': name}, code='invalid name')

        if self.is_prefixed_name(name):
            prefix, local = name.split(':')
            if prefix in self.prefixes:
                return self.prefixes[prefix] + local
            if not tolerant:
                raise UnresolvedPrefixError(
                    'Prefix for `%s` is undefined.' % name,
                    'rdfprefix.UnresolvedPrefix',
                    {'name': name, 'prefix': prefix},
                    code='undefined prefix')
            return name

        if name in self.prefixes:
            return self.prefixes[name]
        if self.vocabulary and ':' not in name:
            return self.vocabulary + name
        # a colon without a prefixed name shape means an absolute IRI
        if not tolerant and ':' not in name:
            raise UnresolvedNameError(
                'Prefix or vocabulary for `%s` is undefined.' % name,
                'rdfprefix.UnresolvedName', {'name': name},
                code='undefined term')
        return name

    def compact(self, iri):
        """
        Compacts the given IRI to its shortest known form.

            compact('http://schema.org/name')  # -> 'schema:name'
            compact('http://schema.org/')  # -> 'schema'
            compact(vocabulary + 'name')  # -> 'name'

        The default vocabulary takes priority over prefixes. Among prefixes
        whose namespace starts the IRI, the longest namespace wins; if the
        same namespace is registered under several prefixes, the one that
        comes last in registry order wins.

        Only names that expand back to the IRI are returned: a vocabulary
        term or local name holding ':' or '/' is never produced.

        :param iri: an absolute IRI or anything expand() accepts.

        :return: the compacted name, or the IRI if it cannot be compacted.
        """
        iri = self.expand(iri)

        if self.vocabulary and iri.startswith(self.vocabulary):
            term = iri[len(self.vocabulary):]
            if (not _RESERVED_LOCAL_CHARS.search(term) and
                    self.prefixes.get(term, iri) == iri):
                return term

        found = None
        for prefix, namespace in self.prefixes.items():
            if not iri.startswith(namespace):
                continue
            # skip degenerate namespaces such as '' or 'a'
            if len(namespace) <= len(prefix):
                continue
            local = iri[len(namespace):]
            if local and not is_prefixed_name(prefix + ':' + local):
                continue
            if found is None or len(namespace) >= len(self.prefixes[found]):
                found = prefix

        if found is None:
            return iri
        namespace = self.prefixes[found]
        if namespace == iri:
            return found
        return found + ':' + iri[len(namespace):]

    def make_helper(self, prefix):
        """
        Creates a function that expands local names in the given prefix.

            schema = registry.make_helper('schema')
            schema('name')  # -> 'http://schema.org/name'

        :param prefix: the prefix.

        :return: a function (local_name, tolerant=False) -> IRI.
        """
        def helper(local_name, tolerant=False):
            if ':' in local_name:
                raise InvalidLocalNameError(
                    'Invalid local name `%s`; it must not contain a `:` '
                    'char.' % local_name,
                    'rdfprefix.InvalidLocalName',
                    {'prefix': prefix, 'name': local_name},
                    code='invalid local name')
            return self.expand(prefix + ':' + local_name, tolerant)

        return helper

    def to_json(self, with_vocab=False):
        """
        Returns a copy of the prefix mappings.

        :param [with_vocab]: True to include the default vocabulary as
          `@vocab` (see to_context()).

        :return: a new dict of prefix to namespace IRI.
        """
        rval = {}
        if with_vocab and self.vocabulary:
            rval[VOCAB] = self.vocabulary
        rval.update(self.prefixes)
        return rval

    def to_context(self):
        """
        Returns a copy of the prefix mappings usable as a JSON-LD context,
        including the default vocabulary if any.

        :return: a new dict.
        """
        return self.to_json(True)

    def _drop_key(self, key):
        if self.on_key_dropped is not None:
            self.on_key_dropped(key)
        else:
            log.debug('ignoring context key %r', key)


class RdfPrefixError(Exception):
    """
    Base class for rdfprefix errors.
    """

    def __init__(self, message, type_, details=None, code=None, cause=None):
        Exception.__init__(self, message)
        self.type = type_
        self.details = details
        self.code = code
        self.cause = cause
        self.causeTrace = traceback.extract_tb(*sys.exc_info()[2:])

    def __str__(self):
        rval = str(self.args)
        rval += '\nType: ' + self.type
        if self.code:
            rval += '\nCode: ' + self.code
        if self.details:
            rval += '\nDetails: ' + repr(self.details)
        if self.cause:
            rval += '\nCause: ' + str(self.cause)
            rval += ''.join(traceback.format_list(self.causeTrace))
        return rval


class UnresolvedPrefixError(RdfPrefixError):
    """
    Raised when the prefix of a prefixed name is not registered.
    """


class UnresolvedNameError(RdfPrefixError):
    """
    Raised when a bare name matches no prefix and there is no default
    vocabulary.
    """


class InvalidLocalNameError(RdfPrefixError):
    """
    Raised when a prefix helper is given a local name containing ':'.
    """


def _retrieve_contexts(ctx, load_document, cycles, base):
    """
    Flattens a @context value into local contexts, retrieving context URLs.

    :param ctx: a local context, a context URL or a list of them.
    :param load_document(url): the document loader.
    :param cycles: the context URLs currently being retrieved.
    :param base: the URL relative context URLs are resolved against.

    :return: the list of local contexts.
    """
    rval = []
    for entry in (ctx if _is_array(ctx) else [ctx]):
        if entry is None:
            continue
        if _is_object(entry):
            rval.append(entry)
            continue
        if not _is_string(entry):
            raise RdfPrefixError(
                'Invalid JSON-LD syntax; @context must be an object, a URL '
                'or an array of them.', 'rdfprefix.SyntaxError',
                {'context': entry}, code='invalid local context')

        url = urllib_parse.urljoin(base, entry) if base else entry
        if url in cycles:
            raise RdfPrefixError(
                'Cyclical @context URLs detected.',
                'rdfprefix.ContextUrlError', {'url': url},
                code='recursive context inclusion')
        if len(cycles) >= MAX_CONTEXT_URLS:
            raise RdfPrefixError(
                'Maximum number of @context URLs exceeded.',
                'rdfprefix.ContextUrlError', {'max': MAX_CONTEXT_URLS},
                code='context overflow')

        try:
            remote_doc = load_document(url)
            document = remote_doc['document']
        except Exception as cause:
            raise RdfPrefixError(
                'Dereferencing a URL did not result in a valid JSON-LD '
                'context.', 'rdfprefix.ContextUrlError', {'url': url},
                code='loading remote context failed', cause=cause)

        # parse string context as JSON
        if _is_string(document):
            try:
                document = json.loads(document)
            except Exception as cause:
                raise RdfPrefixError(
                    'Could not parse JSON from URL.',
                    'rdfprefix.ParseError', {'url': url},
                    code='loading remote context failed', cause=cause)

        if not _is_object(document):
            raise RdfPrefixError(
                'Dereferencing a URL did not result in a valid JSON-LD '
                'object.', 'rdfprefix.InvalidUrl', {'url': url},
                code='invalid remote context')

        log.debug('loaded remote context %s', url)
        local_ctx = _arrayify(document.get(CONTEXT, {}))
        if remote_doc.get('contextUrl') is not None:
            local_ctx.append(remote_doc['contextUrl'])
        rval.extend(_retrieve_contexts(
            local_ctx, load_document, cycles + [url], url))
    return rval


def _is_object(v):
    """
    Returns True if the given value is an Object.

    :param v: the value to check.

    :return: True if the value is an Object, False if not.
    """
    return isinstance(v, dict)


def _is_array(v):
    """
    Returns True if the given value is an Array.

    :param v: the value to check.

    :return: True if the value is an Array, False if not.
    """
    return isinstance(v, (list, tuple))


def _arrayify(v):
    """
    If value is an array, returns a copy of it; otherwise returns a new
    array containing only the value.
    """
    return list(v) if _is_array(v) else [v]


def _is_string(v):
    """
    Returns True if the given value is a String.

    :param v: the value to check.

    :return: True if the value is a String, False if not.
    """
    return isinstance(v, str)


# The default document loader.
try:
    _default_document_loader = requests_document_loader()
except ImportError:
    _default_document_loader = dummy_document_loader()
