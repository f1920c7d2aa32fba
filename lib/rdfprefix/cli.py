#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
rdfprefix - CLI script for rdfprefix
"""
import argparse
import codecs
import json
import logging
import os
import sys

from rdfprefix import prefixes

log = logging.getLogger()


def read_context(source):
    """
    Read a context given as a file path, inline JSON or a URL

    :param source: path, JSON text or context URL
    :returns: a @context value for PrefixRegistry.load()
    """
    if os.path.exists(source):
        log.debug("read_context: file %r" % source)
        with codecs.open(source, 'r', encoding='utf-8') as f:
            document = json.load(f)
    elif source.lstrip().startswith(('{', '[')):
        document = json.loads(source)
    else:
        log.debug("read_context: url %r" % source)
        return source

    # a full document carries its context under @context
    if isinstance(document, dict) and prefixes.CONTEXT in document:
        return document[prefixes.CONTEXT]
    return document


def build_registry(opts):
    """
    Create the prefix registry described by the command-line options

    :param opts: parsed options
    :returns: PrefixRegistry
    :rtype: prefixes.PrefixRegistry
    """
    registry = prefixes.PrefixRegistry()
    for source in opts.contexts or []:
        registry.load(read_context(source))
    for prefix, iri in opts.prefixes or []:
        registry.add(prefix, iri)
    if opts.vocab:
        registry.add(prefixes.VOCAB, opts.vocab)
    log.debug("build_registry: %r" % registry.to_context())
    return registry


def prefix_definition(value):
    prefix, sep, iri = value.partition('=')
    if not sep or not prefix or not iri:
        raise argparse.ArgumentTypeError(
            'expected PREFIX=IRI, got %r' % value)
    return prefix, iri


def main(*argv):
    prs = argparse.ArgumentParser(
        prog='rdfprefix',
        description='Expand and compact prefixed names')

    prs.add_argument('names',
                     help='Names or IRIs to process',
                     nargs='*')

    prs.add_argument('-c', '--context',
                     help=('@context file, JSON or URI to take prefixes '
                           'from (repeatable)'),
                     dest='contexts',
                     action='append')
    prs.add_argument('-p', '--prefix',
                     help='Register a prefix as PREFIX=IRI (repeatable)',
                     dest='prefixes',
                     action='append',
                     type=prefix_definition)
    prs.add_argument('--vocab',
                     help='Default vocabulary IRI',
                     dest='vocab',
                     action='store')

    prs.add_argument('--expand',
                     help='ACTION: Expand names to IRIs [default]',
                     dest='action',
                     action='store_const',
                     const='expand',
                     default='expand')
    prs.add_argument('--compact',
                     help='ACTION: Compact IRIs to prefixed names',
                     dest='action',
                     action='store_const',
                     const='compact')
    prs.add_argument('--to-json',
                     help='ACTION: Print the prefix mappings',
                     dest='action',
                     action='store_const',
                     const='to_json')
    prs.add_argument('--to-context',
                     help='ACTION: Print the prefix mappings as a @context',
                     dest='action',
                     action='store_const',
                     const='to_context')

    prs.add_argument('--tolerant',
                     help='Leave unresolvable names unchanged',
                     dest='tolerant',
                     action='store_true',
                     default=False)
    prs.add_argument('--indent',
                     help='Indent json with n spaces [default: 1]',
                     dest='indent',
                     action='store',
                     type=int,
                     default=1)

    prs.add_argument('-v', '--verbose',
                     dest='verbose',
                     action='store_true',)
    prs.add_argument('-q', '--quiet',
                     dest='quiet',
                     action='store_true',)
    if not argv:
        _argv = sys.argv[1:]
    else:
        _argv = list(argv)
    opts = prs.parse_args(args=_argv)

    if not opts.quiet:
        logging.basicConfig()

        if opts.verbose:
            logging.getLogger().setLevel(logging.DEBUG)

    try:
        registry = build_registry(opts)
        if opts.action == 'to_json':
            print(json.dumps(registry.to_json(), indent=opts.indent))
        elif opts.action == 'to_context':
            print(json.dumps(registry.to_context(), indent=opts.indent))
        elif opts.action == 'compact':
            for name in opts.names:
                print(registry.compact(name))
        else:
            for name in opts.names:
                print(registry.expand(name, opts.tolerant))
    except prefixes.RdfPrefixError as e:
        log.error("%s", e.args[0])
        log.debug("%s", e)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main(*sys.argv[1:]))
