"""
Remote context loader using Requests.

.. module:: rdfprefix.documentloader.requests
  :synopsis: Remote context loader using Requests
"""
import re
import urllib.parse as urllib_parse

from rdfprefix.prefixes import (
    RdfPrefixError, parse_link_header, LINK_HEADER_REL)

ACCEPT = 'application/ld+json, application/json'

_JSON_CONTENT_TYPE = re.compile(r'application/(\w*\+)?json')


def requests_document_loader(secure=False, max_link_follows=2, **kwargs):
    """
    Create a context loader using Requests.

    HTML responses advertising a JSON-LD `rel="alternate"` link (as
    https://schema.org does) are followed to the linked document.

    :param secure: require all requests to use HTTPS (default: False).
    :param max_link_follows: maximum number of alternate links followed.
    :param **kwargs: extra keyword args for the Requests get() call, such as
      timeout or verify.

    :return: the loader function, returning {'document', 'contextUrl'}.
    """
    import requests

    def loader(url, options=None):
        """
        Retrieves the context document at the given URL.

        :param url: the URL to retrieve.
        :param [options]: 'headers' to send instead of the default Accept.

        :return: the parsed document and the URL of any context linked
          from the response headers.
        """
        headers = (options or {}).get('headers', {'Accept': ACCEPT})
        for _ in range(max_link_follows + 1):
            _check_url(url, secure)
            try:
                response = requests.get(url, headers=headers, **kwargs)
                response.raise_for_status()
            except requests.RequestException as cause:
                raise RdfPrefixError(
                    'Could not retrieve a context document from the URL.',
                    'rdfprefix.LoadDocumentError', {'url': url},
                    code='loading document failed', cause=cause)

            content_type = response.headers.get('content-type', '')
            links = parse_link_header(response.headers.get('link', ''))
            alternates = [
                link for link in links.get('alternate', [])
                if link.get('type') == 'application/ld+json']
            if alternates and not _JSON_CONTENT_TYPE.match(content_type):
                url = urllib_parse.urljoin(
                    response.url, alternates[0]['target'])
                continue

            return {
                'document': _parse_json(response, url),
                'contextUrl': _context_url(
                    links, content_type, response.url),
            }

        raise RdfPrefixError(
            'Exceeded maximum link header redirects (%d).' % max_link_follows,
            'rdfprefix.LoadDocumentError', {'url': url},
            code='loading document failed')

    return loader


def _check_url(url, secure):
    pieces = urllib_parse.urlparse(url)
    if pieces.scheme not in ('http', 'https') or not pieces.netloc:
        raise RdfPrefixError(
            'URL could not be dereferenced; only "http" and "https" URLs '
            'are supported.',
            'rdfprefix.InvalidUrl', {'url': url},
            code='loading document failed')
    if secure and pieces.scheme != 'https':
        raise RdfPrefixError(
            'URL could not be dereferenced; secure mode enabled and the '
            'URL\'s scheme is not "https".',
            'rdfprefix.InvalidUrl', {'url': url},
            code='loading document failed')


def _parse_json(response, url):
    try:
        return response.json()
    except ValueError as cause:
        raise RdfPrefixError(
            'Could not parse JSON from URL.',
            'rdfprefix.ParseError', {'url': url},
            code='loading document failed', cause=cause)


def _context_url(links, content_type, base):
    # a JSON-LD body carries its own @context
    if content_type.startswith('application/ld+json'):
        return None
    context_links = links.get(LINK_HEADER_REL, [])
    if len(context_links) > 1:
        raise RdfPrefixError(
            'URL could not be dereferenced, it has more than one associated '
            'HTTP Link Header.',
            'rdfprefix.LoadDocumentError', {'url': base},
            code='multiple context link headers')
    if context_links:
        return urllib_parse.urljoin(base, context_links[0]['target'])
    return None
