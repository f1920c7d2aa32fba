# project metadata, read by setup.py and rdfprefix.prefixes

__all__ = [
    '__copyright__', '__license__', '__version__'
]

__copyright__ = 'Copyright (c) 2015-2026 rdfprefix contributors'
__license__ = 'BSD 3-Clause license'
__version__ = '1.0.0'
