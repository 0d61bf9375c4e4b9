"""
facetsearch – multi-collection search composition and facet state.

Import path convention::

    from facetsearch.application.filters import FilterCondition, serialize_all
    from facetsearch.application.dispatch import MultiSearchDispatcher
    from facetsearch.application.state import MultiSearchSession
    from facetsearch.adapters.typesense import HttpxTypesenseClient
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
