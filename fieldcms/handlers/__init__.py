from fieldcms.handlers.base import BaseHandler
from fieldcms.handlers.records import MetaboxDescriptor, RecordType, RecordTypeHandler
from fieldcms.handlers.settings import SettingsPage, SettingsPageHandler
from fieldcms.handlers.taxonomies import Taxonomy, TaxonomyHandler

__all__ = [
    "BaseHandler",
    "MetaboxDescriptor",
    "RecordType",
    "RecordTypeHandler",
    "SettingsPage",
    "SettingsPageHandler",
    "Taxonomy",
    "TaxonomyHandler",
]
