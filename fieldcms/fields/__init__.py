from fieldcms.fields.base import BaseField
from fieldcms.fields.choice import CheckboxField, RadioField, SelectField
from fieldcms.fields.color import ColorField
from fieldcms.fields.containers import ContainerField, GroupField, MetaboxField, TabsField
from fieldcms.fields.factory import BUILTIN_FIELD_TYPES, FieldFactory
from fieldcms.fields.numeric import DateField, NumberField
from fieldcms.fields.repeater import RepeaterField
from fieldcms.fields.rich import CustomHtmlField, WysiwygField
from fieldcms.fields.text import EmailField, PasswordField, TextareaField, TextField, UrlField
from fieldcms.fields.types import FieldKind, ValidationResult
from fieldcms.fields.upload import UploadField

__all__ = [
    "BUILTIN_FIELD_TYPES",
    "BaseField",
    "CheckboxField",
    "ColorField",
    "ContainerField",
    "CustomHtmlField",
    "DateField",
    "EmailField",
    "FieldFactory",
    "FieldKind",
    "GroupField",
    "MetaboxField",
    "NumberField",
    "PasswordField",
    "RadioField",
    "RepeaterField",
    "SelectField",
    "TabsField",
    "TextField",
    "TextareaField",
    "UploadField",
    "UrlField",
    "ValidationResult",
    "WysiwygField",
]
