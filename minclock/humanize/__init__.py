from .relative import (
    Direction,
    LocaleTemplateProvider,
    RelativeFormatter,
    TemplateCatalog,
    bucket,
    get_default_formatter,
    set_default_formatter,
)

__all__ = [
    "Direction",
    "LocaleTemplateProvider",
    "RelativeFormatter",
    "TemplateCatalog",
    "bucket",
    "get_default_formatter",
    "set_default_formatter",
]
