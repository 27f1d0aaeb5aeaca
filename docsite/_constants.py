"""Common literal values used across docsite.

These constants keep file names and plugin keys centralized so the loader,
resolvers, CLI and tests import the same values without drifting.

Examples
--------
>>> from docsite import _constants
>>> _constants.DEFAULT_CONFIG_FILE
'mkdocs.yml'
>>> "guides/index.md".endswith(_constants.MARKDOWN_SUFFIXES)
True
"""

DEFAULT_CONFIG_FILE = "mkdocs.yml"
DEFAULT_DOCS_DIR = "docs"
DEFAULT_SITE_DIR = "site"
DEFAULT_THEME = "mkdocs"
DEFAULT_PLUGINS = ("search",)
MARKDOWN_SUFFIXES = (".md", ".markdown")
INDEX_STEMS = ("index", "README")
REDIRECTS_PLUGIN = "redirects"
LLMSTXT_PLUGIN = "llmstxt"
