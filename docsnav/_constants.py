"""Common literal values used across docsnav.

These constants keep locale codes, filenames and defaults centralized so the
builder, exporter and tests import the same values without drifting. Intended
for internal use within the docsnav package.

Examples
--------
>>> from docsnav import _constants
>>> _constants.DEFAULT_LOCALE
'/'
>>> _constants.EXPORT_PATH_TEMPLATE.format(version="v2")
'v2/.vuepress/config.js'
"""

DEFAULT_LOCALE = "/"
EXPORT_PATH_TEMPLATE = "{version}/.vuepress/config.js"
EXPORT_TEMPLATE_NAME = "config.js.jinja"
INDEX_DOCUMENTS = ("README.md", "index.md")
