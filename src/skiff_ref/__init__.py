"""Reference tree-walking interpreter for the Skiff language."""

import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())
