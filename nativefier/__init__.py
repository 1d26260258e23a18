"""
nativefier: Wrap a web application into a standalone desktop bundle.

Stages a copy of the bundled Electron app template, persists the selected
build options alongside it, and drives electron-packager to produce a bundle
for the requested platform and architecture.
"""

__version__ = "1.0.0"
__author__ = "nativefier Team"
