"""Effect engine package.

Submodules are imported directly (``legion_rgb.core.effects.manager``); this
package stays empty because the driver imports ``transitions`` from here.
"""
