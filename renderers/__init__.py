"""
renderers - Output renderers for xyDoc.

Subpackages:
    renderers.pdf  - Paginated PDF layout engine (reportlab)
"""
