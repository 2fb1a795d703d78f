"""
The VIEW layer holds the PySide6 widgets and the pyqtgraph render surface.
"""
