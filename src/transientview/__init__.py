"""
transientview
=============
Interactive viewer for time- and space-resolved device simulation traces.
"""
